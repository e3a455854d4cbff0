"""
Tests for the Arena service (dilemmaarena.arena).
"""

import os

import pytest

from dilemmaarena.arena import Arena, default_display_name
from dilemmaarena.storage import StorageError
from dilemmaarena.tournament import TournamentConfig


@pytest.fixture
def arena(memory_store, config):
    """Create an arena over an empty in-memory store."""
    return Arena(memory_store, config)


class TestSaveStrategy:
    """Tests for saving strategies."""

    def test_first_strategy_plays_nobody(self, arena, tit_for_tat_tree):
        """Test that the first strategy has no opponents."""
        strategy, outcome = arena.save_strategy("Mirror", tit_for_tat_tree, author_id="u1")

        assert strategy.score == 0
        assert outcome.records == []
        assert outcome.is_empty

    def test_on_save_updates_scores(self, arena, tit_for_tat_tree, always_betray_tree):
        """Test that the new entrant and its opponents get their match scores."""
        mirror, _ = arena.save_strategy("Mirror", tit_for_tat_tree, author_id="u1")
        shark, outcome = arena.save_strategy("Shark", always_betray_tree, author_id="u2")

        # Shark betrays a cooperating Mirror once, then both betray.
        assert len(outcome.records) == 1
        assert (outcome.records[0].score1, outcome.records[0].score2) == (2, 0)
        assert shark.score == 2
        assert arena.store.get_strategy(mirror.id).score == 0
        assert len(arena.match_logs()) == 1

    def test_default_display_name(self, arena, tit_for_tat_tree):
        """Test the fallback author name."""
        strategy, _ = arena.save_strategy("Mirror", tit_for_tat_tree, author_id="abcdef123456")
        assert strategy.author_display_name == "User-abcdef"
        assert default_display_name(None) == "User-anon"

    def test_explicit_display_name(self, arena, tit_for_tat_tree):
        """Test that a given author name is kept."""
        strategy, _ = arena.save_strategy(
            "Mirror", tit_for_tat_tree, author_id="u1", author_display_name="  Ada "
        )
        assert strategy.author_display_name == "Ada"

    def test_blank_name_rejected(self, arena, tit_for_tat_tree):
        """Test that a strategy needs a name."""
        with pytest.raises(ValueError):
            arena.save_strategy("   ", tit_for_tat_tree)
        assert arena.store.list_strategies() == []

    def test_clear_during_save(self, arena, tit_for_tat_tree, always_betray_tree, monkeypatch):
        """Test that a clear between storing and committing fails the save."""
        arena.save_strategy("Mirror", tit_for_tat_tree, author_id="u1")
        run_on_save = arena.runner.run_on_save_tournament

        def clear_then_run(new_strategy, existing):
            assert arena.clear_arena() is True
            return run_on_save(new_strategy, existing)

        monkeypatch.setattr(arena.runner, "run_on_save_tournament", clear_then_run)

        with pytest.raises(StorageError):
            arena.save_strategy("Shark", always_betray_tree, author_id="u2")

        assert arena.store.list_strategies() == []
        assert arena.match_logs() == []


class TestGrandTournament:
    """Tests for Arena.run_grand_tournament."""

    def test_too_few_strategies(self, arena, tit_for_tat_tree):
        """Test that the pass is skipped with fewer than two strategies."""
        assert arena.run_grand_tournament() is None
        arena.save_strategy("Mirror", tit_for_tat_tree)
        assert arena.run_grand_tournament() is None

    def test_scores_accumulate(self, arena, tit_for_tat_tree, always_betray_tree):
        """Test that grand deltas are added to existing scores."""
        arena.save_strategy("Mirror", tit_for_tat_tree)
        arena.save_strategy("Shark", always_betray_tree)
        before = {s.id: s.score for s in arena.store.list_strategies()}

        outcome = arena.run_grand_tournament()

        after = {s.id: s.score for s in arena.store.list_strategies()}
        for strategy_id, delta in outcome.score_deltas.items():
            assert after[strategy_id] == before[strategy_id] + delta
        assert len(arena.match_logs()) == 2
        assert not arena.tournament_running

    def test_rejected_while_running(self, arena, tit_for_tat_tree, always_betray_tree):
        """Test that admin operations and passes are refused during a pass."""
        arena.save_strategy("Mirror", tit_for_tat_tree)
        arena.save_strategy("Shark", always_betray_tree)

        assert arena.runner.try_begin_pass()
        try:
            assert arena.tournament_running
            assert arena.run_grand_tournament() is None
            assert arena.reset_scores() is False
            assert arena.clear_arena() is False
        finally:
            arena.runner.end_pass()

        assert len(arena.store.list_strategies()) == 2

    def test_failed_commit(self, arena, tit_for_tat_tree, always_betray_tree, monkeypatch):
        """Test that a failed commit propagates and leaves scores unchanged."""
        arena.save_strategy("Mirror", tit_for_tat_tree)
        arena.save_strategy("Shark", always_betray_tree)
        before = {s.id: s.score for s in arena.store.list_strategies()}
        records_before = arena.match_logs()

        def broken_apply(outcome):
            raise StorageError("write failed")

        monkeypatch.setattr(arena.store, "apply_outcome", broken_apply)

        with pytest.raises(StorageError):
            arena.run_grand_tournament()

        assert {s.id: s.score for s in arena.store.list_strategies()} == before
        assert arena.match_logs() == records_before
        assert not arena.tournament_running

    def test_export_results(self, memory_store, tmp_path, tit_for_tat_tree, always_betray_tree):
        """Test that passes are exported when configured."""
        config = TournamentConfig(seed=1, export_results=True, output_dir=str(tmp_path / "out"))
        arena = Arena(memory_store, config)
        arena.save_strategy("Mirror", tit_for_tat_tree)
        arena.save_strategy("Shark", always_betray_tree)

        arena.run_grand_tournament()

        files = sorted(os.listdir(tmp_path / "out"))
        assert len(files) == 3
        assert any(name.startswith("tournament_grand_") for name in files)


class TestAdministration:
    """Tests for standings, logs and admin operations."""

    def test_standings(self, arena, tit_for_tat_tree, always_betray_tree):
        """Test that standings are ranked by score."""
        arena.save_strategy("Mirror", tit_for_tat_tree, author_display_name="Ada")
        arena.save_strategy("Shark", always_betray_tree, author_display_name="Bo")

        standings = arena.standings()

        assert [s.name for s in standings] == ["Shark", "Mirror"]
        assert standings[0].author == "Bo"

    def test_reset_scores(self, arena, tit_for_tat_tree, always_betray_tree):
        """Test resetting every score."""
        arena.save_strategy("Mirror", tit_for_tat_tree)
        arena.save_strategy("Shark", always_betray_tree)

        assert arena.reset_scores() is True
        assert all(s.score == 0 for s in arena.standings())

    def test_clear_arena(self, arena, tit_for_tat_tree, always_betray_tree):
        """Test deleting everything."""
        arena.save_strategy("Mirror", tit_for_tat_tree)
        arena.save_strategy("Shark", always_betray_tree)

        assert arena.clear_arena() is True
        assert arena.standings() == []
        assert arena.match_logs() == []

    def test_match_logs_limit(self, arena, tit_for_tat_tree, always_betray_tree):
        """Test limiting the match log."""
        arena.save_strategy("Mirror", tit_for_tat_tree)
        arena.save_strategy("Shark", always_betray_tree)
        arena.run_grand_tournament()

        assert len(arena.match_logs()) == 2
        assert len(arena.match_logs(limit=1)) == 1
