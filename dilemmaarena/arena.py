"""
Arena service.

Connects a store to the tournament runner: saving a strategy runs its
on-save tournament, the grand tournament runs over the whole arena, and each
pass is committed to the store as a single unit.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from dilemmaarena.constants import ANONYMOUS_AUTHOR_PREFIX
from dilemmaarena.core.logic_tree import LogicTree, LogicTreeError
from dilemmaarena.storage.base import ArenaStore
from dilemmaarena.tournament.config import TournamentConfig
from dilemmaarena.tournament.results import (
    MatchRecord,
    ResultsExporter,
    StrategyStanding,
    TournamentOutcome,
    rank_strategies,
)
from dilemmaarena.tournament.runner import TournamentRunner
from dilemmaarena.tournament.strategies import Strategy

logger = logging.getLogger(__name__)


def default_display_name(author_id: Optional[str]) -> str:
    """Fallback author name built from the first characters of the author id."""
    return f"{ANONYMOUS_AUTHOR_PREFIX}{(author_id or 'anon')[:6]}"


class Arena:
    """
    Public entry point for running an arena.

    Example usage:
        arena = Arena(JsonArenaStore("arena.json"), TournamentConfig(seed=1))
        strategy, outcome = arena.save_strategy("Mirror", tree, author_id="u1")
        arena.run_grand_tournament()
        for standing in arena.standings():
            print(standing.name, standing.score)
    """

    def __init__(
        self,
        store: ArenaStore,
        config: Optional[TournamentConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Args:
            store: Storage collaborator that owns strategies and records
            config: Tournament configuration (defaults if None)
            rng: Generator for RANDOM actions (built from config.seed if None)
        """
        self.store = store
        self.config = config or TournamentConfig()
        self.runner = TournamentRunner(self.config, rng=rng)

    @property
    def tournament_running(self) -> bool:
        """Whether a grand tournament or admin operation holds the arena."""
        return self.runner.in_progress

    def save_strategy(
        self,
        name: str,
        logic_tree: LogicTree,
        author_id: Optional[str] = None,
        author_display_name: Optional[str] = None,
    ) -> Tuple[Strategy, TournamentOutcome]:
        """
        Store a new strategy and play it against every existing one.

        Saving does not take the tournament gate, so saves proceed while a
        grand tournament runs. A reset or clear that lands between storing
        the strategy and committing its on-save outcome is not blocked
        either: after a clear the new strategy is gone and the commit raises
        StorageError, leaving the arena empty.

        Args:
            name: Strategy name (must not be blank)
            logic_tree: The authored rules
            author_id: Identifier of the author
            author_display_name: Shown name; derived from author_id if blank

        Returns:
            Tuple of (stored strategy, committed on-save outcome)

        Raises:
            ValueError: If the name is blank or the tree is invalid
            StorageError: If the store cannot save the strategy or the outcome,
                including when the arena was cleared mid-save
        """
        if not name or not name.strip():
            raise ValueError("Strategy name is required")

        errors = logic_tree.validate()
        if errors:
            raise LogicTreeError('; '.join(errors))

        display_name = (author_display_name or "").strip() or default_display_name(author_id)

        existing = self.store.list_strategies()
        strategy = self.store.add_strategy(
            name=name.strip(),
            logic_tree=logic_tree,
            author_id=author_id,
            author_display_name=display_name,
        )

        outcome = self.runner.run_on_save_tournament(strategy, existing)
        self.store.apply_outcome(outcome)

        return self.store.get_strategy(strategy.id) or strategy, outcome

    def run_grand_tournament(self) -> Optional[TournamentOutcome]:
        """
        Run and commit a round-robin over every stored strategy.

        Returns:
            The committed outcome, or None if skipped (fewer than two
            strategies, or a pass already in progress)

        Raises:
            StorageError: If the commit fails; scores and records stay as
                they were
        """
        if not self.runner.try_begin_pass():
            logger.warning("Tournament already in progress; ignoring request")
            return None

        try:
            strategies = self.store.list_strategies()
            if len(strategies) < 2:
                logger.info(
                    f"Skipping grand tournament: need at least 2 strategies, "
                    f"got {len(strategies)}"
                )
                return None

            outcome = self.runner.play_grand_tournament(strategies)
            try:
                self.store.apply_outcome(outcome)
            except Exception:
                logger.error("Grand tournament failed to commit", exc_info=True)
                raise

            if self.config.export_results:
                exporter = ResultsExporter(self.config.output_dir)
                exporter.export_all(
                    outcome, self.store.list_strategies(), config=self.config.to_dict()
                )

            return outcome
        finally:
            self.runner.end_pass()

    def reset_scores(self) -> bool:
        """
        Set every score to zero.

        Returns:
            False if a tournament is in progress and nothing was done
        """
        if not self.runner.try_begin_pass():
            logger.warning("Tournament in progress; not resetting scores")
            return False
        try:
            self.store.reset_scores()
            return True
        finally:
            self.runner.end_pass()

    def clear_arena(self) -> bool:
        """
        Delete every strategy and match record.

        Returns:
            False if a tournament is in progress and nothing was done
        """
        if not self.runner.try_begin_pass():
            logger.warning("Tournament in progress; not clearing arena")
            return False
        try:
            self.store.clear_arena()
            return True
        finally:
            self.runner.end_pass()

    def standings(self) -> List[StrategyStanding]:
        """Strategies ranked by score."""
        return rank_strategies(self.store.list_strategies())

    def match_logs(self, limit: Optional[int] = None) -> List[MatchRecord]:
        """Match records, newest first."""
        return self.store.list_match_records(limit=limit)
