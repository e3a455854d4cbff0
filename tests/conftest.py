"""Pytest configuration and shared fixtures for testing."""
import pytest
import numpy as np

from dilemmaarena.constants import Action, ConditionKind, Move
from dilemmaarena.core.logic_tree import Clause, Condition, LogicTree
from dilemmaarena.storage import InMemoryArenaStore, JsonArenaStore
from dilemmaarena.tournament import Strategy, TournamentConfig


@pytest.fixture
def rng():
    """Create a seeded generator for RANDOM actions."""
    return np.random.default_rng(42)


@pytest.fixture
def tit_for_tat_tree():
    """Create a logic tree that copies the opponent's last move."""
    return LogicTree.from_clauses(
        Clause.if_(Condition(ConditionKind.OPPONENT_LAST_MOVE, Move.BETRAY),
                   action=Action.BETRAY),
        Clause.else_(action=Action.COOPERATE),
    )


@pytest.fixture
def always_betray_tree():
    """Create a logic tree whose only clause never matches, plus an ELSE that betrays."""
    return LogicTree.from_clauses(
        Clause.if_(Condition(ConditionKind.OPPONENT_NTH_LAST_MOVE, Move.BETRAY, n=100),
                   action=Action.COOPERATE),
        Clause.else_(action=Action.BETRAY),
    )


@pytest.fixture
def builtin_strategies():
    """Create strategy snapshots for every built-in logic tree."""
    return [
        Strategy.builtin("alwaysCooperate"),
        Strategy.builtin("alwaysBetray"),
        Strategy.builtin("titForTat"),
        Strategy.builtin("random"),
    ]


@pytest.fixture
def config():
    """Create a seeded tournament configuration."""
    return TournamentConfig(seed=42)


@pytest.fixture
def memory_store():
    """Create an empty in-memory store."""
    return InMemoryArenaStore()


@pytest.fixture
def arena_path(tmp_path):
    """Path of an arena document inside a temporary directory."""
    return tmp_path / "arena.json"


@pytest.fixture
def json_store(arena_path):
    """Create an empty JSON-backed store."""
    return JsonArenaStore(str(arena_path))
