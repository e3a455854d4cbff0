"""
Storage collaborator interface.

A store owns strategies and match records. The tournament engine hands it a
TournamentOutcome and the store applies every delta and appends every record
as one unit, or applies nothing.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from dilemmaarena.core.logic_tree import LogicTree
from dilemmaarena.tournament.results import MatchRecord, TournamentOutcome
from dilemmaarena.tournament.strategies import Strategy


class StorageError(RuntimeError):
    """Raised when the store cannot apply or persist a change."""


class ArenaStore(ABC):
    """Abstract base class for arena storage."""

    @abstractmethod
    def list_strategies(self) -> List[Strategy]:
        """All strategies, highest score first (ties: oldest first)."""

    @abstractmethod
    def get_strategy(self, strategy_id: str) -> Optional[Strategy]:
        """Look up one strategy by id."""

    @abstractmethod
    def add_strategy(
        self,
        name: str,
        logic_tree: LogicTree,
        author_id: Optional[str] = None,
        author_display_name: str = "",
    ) -> Strategy:
        """
        Store a new strategy with a score of zero.

        Returns:
            The stored strategy, with its assigned id and creation time
        """

    @abstractmethod
    def apply_outcome(self, outcome: TournamentOutcome) -> None:
        """
        Add every score delta and append every match record atomically.

        Raises:
            StorageError: If any part cannot be applied; nothing changes then
        """

    @abstractmethod
    def reset_scores(self) -> None:
        """Set every strategy's score to zero."""

    @abstractmethod
    def clear_arena(self) -> None:
        """Delete all strategies and match records."""

    @abstractmethod
    def list_match_records(self, limit: Optional[int] = None) -> List[MatchRecord]:
        """Match records, newest first."""
