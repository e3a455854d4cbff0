"""
Strategy descriptors for tournament participants.

This module provides the snapshot of a stored strategy that the tournament
engine works with, and the factory that turns it into a decision function.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dilemmaarena.core.builtins import BUILTIN_LOGIC_TREES
from dilemmaarena.core.interpreter import StrategyInterpreter, compile_logic_tree
from dilemmaarena.core.logic_tree import LogicTree

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class Strategy:
    """
    Snapshot of a stored strategy.

    Only the storage layer changes a strategy's score; tournaments work on
    these immutable snapshots and report score deltas.

    Attributes:
        id: Identifier assigned by the store
        name: Display name of the strategy
        author_display_name: Name shown for the author
        author_id: Identifier of the author
        logic_tree: The authored decision rules
        score: Accumulated tournament score
        created_at: When the strategy was stored
    """

    id: str
    name: str
    logic_tree: LogicTree
    author_display_name: str = ""
    author_id: Optional[str] = None
    score: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def builtin(cls, key: str, strategy_id: Optional[str] = None,
                name: Optional[str] = None) -> "Strategy":
        """
        Create a descriptor for one of the built-in logic trees.

        Args:
            key: Built-in name, e.g. "titForTat"
            strategy_id: Identifier (defaults to the key)
            name: Display name (defaults to the key)
        """
        if key not in BUILTIN_LOGIC_TREES:
            raise ValueError(
                f"No logic tree for built-in strategy: {key} "
                f"(choose from {', '.join(sorted(BUILTIN_LOGIC_TREES))})"
            )
        return cls(
            id=strategy_id or key,
            name=name or key,
            logic_tree=BUILTIN_LOGIC_TREES[key],
            author_display_name="Arena",
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "Strategy":
        """
        Create a Strategy from a stored dictionary.

        Stored trees are loaded leniently by default so records written
        before validation existed still load.

        Args:
            data: Dictionary with strategy fields
            strict: Reject trees with unreachable clauses instead of trimming

        Returns:
            Strategy instance
        """
        tree_data = data.get("logic_tree", data.get("clauses", []))
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            logic_tree=LogicTree.from_dict(tree_data, strict=strict),
            author_display_name=data.get(
                "author_display_name", data.get("authorDisplayName", "")
            ),
            author_id=data.get("author_id", data.get("authorId")),
            score=int(data.get("score", 0)),
            created_at=parse_timestamp(data.get("created_at", data.get("createdAt"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "author_display_name": self.author_display_name,
            "author_id": self.author_id,
            "logic_tree": self.logic_tree.to_dict(),
            "score": self.score,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def with_score(self, score: int) -> "Strategy":
        """Copy of this snapshot with a different score."""
        return replace(self, score=score)

    def get_display_info(self) -> str:
        """Get a human-readable description of the strategy."""
        author = f" by {self.author_display_name}" if self.author_display_name else ""
        return f"{self.name}{author} ({len(self.logic_tree)} clauses, score {self.score})"

    def __repr__(self) -> str:
        return f"Strategy(id={self.id!r}, name={self.name!r}, score={self.score})"


def compile_strategy(strategy: Strategy) -> StrategyInterpreter:
    """
    Create the decision function for a strategy.

    Args:
        strategy: Strategy snapshot

    Returns:
        Interpreter bound to the strategy's logic tree
    """
    logger.debug(f"Compiling strategy {strategy.name} ({strategy.id})")
    return compile_logic_tree(strategy.logic_tree)


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)
