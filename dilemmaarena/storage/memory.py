"""
In-memory arena store.
"""

import logging
import uuid
from threading import RLock
from typing import Dict, List, Optional

from dilemmaarena.core.logic_tree import LogicTree
from dilemmaarena.tournament.results import MatchRecord, TournamentOutcome
from dilemmaarena.tournament.strategies import Strategy, utc_now

from .base import ArenaStore, StorageError

logger = logging.getLogger(__name__)


def _standing_key(strategy: Strategy):
    created = strategy.created_at.timestamp() if strategy.created_at else float("inf")
    return (-strategy.score, created)


class InMemoryArenaStore(ArenaStore):
    """
    Arena store kept in process memory.

    Every change is built on copies of the current state and swapped in by
    _commit, so a failed change leaves the previous state in place.
    Subclasses persist the new state by overriding _commit.
    """

    def __init__(self):
        self._lock = RLock()
        self._strategies: Dict[str, Strategy] = {}
        self._records: List[MatchRecord] = []

    def list_strategies(self) -> List[Strategy]:
        with self._lock:
            return sorted(self._strategies.values(), key=_standing_key)

    def get_strategy(self, strategy_id: str) -> Optional[Strategy]:
        with self._lock:
            return self._strategies.get(strategy_id)

    def add_strategy(
        self,
        name: str,
        logic_tree: LogicTree,
        author_id: Optional[str] = None,
        author_display_name: str = "",
    ) -> Strategy:
        strategy = Strategy(
            id=uuid.uuid4().hex,
            name=name,
            logic_tree=logic_tree,
            author_display_name=author_display_name,
            author_id=author_id,
            score=0,
            created_at=utc_now(),
        )
        with self._lock:
            strategies = dict(self._strategies)
            strategies[strategy.id] = strategy
            self._commit(strategies, self._records)
        logger.info(f"Stored strategy {strategy.name} ({strategy.id})")
        return strategy

    def apply_outcome(self, outcome: TournamentOutcome) -> None:
        with self._lock:
            missing = [sid for sid in outcome.score_deltas if sid not in self._strategies]
            if missing:
                raise StorageError(
                    f"Cannot apply {outcome.kind} outcome: unknown strategy id(s) "
                    f"{', '.join(sorted(missing))}"
                )

            strategies = dict(self._strategies)
            for strategy_id, delta in outcome.score_deltas.items():
                current = strategies[strategy_id]
                strategies[strategy_id] = current.with_score(current.score + delta)

            records = self._records + list(outcome.records)
            self._commit(strategies, records)

        logger.info(
            f"Committed {outcome.kind} outcome: {len(outcome.records)} records, "
            f"{len(outcome.score_deltas)} score updates"
        )

    def reset_scores(self) -> None:
        with self._lock:
            strategies = {sid: s.with_score(0) for sid, s in self._strategies.items()}
            self._commit(strategies, self._records)
        logger.info("All strategy scores reset to 0")

    def clear_arena(self) -> None:
        with self._lock:
            self._commit({}, [])
        logger.info("Arena cleared")

    def list_match_records(self, limit: Optional[int] = None) -> List[MatchRecord]:
        with self._lock:
            newest_first = list(reversed(self._records))
        if limit is not None:
            return newest_first[:limit]
        return newest_first

    def _commit(self, strategies: Dict[str, Strategy], records: List[MatchRecord]) -> None:
        """Swap in a new state. Must either fully succeed or raise."""
        self._strategies = strategies
        self._records = records
