"""
Tournament results handling and export.

This module provides the match record and result bundle a tournament pass
produces, and an exporter that writes them to JSON and CSV.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from dilemmaarena.constants import GRAND_TOURNAMENT, ON_SAVE_TOURNAMENT, Move

from .match import MatchOutcome
from .strategies import Strategy, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


def new_record_id() -> str:
    """Generate a unique match record identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class MatchRecord:
    """
    Log entry for one played match.

    Attributes:
        id: Unique record identifier
        strategy1_id: Id of the strategy on the first side
        strategy1_name: Its name at the time of the match
        strategy2_id: Id of the strategy on the second side
        strategy2_name: Its name at the time of the match
        moves1: First side's moves in round order
        moves2: Second side's moves in round order
        score1: First side's match score
        score2: Second side's match score
        played_at: When the match was simulated
        strategy1_author: Author display name of the first side
        strategy2_author: Author display name of the second side
    """

    id: str
    strategy1_id: str
    strategy1_name: str
    strategy2_id: str
    strategy2_name: str
    moves1: Tuple[Move, ...]
    moves2: Tuple[Move, ...]
    score1: int
    score2: int
    played_at: datetime
    strategy1_author: str = ""
    strategy2_author: str = ""

    @classmethod
    def from_match(
        cls,
        strategy1: Strategy,
        strategy2: Strategy,
        outcome: MatchOutcome,
        played_at: Optional[datetime] = None,
    ) -> "MatchRecord":
        """Build a record from two participants and their match outcome."""
        return cls(
            id=new_record_id(),
            strategy1_id=strategy1.id,
            strategy1_name=strategy1.name,
            strategy2_id=strategy2.id,
            strategy2_name=strategy2.name,
            moves1=tuple(outcome.moves1),
            moves2=tuple(outcome.moves2),
            score1=outcome.score1,
            score2=outcome.score2,
            played_at=played_at or utc_now(),
            strategy1_author=strategy1.author_display_name,
            strategy2_author=strategy2.author_display_name,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchRecord":
        """Create a MatchRecord from a stored dictionary."""
        return cls(
            id=str(data["id"]),
            strategy1_id=str(data["strategy1_id"]),
            strategy1_name=data.get("strategy1_name", ""),
            strategy2_id=str(data["strategy2_id"]),
            strategy2_name=data.get("strategy2_name", ""),
            moves1=tuple(Move.from_value(m) for m in data.get("moves1", [])),
            moves2=tuple(Move.from_value(m) for m in data.get("moves2", [])),
            score1=int(data.get("score1", 0)),
            score2=int(data.get("score2", 0)),
            played_at=parse_timestamp(data.get("played_at")) or utc_now(),
            strategy1_author=data.get("strategy1_author", ""),
            strategy2_author=data.get("strategy2_author", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "strategy1_id": self.strategy1_id,
            "strategy1_name": self.strategy1_name,
            "strategy1_author": self.strategy1_author,
            "strategy2_id": self.strategy2_id,
            "strategy2_name": self.strategy2_name,
            "strategy2_author": self.strategy2_author,
            "moves1": [m.value for m in self.moves1],
            "moves2": [m.value for m in self.moves2],
            "score1": self.score1,
            "score2": self.score2,
            "played_at": self.played_at.isoformat(),
        }

    def moves_as_text(self) -> Tuple[str, str]:
        """Compact C/B strings for both sides."""
        return (
            "".join(m.value[0] for m in self.moves1),
            "".join(m.value[0] for m in self.moves2),
        )


@dataclass
class TournamentOutcome:
    """
    Everything one tournament pass asks the store to persist.

    The store applies score_deltas and appends records as one atomic unit.

    Attributes:
        kind: "grand" or "on_save"
        score_deltas: Points to add to each strategy's score
        records: Match records in play order
        new_strategy_id: The new entrant, for on-save passes
        started_at: When the pass started
        finished_at: When the pass finished
    """

    kind: str
    score_deltas: Dict[str, int] = field(default_factory=dict)
    records: List[MatchRecord] = field(default_factory=list)
    new_strategy_id: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        """True when the pass produced nothing to persist."""
        return not self.records and not any(self.score_deltas.values())

    @property
    def new_strategy_delta(self) -> int:
        """Total points earned by the new entrant (on-save passes)."""
        if self.new_strategy_id is None:
            return 0
        return self.score_deltas.get(self.new_strategy_id, 0)

    @property
    def opponent_deltas(self) -> Dict[str, int]:
        """Deltas for everyone except the new entrant."""
        return {
            strategy_id: delta
            for strategy_id, delta in self.score_deltas.items()
            if strategy_id != self.new_strategy_id
        }

    @property
    def total_points(self) -> int:
        """Sum of every delta in the pass."""
        return sum(self.score_deltas.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "kind": self.kind,
            "score_deltas": dict(self.score_deltas),
            "records": [r.to_dict() for r in self.records],
            "start_time": self.started_at.isoformat() if self.started_at else None,
            "end_time": self.finished_at.isoformat() if self.finished_at else None,
            "total_matches": len(self.records),
        }
        if self.kind == ON_SAVE_TOURNAMENT:
            data["new_strategy_id"] = self.new_strategy_id
        return data


@dataclass
class StrategyStanding:
    """
    Standing of a single strategy.

    Attributes:
        strategy_id: Id of the strategy
        name: Strategy name
        author: Author display name
        score: Accumulated score
    """

    strategy_id: str
    name: str
    author: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.strategy_id,
            "strategy": self.name,
            "author": self.author,
            "score": self.score,
        }


def rank_strategies(strategies: Sequence[Strategy]) -> List[StrategyStanding]:
    """
    Order strategies by score, highest first.

    Ties keep the earlier-created strategy first.
    """
    ordered = sorted(
        strategies,
        key=lambda s: (-s.score, s.created_at.timestamp() if s.created_at else float("inf")),
    )
    return [
        StrategyStanding(
            strategy_id=s.id,
            name=s.name,
            author=s.author_display_name,
            score=s.score,
        )
        for s in ordered
    ]


class ResultsExporter:
    """
    Exports tournament results to various formats.
    """

    def __init__(self, output_dir: str):
        """
        Initialize exporter.

        Args:
            output_dir: Directory for output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_all(
        self,
        outcome: TournamentOutcome,
        strategies: Sequence[Strategy],
        config: Optional[Dict[str, Any]] = None,
        timestamp: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Export a pass and the resulting standings to all formats.

        Args:
            outcome: Tournament pass to export
            strategies: Strategy snapshots to rank
            config: Optional configuration to include
            timestamp: Optional timestamp for filenames

        Returns:
            Dictionary mapping format to file path
        """
        if timestamp is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        return {
            "json": self.export_json(outcome, config, timestamp),
            "standings_csv": self.export_standings_csv(strategies, timestamp),
            "matches_csv": self.export_matches_csv(outcome.records, timestamp),
        }

    def export_json(
        self,
        outcome: TournamentOutcome,
        config: Optional[Dict[str, Any]] = None,
        timestamp: Optional[str] = None,
    ) -> str:
        """Export a tournament pass to JSON."""
        if timestamp is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        data = outcome.to_dict()
        if config:
            data["config"] = config
        data["metadata"] = {
            "export_time": datetime.now().isoformat(),
            "timestamp": timestamp,
        }

        filepath = self.output_dir / f"tournament_{outcome.kind}_{timestamp}.json"
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        logger.info(f"Results saved to: {filepath}")
        return str(filepath)

    def export_standings_csv(
        self, strategies: Sequence[Strategy], timestamp: Optional[str] = None
    ) -> str:
        """Export standings to CSV."""
        if timestamp is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        standings = rank_strategies(strategies)
        frame = pd.DataFrame(
            [s.to_dict() for s in standings],
            columns=["id", "strategy", "author", "score"],
        )
        frame.insert(0, "rank", range(1, len(frame) + 1))

        filepath = self.output_dir / f"tournament_standings_{timestamp}.csv"
        frame.to_csv(filepath, index=False)

        logger.info(f"Standings saved to: {filepath}")
        return str(filepath)

    def export_matches_csv(
        self, records: Sequence[MatchRecord], timestamp: Optional[str] = None
    ) -> str:
        """Export match records to CSV, one row per match."""
        if timestamp is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        rows = []
        for record in records:
            moves1, moves2 = record.moves_as_text()
            rows.append({
                "played_at": record.played_at.isoformat(),
                "strategy1": record.strategy1_name,
                "strategy2": record.strategy2_name,
                "score1": record.score1,
                "score2": record.score2,
                "moves1": moves1,
                "moves2": moves2,
            })
        frame = pd.DataFrame(
            rows,
            columns=["played_at", "strategy1", "strategy2", "score1", "score2",
                     "moves1", "moves2"],
        )

        filepath = self.output_dir / f"tournament_matches_{timestamp}.csv"
        frame.to_csv(filepath, index=False)

        logger.info(f"Matches saved to: {filepath}")
        return str(filepath)

    def print_standings(self, strategies: Sequence[Strategy]) -> None:
        """Print standings to logger."""
        print_standings(strategies)


def format_standings(strategies: Sequence[Strategy]) -> List[str]:
    """Standings table as lines, banners included."""
    lines = [
        "=" * 64,
        "ARENA STANDINGS",
        "=" * 64,
        f"{'Rank':<6}{'Strategy':<25}{'Author':<23}{'Score':>10}",
        "-" * 64,
    ]
    for rank, s in enumerate(rank_strategies(strategies), 1):
        lines.append(f"{rank:<6}{s.name[:24]:<25}{s.author[:22]:<23}{s.score:>10}")
    lines.append("=" * 64)
    return lines


def print_standings(strategies: Sequence[Strategy]) -> None:
    """Log a standings table."""
    for line in format_standings(strategies):
        logger.info(line)


def summarize_outcome(outcome: TournamentOutcome) -> str:
    """One-line summary of a tournament pass."""
    label = "Grand tournament" if outcome.kind == GRAND_TOURNAMENT else "On-save tournament"
    return (
        f"{label}: {len(outcome.records)} matches, "
        f"{outcome.total_points} points across {len(outcome.score_deltas)} strategies"
    )
