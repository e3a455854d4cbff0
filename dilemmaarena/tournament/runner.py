"""
Tournament runner - core execution engine.

This module provides the TournamentRunner class that plays the matches of a
tournament pass and aggregates them into a TournamentOutcome. The runner
never touches stored scores: it reads strategy snapshots and returns the
deltas and records for a store to apply.
"""

import logging
from threading import Lock
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from dilemmaarena.constants import GRAND_TOURNAMENT, ON_SAVE_TOURNAMENT
from dilemmaarena.core.interpreter import StrategyInterpreter

from .config import TournamentConfig
from .match import simulate_match
from .results import MatchRecord, TournamentOutcome, summarize_outcome
from .schedule import (
    ScheduledMatch,
    calculate_total_matches,
    generate_challenge_schedule,
    generate_round_robin_schedule,
)
from .strategies import Strategy, compile_strategy, utc_now

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, MatchRecord], None]


class TournamentRunner:
    """
    Runs tournament passes between stored strategies.

    This class handles:
    - Round-robin ("grand") passes over every strategy
    - On-save passes of a new strategy against every existing one
    - Rejecting a pass while another one is in progress
    - Progress tracking and logging

    Example usage:
        runner = TournamentRunner(TournamentConfig(seed=7))
        outcome = runner.run_grand_tournament(strategies)
        if outcome is not None:
            store.apply_outcome(outcome)
    """

    def __init__(
        self,
        config: Optional[TournamentConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize tournament runner.

        Args:
            config: Tournament configuration (defaults if None)
            rng: Generator for RANDOM actions; built from config.seed if None

        Raises:
            ValueError: If the configuration is invalid
        """
        self.config = config or TournamentConfig()

        errors = self.config.validate()
        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self._pass_lock = Lock()

        self._progress_callback: Optional[ProgressCallback] = None

    @property
    def in_progress(self) -> bool:
        """Whether a tournament pass is currently running."""
        return self._pass_lock.locked()

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """
        Set a callback for progress updates.

        Args:
            callback: Function(completed, total, last_record) called after each match
        """
        self._progress_callback = callback

    def try_begin_pass(self) -> bool:
        """
        Claim the runner for a pass.

        Returns:
            False if another pass holds the runner
        """
        return self._pass_lock.acquire(blocking=False)

    def end_pass(self) -> None:
        """Release the runner after try_begin_pass."""
        self._pass_lock.release()

    def run_grand_tournament(
        self, strategies: Sequence[Strategy]
    ) -> Optional[TournamentOutcome]:
        """
        Run a full round-robin over a snapshot of strategies.

        Every unordered pair plays once. Each strategy's delta is the sum of
        its match scores; every strategy gets a delta entry, zero included.

        Args:
            strategies: Snapshot of all strategies in the arena

        Returns:
            TournamentOutcome, or None when fewer than two strategies are
            given or another pass is in progress
        """
        if len(strategies) < 2:
            logger.info(
                f"Skipping grand tournament: need at least 2 strategies, got {len(strategies)}"
            )
            return None

        if not self.try_begin_pass():
            logger.warning("Grand tournament already in progress; ignoring request")
            return None

        try:
            return self.play_grand_tournament(strategies)
        finally:
            self.end_pass()

    def play_grand_tournament(self, strategies: Sequence[Strategy]) -> TournamentOutcome:
        """
        Play a round-robin pass without taking the in-progress gate.

        Callers that already hold the gate (see try_begin_pass) use this to
        run a pass and commit it under the same claim.
        """
        outcome = TournamentOutcome(kind=GRAND_TOURNAMENT, started_at=utc_now())
        outcome.score_deltas = {s.id: 0 for s in strategies}

        schedule = generate_round_robin_schedule(strategies)
        self._log_pass_start(self.config.name, strategies, len(schedule))

        self._play_schedule(schedule, outcome)

        outcome.finished_at = utc_now()
        logger.info(summarize_outcome(outcome))
        return outcome

    def run_on_save_tournament(
        self,
        new_strategy: Strategy,
        existing: Sequence[Strategy],
    ) -> TournamentOutcome:
        """
        Play a newly saved strategy against every existing strategy.

        The new strategy's delta is its total over all matches; each
        opponent's delta is its score in its single match. An existing
        entry with the new strategy's id is skipped.

        Args:
            new_strategy: Strategy that was just created
            existing: Snapshot of strategies already in the arena

        Returns:
            TournamentOutcome with one record per opponent
        """
        outcome = TournamentOutcome(
            kind=ON_SAVE_TOURNAMENT,
            new_strategy_id=new_strategy.id,
            started_at=utc_now(),
        )
        outcome.score_deltas = {new_strategy.id: 0}

        schedule = generate_challenge_schedule(new_strategy, existing)
        logger.info(
            f"On-save tournament: {new_strategy.name} vs {len(schedule)} opponents"
        )

        self._play_schedule(schedule, outcome)

        outcome.finished_at = utc_now()
        logger.info(summarize_outcome(outcome))
        return outcome

    def _play_schedule(
        self, schedule: List[ScheduledMatch], outcome: TournamentOutcome
    ) -> None:
        """Play scheduled matches in order, adding records and deltas to outcome."""
        compiled: Dict[str, StrategyInterpreter] = {}

        def decision_for(strategy: Strategy) -> StrategyInterpreter:
            if strategy.id not in compiled:
                compiled[strategy.id] = compile_strategy(strategy)
            return compiled[strategy.id]

        total = len(schedule)
        for completed, scheduled in enumerate(schedule, 1):
            s1 = scheduled.strategy1
            s2 = scheduled.strategy2

            match_outcome = simulate_match(
                decision_for(s1),
                decision_for(s2),
                rounds=self.config.rounds_per_match,
                rng=self.rng,
            )
            record = MatchRecord.from_match(s1, s2, match_outcome)
            outcome.records.append(record)

            outcome.score_deltas[s1.id] = outcome.score_deltas.get(s1.id, 0) + record.score1
            outcome.score_deltas[s2.id] = outcome.score_deltas.get(s2.id, 0) + record.score2

            logger.info(
                f"  Match {completed}/{total}: {s1.name} vs {s2.name}: "
                f"{record.score1}-{record.score2}"
            )

            if self._progress_callback:
                self._progress_callback(completed, total, record)

    def _log_pass_start(
        self, title: str, strategies: Sequence[Strategy], num_matches: int
    ) -> None:
        """Log tournament start information."""
        logger.info("=" * 70)
        logger.info(f"TOURNAMENT: {title}")
        logger.info("=" * 70)
        logger.info(f"Participants: {len(strategies)}")
        for strategy in strategies:
            logger.info(f"  - {strategy.get_display_info()}")
        logger.info(f"Rounds per match: {self.config.rounds_per_match}")
        logger.info(
            f"Matches: {num_matches} (expected {calculate_total_matches(len(strategies))})"
        )
        logger.info("=" * 70)
