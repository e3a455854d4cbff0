"""
Match simulation.

A match is a fixed number of simultaneous rounds between two decision
functions. Neither side sees the other's move for the current round.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from dilemmaarena.constants import DEFAULT_ROUNDS, Move
from dilemmaarena.core.builtins import DecisionFunction
from dilemmaarena.core.interpreter import get_default_rng
from dilemmaarena.core.payoff import resolve_payoff

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchOutcome:
    """
    Result of one simulated match.

    Attributes:
        score1: Total points for the first side
        score2: Total points for the second side
        moves1: Moves played by the first side, in round order
        moves2: Moves played by the second side, in round order
    """

    score1: int
    score2: int
    moves1: Tuple[Move, ...]
    moves2: Tuple[Move, ...]

    @property
    def rounds(self) -> int:
        """Number of rounds played."""
        return len(self.moves1)

    @property
    def winner(self) -> int:
        """1 or 2 for the higher scorer, 0 for a draw."""
        if self.score1 > self.score2:
            return 1
        if self.score2 > self.score1:
            return 2
        return 0


def simulate_match(
    decision1: DecisionFunction,
    decision2: DecisionFunction,
    rounds: int = DEFAULT_ROUNDS,
    rng: Optional[np.random.Generator] = None,
) -> MatchOutcome:
    """
    Play a repeated game between two decision functions.

    Each decision function is called as ``fn(my_history, opponent_history, rng)``
    with tuple snapshots of the histories from before the round.

    Args:
        decision1: Decision function of the first side
        decision2: Decision function of the second side
        rounds: Number of rounds to play
        rng: Generator passed to both sides for RANDOM actions

    Returns:
        MatchOutcome with final scores and both move histories

    Raises:
        ValueError: If rounds is negative
    """
    if rounds < 0:
        raise ValueError(f"rounds must be non-negative, got {rounds}")

    rng = rng if rng is not None else get_default_rng()

    moves1: Tuple[Move, ...] = ()
    moves2: Tuple[Move, ...] = ()
    score1 = 0
    score2 = 0

    for round_num in range(rounds):
        move1 = Move.from_value(decision1(moves1, moves2, rng))
        move2 = Move.from_value(decision2(moves2, moves1, rng))

        payoff = resolve_payoff(move1, move2)
        score1 += payoff.p1
        score2 += payoff.p2

        moves1 = moves1 + (move1,)
        moves2 = moves2 + (move2,)

        logger.debug(
            f"    Round {round_num + 1}/{rounds}: "
            f"{move1.value} vs {move2.value} -> {payoff.p1}-{payoff.p2}"
        )

    return MatchOutcome(score1=score1, score2=score2, moves1=moves1, moves2=moves2)
