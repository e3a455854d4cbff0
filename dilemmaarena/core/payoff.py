"""
Payoff resolution for a single round.
"""

from typing import NamedTuple

from dilemmaarena.constants import PAYOFF_MATRIX, Move


class Payoff(NamedTuple):
    """Points won by each side in one round."""
    p1: int
    p2: int


def resolve_payoff(move1: Move, move2: Move) -> Payoff:
    """
    Score a pair of simultaneous moves.

    Mutual cooperation pays 1 each, mutual betrayal 0 each, and a lone
    betrayer takes 2 from a cooperator who gets 0.

    Args:
        move1: Move of the first player
        move2: Move of the second player

    Returns:
        Payoff for (first player, second player)
    """
    p1, p2 = PAYOFF_MATRIX[(Move.from_value(move1), Move.from_value(move2))]
    return Payoff(p1, p2)
