"""
Condition evaluation over move histories.
"""

from typing import Optional, Sequence

from dilemmaarena.constants import DEFAULT_MOVE, ConditionKind, Move
from dilemmaarena.core.logic_tree import Condition


def get_last_move(history: Sequence[Move]) -> Move:
    """Last move played, or Cooperate before the first round."""
    return history[-1] if history else DEFAULT_MOVE


def get_nth_last_move(history: Sequence[Move], n: int) -> Optional[Move]:
    """
    Move played n rounds ago (n=1 is the last move).

    Args:
        history: Moves in play order
        n: How far back to look

    Returns:
        The move, Cooperate if the history is shorter than n, or None when
        n is not a positive offset.
    """
    if n < 1:
        return None
    if len(history) < n:
        return DEFAULT_MOVE
    return history[-n]


def get_most_common_move(history: Sequence[Move]) -> Move:
    """Betray on a strict majority of betrayals, otherwise Cooperate."""
    betrayals = sum(1 for move in history if move == Move.BETRAY)
    cooperations = len(history) - betrayals
    return Move.BETRAY if betrayals > cooperations else Move.COOPERATE


def evaluate_condition(
    condition: Condition,
    my_history: Sequence[Move],
    opponent_history: Sequence[Move],
) -> bool:
    """
    Check whether a condition holds for the given histories.

    Unknown condition kinds evaluate to False.

    Args:
        condition: Condition to test
        my_history: Moves played by the deciding strategy
        opponent_history: Moves played by its opponent

    Returns:
        True if the looked-up move equals the condition target
    """
    kind = condition.kind

    if kind == ConditionKind.OPPONENT_LAST_MOVE:
        subject = get_last_move(opponent_history)
    elif kind == ConditionKind.YOUR_LAST_MOVE:
        subject = get_last_move(my_history)
    elif kind == ConditionKind.OPPONENT_NTH_LAST_MOVE:
        subject = get_nth_last_move(opponent_history, condition.n)
    elif kind == ConditionKind.YOUR_NTH_LAST_MOVE:
        subject = get_nth_last_move(my_history, condition.n)
    elif kind == ConditionKind.OPPONENT_MOST_COMMON:
        subject = get_most_common_move(opponent_history)
    elif kind == ConditionKind.YOUR_MOST_COMMON:
        subject = get_most_common_move(my_history)
    else:
        return False

    return subject == condition.target
