"""
Logic tree interpreter.

Compiles a LogicTree into a StrategyInterpreter: an immutable decision
function that can be shared across any number of matches.
"""

from typing import Optional, Sequence

import numpy as np

from dilemmaarena.constants import DEFAULT_MOVE, Action, ClauseRole, MatchMode, Move
from dilemmaarena.core.conditions import evaluate_condition
from dilemmaarena.core.logic_tree import Clause, LogicTree

_default_rng: Optional[np.random.Generator] = None


def get_default_rng() -> np.random.Generator:
    """Process-wide unseeded generator used when no rng is injected."""
    global _default_rng
    if _default_rng is None:
        _default_rng = np.random.default_rng()
    return _default_rng


def random_move(rng: Optional[np.random.Generator] = None) -> Move:
    """Pick Cooperate or Betray with equal probability."""
    rng = rng if rng is not None else get_default_rng()
    return Move.COOPERATE if rng.random() < 0.5 else Move.BETRAY


def clause_matches(
    clause: Clause,
    my_history: Sequence[Move],
    opponent_history: Sequence[Move],
) -> bool:
    """Whether a single clause is satisfied by the histories."""
    if clause.role == ClauseRole.ELSE:
        return True
    if not clause.conditions:
        return False
    results = (
        evaluate_condition(c, my_history, opponent_history)
        for c in clause.conditions
    )
    if clause.match_mode == MatchMode.ALL:
        return all(results)
    return any(results)


class StrategyInterpreter:
    """
    Decision function compiled from a logic tree.

    The interpreter only reads its arguments and its tree, so one instance
    can serve every match a strategy plays in a tournament pass.

    Example usage:
        interpreter = compile_logic_tree(tree)
        move = interpreter.decide(my_moves, their_moves, rng)
    """

    def __init__(self, logic_tree: LogicTree):
        self.logic_tree = logic_tree

    def matching_clause_index(
        self,
        my_history: Sequence[Move],
        opponent_history: Sequence[Move],
    ) -> Optional[int]:
        """
        Find the first clause that matches.

        Returns:
            Index of the winning clause, or None if no clause matches
        """
        for index, clause in enumerate(self.logic_tree.clauses):
            if clause_matches(clause, my_history, opponent_history):
                return index
        return None

    def decide(
        self,
        my_history: Sequence[Move],
        opponent_history: Sequence[Move],
        rng: Optional[np.random.Generator] = None,
    ) -> Move:
        """
        Choose the next move.

        Args:
            my_history: Moves this strategy has played so far
            opponent_history: Moves the opponent has played so far
            rng: Generator used for RANDOM actions (re-rolled on each call)

        Returns:
            The move to play; Cooperate when no clause matches
        """
        index = self.matching_clause_index(my_history, opponent_history)
        if index is None:
            return DEFAULT_MOVE

        action = self.logic_tree.clauses[index].action
        if action == Action.RANDOM:
            return random_move(rng)
        return action.to_move()

    def __call__(
        self,
        my_history: Sequence[Move],
        opponent_history: Sequence[Move],
        rng: Optional[np.random.Generator] = None,
    ) -> Move:
        return self.decide(my_history, opponent_history, rng)

    def __repr__(self) -> str:
        return f"StrategyInterpreter(clauses={len(self.logic_tree)})"


def compile_logic_tree(logic_tree: LogicTree) -> StrategyInterpreter:
    """Compile a logic tree into a decision function."""
    return StrategyInterpreter(logic_tree)
