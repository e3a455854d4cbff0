"""
Built-in reference strategies.

Each function has the decision function signature
``(my_history, opponent_history, rng) -> Move`` and can be passed straight
to the match simulator. Where a strategy can be written as a logic tree,
``BUILTIN_LOGIC_TREES`` holds that form so it can be stored in an arena.
"""

from typing import Callable, Dict, Optional, Sequence

import numpy as np

from dilemmaarena.constants import DEFAULT_ROUNDS, Action, ConditionKind, MatchMode, Move
from dilemmaarena.core.interpreter import random_move
from dilemmaarena.core.logic_tree import Clause, Condition, LogicTree

DecisionFunction = Callable[..., Move]


def always_cooperate(my_history: Sequence[Move], opponent_history: Sequence[Move],
                     rng: Optional[np.random.Generator] = None) -> Move:
    return Move.COOPERATE


def always_betray(my_history: Sequence[Move], opponent_history: Sequence[Move],
                  rng: Optional[np.random.Generator] = None) -> Move:
    return Move.BETRAY


def random_strategy(my_history: Sequence[Move], opponent_history: Sequence[Move],
                    rng: Optional[np.random.Generator] = None) -> Move:
    return random_move(rng)


def tit_for_tat(my_history: Sequence[Move], opponent_history: Sequence[Move],
                rng: Optional[np.random.Generator] = None) -> Move:
    """Cooperate first, then copy the opponent's last move."""
    if not opponent_history:
        return Move.COOPERATE
    return opponent_history[-1]


def grudger(my_history: Sequence[Move], opponent_history: Sequence[Move],
            rng: Optional[np.random.Generator] = None) -> Move:
    """Cooperate until the opponent betrays once, then betray forever."""
    return Move.BETRAY if Move.BETRAY in opponent_history else Move.COOPERATE


BUILTIN_STRATEGIES: Dict[str, DecisionFunction] = {
    'alwaysCooperate': always_cooperate,
    'alwaysBetray': always_betray,
    'random': random_strategy,
    'titForTat': tit_for_tat,
    'grudger': grudger,
}


def _opponent_last_is(move: Move) -> Condition:
    return Condition(ConditionKind.OPPONENT_LAST_MOVE, target=move)


def grudger_logic_tree(rounds: int = DEFAULT_ROUNDS) -> LogicTree:
    """
    Grudger as a logic tree for matches of up to ``rounds`` rounds.

    One ANY clause looks back over every earlier round of the match for a
    betrayal; rounds beyond ``rounds`` would need a longer look-back.
    """
    lookback = [
        Condition(ConditionKind.OPPONENT_NTH_LAST_MOVE, target=Move.BETRAY, n=n)
        for n in range(1, max(rounds, 2))
    ]
    return LogicTree.from_clauses(
        Clause.if_(*lookback, action=Action.BETRAY, match_mode=MatchMode.ANY),
        Clause.else_(action=Action.COOPERATE),
    )


BUILTIN_LOGIC_TREES: Dict[str, LogicTree] = {
    'alwaysCooperate': LogicTree.from_clauses(
        Clause.if_(_opponent_last_is(Move.COOPERATE), _opponent_last_is(Move.BETRAY),
                   action=Action.COOPERATE, match_mode=MatchMode.ANY),
    ),
    'alwaysBetray': LogicTree.from_clauses(
        Clause.if_(_opponent_last_is(Move.COOPERATE), _opponent_last_is(Move.BETRAY),
                   action=Action.BETRAY, match_mode=MatchMode.ANY),
    ),
    'random': LogicTree.from_clauses(
        Clause.if_(_opponent_last_is(Move.COOPERATE), _opponent_last_is(Move.BETRAY),
                   action=Action.RANDOM, match_mode=MatchMode.ANY),
    ),
    'titForTat': LogicTree.from_clauses(
        Clause.if_(_opponent_last_is(Move.BETRAY), action=Action.BETRAY),
        Clause.else_(action=Action.COOPERATE),
    ),
    'grudger': grudger_logic_tree(),
}


def get_builtin_strategy(name: str) -> DecisionFunction:
    """
    Look up a built-in decision function by name.

    Raises:
        ValueError: If no built-in has that name
    """
    if name not in BUILTIN_STRATEGIES:
        raise ValueError(
            f"Unknown built-in strategy: {name} "
            f"(choose from {', '.join(sorted(BUILTIN_STRATEGIES))})"
        )
    return BUILTIN_STRATEGIES[name]
