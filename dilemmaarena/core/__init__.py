"""
Strategy interpreter: logic trees, condition evaluation and payoffs.
"""
from dilemmaarena.core.logic_tree import Clause, Condition, LogicTree, LogicTreeError
from dilemmaarena.core.conditions import (
    evaluate_condition,
    get_last_move,
    get_most_common_move,
    get_nth_last_move,
)
from dilemmaarena.core.interpreter import StrategyInterpreter, compile_logic_tree, random_move
from dilemmaarena.core.payoff import Payoff, resolve_payoff

__all__ = [
    'Clause', 'Condition', 'LogicTree', 'LogicTreeError',
    'evaluate_condition', 'get_last_move', 'get_most_common_move', 'get_nth_last_move',
    'StrategyInterpreter', 'compile_logic_tree', 'random_move',
    'Payoff', 'resolve_payoff',
]
