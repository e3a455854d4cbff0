"""
Tests for the strategy interpreter (dilemmaarena.core).

Tests cover:
- Condition evaluation over move histories
- Logic tree validation and loading
- Clause precedence, ALL/ANY matching and the default move
- RANDOM actions with a seeded generator
- Payoff resolution
- Built-in strategies
"""

import numpy as np
import pytest

from dilemmaarena.constants import Action, ClauseRole, ConditionKind, MatchMode, Move
from dilemmaarena.core import (
    Clause,
    Condition,
    LogicTree,
    LogicTreeError,
    compile_logic_tree,
    evaluate_condition,
    get_last_move,
    get_most_common_move,
    get_nth_last_move,
    resolve_payoff,
)
from dilemmaarena.core.builtins import (
    BUILTIN_LOGIC_TREES,
    get_builtin_strategy,
    grudger,
    grudger_logic_tree,
    tit_for_tat,
)

C = Move.COOPERATE
B = Move.BETRAY


class TestConditionEvaluation:
    """Tests for condition evaluation."""

    def test_last_move_defaults_to_cooperate(self):
        """Test that an empty history reads as Cooperate."""
        assert get_last_move([]) == C
        assert get_last_move([C, B]) == B

    def test_nth_last_move(self):
        """Test counting back from the end of the history."""
        history = [B, C, C]
        assert get_nth_last_move(history, 1) == C
        assert get_nth_last_move(history, 3) == B

    def test_nth_last_move_beyond_history(self):
        """Test that looking further back than the history gives Cooperate."""
        assert get_nth_last_move([B, B], 3) == C
        assert get_nth_last_move([], 1) == C

    def test_nth_last_move_non_positive(self):
        """Test that n < 1 has no move."""
        assert get_nth_last_move([B, B], 0) is None

    def test_nth_condition_with_zero_never_matches(self):
        """Test that a condition with n=0 matches neither move."""
        for target in (C, B):
            condition = Condition(ConditionKind.YOUR_NTH_LAST_MOVE, target, n=0)
            assert not evaluate_condition(condition, [C, B], [C, B])

    def test_most_common_requires_strict_majority(self):
        """Test that ties and empty histories read as Cooperate."""
        assert get_most_common_move([]) == C
        assert get_most_common_move([B, C]) == C
        assert get_most_common_move([B, B, C]) == B

    def test_opponent_and_your_histories(self):
        """Test that opponent_ and your_ kinds read the right history."""
        my_history = [C]
        opponent_history = [B]

        assert evaluate_condition(
            Condition(ConditionKind.OPPONENT_LAST_MOVE, B), my_history, opponent_history
        )
        assert not evaluate_condition(
            Condition(ConditionKind.YOUR_LAST_MOVE, B), my_history, opponent_history
        )
        assert evaluate_condition(
            Condition(ConditionKind.YOUR_MOST_COMMON, C), my_history, opponent_history
        )

    def test_unknown_kind_is_false(self):
        """Test that an unrecognized kind never matches and is kept verbatim."""
        condition = Condition("opponent_mood", C)

        assert condition.kind == "opponent_mood"
        assert not condition.is_known
        assert not evaluate_condition(condition, [], [])
        assert condition.to_dict()["kind"] == "opponent_mood"

    def test_condition_accepts_strings(self):
        """Test that string kinds and targets are coerced to enums."""
        condition = Condition("opponent_last_move", "Betray")
        assert condition.kind is ConditionKind.OPPONENT_LAST_MOVE
        assert condition.target is B

    def test_condition_description(self):
        """Test human-readable condition text."""
        condition = Condition(ConditionKind.OPPONENT_LAST_MOVE, B)
        assert condition.describe() == "Opponent's last move is Betray"


class TestLogicTreeValidation:
    """Tests for logic tree structural rules."""

    def test_valid_tree(self, tit_for_tat_tree):
        """Test that a well-formed tree validates."""
        assert tit_for_tat_tree.validate() == []
        assert len(tit_for_tat_tree) == 2
        assert tit_for_tat_tree.has_else

    def test_error_is_value_error(self):
        """Test that LogicTreeError can be caught as ValueError."""
        assert issubclass(LogicTreeError, ValueError)

    def test_empty_tree_rejected(self):
        """Test that a tree needs at least one clause."""
        with pytest.raises(LogicTreeError):
            LogicTree(())

    def test_first_clause_must_be_if(self):
        """Test that a tree cannot start with ELSEIF."""
        with pytest.raises(LogicTreeError, match="first clause"):
            LogicTree.from_clauses(
                Clause.elseif(Condition(ConditionKind.OPPONENT_LAST_MOVE, B)),
            )

    def test_second_if_rejected(self):
        """Test that only the first clause may be IF."""
        condition = Condition(ConditionKind.OPPONENT_LAST_MOVE, B)
        with pytest.raises(LogicTreeError, match="second IF"):
            LogicTree.from_clauses(Clause.if_(condition), Clause.if_(condition))

    def test_else_must_be_last(self):
        """Test that an ELSE followed by more clauses is rejected."""
        condition = Condition(ConditionKind.OPPONENT_LAST_MOVE, B)
        with pytest.raises(LogicTreeError, match="last clause"):
            LogicTree.from_clauses(
                Clause.if_(condition),
                Clause.else_(),
                Clause.elseif(condition),
            )

    def test_single_else(self):
        """Test that two ELSE clauses are rejected."""
        condition = Condition(ConditionKind.OPPONENT_LAST_MOVE, B)
        with pytest.raises(LogicTreeError, match="Only one ELSE"):
            LogicTree.from_clauses(Clause.if_(condition), Clause.else_(), Clause.else_())

    def test_n_must_be_positive(self):
        """Test that nth-last-move conditions need n >= 1."""
        with pytest.raises(LogicTreeError, match="N must be at least 1"):
            LogicTree.from_clauses(
                Clause.if_(Condition(ConditionKind.OPPONENT_NTH_LAST_MOVE, B, n=0)),
            )

    def test_lenient_load_drops_unreachable_clauses(self):
        """Test that lenient loading truncates after the first ELSE."""
        data = {
            "clauses": [
                {"role": "IF", "conditions": [{"kind": "opponent_last_move", "target": "Betray"}],
                 "action": "Betray"},
                {"role": "ELSE", "action": "Cooperate"},
                {"role": "ELSEIF", "conditions": [], "action": "Betray"},
                {"role": "ELSE", "action": "Betray"},
            ]
        }

        with pytest.raises(LogicTreeError):
            LogicTree.from_dict(data)

        tree = LogicTree.from_dict(data, strict=False)
        assert len(tree) == 2
        assert tree.clauses[-1].role == ClauseRole.ELSE
        assert tree.clauses[-1].action == Action.COOPERATE

    def test_editor_keys(self):
        """Test loading clauses written with type/matchType/value/n_value keys."""
        data = [
            {
                "type": "IF",
                "matchType": "OR",
                "action": "Random",
                "conditions": [
                    {"type": "opponent_nth_last_move", "value": "Betray", "n_value": 2},
                    {"type": "your_last_move", "value": "Cooperate"},
                ],
            },
        ]

        tree = LogicTree.from_dict(data)
        clause = tree.clauses[0]

        assert clause.role == ClauseRole.IF
        assert clause.match_mode == MatchMode.ANY
        assert clause.action == Action.RANDOM
        assert clause.conditions[0].n == 2
        assert clause.conditions[1].n == 1
        assert tree.uses_random

    def test_serialization_round_trip(self, tit_for_tat_tree):
        """Test that to_dict output loads back to an equal tree."""
        assert LogicTree.from_dict(tit_for_tat_tree.to_dict()) == tit_for_tat_tree

    def test_unknown_action_rejected(self):
        """Test that an unrecognized action is a LogicTreeError."""
        with pytest.raises(LogicTreeError):
            LogicTree.from_dict([{"role": "IF", "conditions": [], "action": "Maybe"}])

    def test_clauses_must_be_a_list(self):
        """Test that non-list clause data is rejected."""
        with pytest.raises(LogicTreeError):
            LogicTree.from_dict({"clauses": "IF"})

    def test_describe(self, tit_for_tat_tree):
        """Test pseudo-code rendering."""
        text = tit_for_tat_tree.describe()
        assert text.splitlines() == [
            "IF Opponent's last move is Betray -> Betray",
            "ELSE -> Cooperate",
        ]


class TestInterpreter:
    """Tests for compiled logic trees."""

    def test_first_round_uses_defaults(self, tit_for_tat_tree):
        """Test the first decision against empty histories."""
        interpreter = compile_logic_tree(tit_for_tat_tree)
        assert interpreter.decide([], []) == C

    def test_clause_precedence(self):
        """Test that the first matching clause wins."""
        condition = Condition(ConditionKind.OPPONENT_LAST_MOVE, B)
        tree = LogicTree.from_clauses(
            Clause.if_(condition, action=Action.BETRAY),
            Clause.elseif(condition, action=Action.COOPERATE),
        )
        interpreter = compile_logic_tree(tree)

        assert interpreter.matching_clause_index([C], [B]) == 0
        assert interpreter.decide([C], [B]) == B

    def test_all_versus_any(self):
        """Test that ALL needs every condition and ANY needs one."""
        conditions = (
            Condition(ConditionKind.OPPONENT_LAST_MOVE, B),
            Condition(ConditionKind.YOUR_LAST_MOVE, B),
        )
        all_tree = LogicTree.from_clauses(
            Clause.if_(*conditions, action=Action.BETRAY, match_mode=MatchMode.ALL),
        )
        any_tree = LogicTree.from_clauses(
            Clause.if_(*conditions, action=Action.BETRAY, match_mode=MatchMode.ANY),
        )

        assert compile_logic_tree(all_tree).decide([C], [B]) == C
        assert compile_logic_tree(any_tree).decide([C], [B]) == B

    def test_no_match_defaults_to_cooperate(self):
        """Test the fallback when no clause is satisfied."""
        tree = LogicTree.from_clauses(
            Clause.if_(Condition(ConditionKind.OPPONENT_LAST_MOVE, B), action=Action.BETRAY),
        )
        interpreter = compile_logic_tree(tree)

        assert interpreter.matching_clause_index([C], [C]) is None
        assert interpreter.decide([C], [C]) == C

    def test_empty_conditions_never_match(self):
        """Test that an IF with no conditions is never satisfied."""
        tree = LogicTree.from_clauses(
            Clause.if_(action=Action.BETRAY),
            Clause.else_(action=Action.COOPERATE),
        )
        interpreter = compile_logic_tree(tree)
        assert interpreter.matching_clause_index([B], [B]) == 1
        assert interpreter.decide([B], [B]) == C

    def test_histories_not_mutated(self, tit_for_tat_tree):
        """Test that deciding leaves its arguments untouched."""
        my_history = [C, B]
        opponent_history = [B, B]

        compile_logic_tree(tit_for_tat_tree).decide(my_history, opponent_history)

        assert my_history == [C, B]
        assert opponent_history == [B, B]

    def test_random_is_seed_deterministic(self):
        """Test that RANDOM actions replay with the same seed."""
        tree = BUILTIN_LOGIC_TREES["random"]
        interpreter = compile_logic_tree(tree)

        rng_a = np.random.default_rng(7)
        rng_b = np.random.default_rng(7)
        moves_a = [interpreter.decide([], [], rng_a) for _ in range(50)]
        moves_b = [interpreter([], [], rng_b) for _ in range(50)]

        assert moves_a == moves_b
        assert set(moves_a) <= {C, B}

    def test_random_rerolls_each_call(self, rng):
        """Test that RANDOM draws a fresh move on every decision."""
        interpreter = compile_logic_tree(BUILTIN_LOGIC_TREES["random"])
        moves = {interpreter.decide([], [], rng) for _ in range(64)}
        assert moves == {C, B}

    def test_random_without_rng(self):
        """Test that RANDOM works without an injected generator."""
        interpreter = compile_logic_tree(BUILTIN_LOGIC_TREES["random"])
        assert interpreter.decide([], []) in (C, B)


class TestPayoff:
    """Tests for payoff resolution."""

    def test_matrix(self):
        """Test every cell of the payoff matrix."""
        assert resolve_payoff(C, C) == (1, 1)
        assert resolve_payoff(B, B) == (0, 0)
        assert resolve_payoff(C, B) == (0, 2)
        assert resolve_payoff(B, C) == (2, 0)

    def test_symmetry(self):
        """Test that swapping the moves swaps the payoffs."""
        for move1 in Move:
            for move2 in Move:
                payoff = resolve_payoff(move1, move2)
                swapped = resolve_payoff(move2, move1)
                assert (payoff.p1, payoff.p2) == (swapped.p2, swapped.p1)

    def test_string_moves(self):
        """Test that serialized move strings are accepted."""
        assert resolve_payoff("Betray", "Cooperate").p1 == 2


class TestBuiltins:
    """Tests for the built-in strategies."""

    def test_tit_for_tat(self):
        """Test that tit-for-tat copies the opponent's last move."""
        assert tit_for_tat([], []) == C
        assert tit_for_tat([C], [B]) == B
        assert tit_for_tat([B], [C]) == C

    def test_grudger(self):
        """Test that grudger never forgives a betrayal."""
        assert grudger([], []) == C
        assert grudger([C, C, C], [C, B, C]) == B

    def test_tree_matches_function(self):
        """Test that the titForTat logic tree plays like the function."""
        interpreter = compile_logic_tree(BUILTIN_LOGIC_TREES["titForTat"])
        histories = [([], []), ([C], [B]), ([B, C], [C, C]), ([C, B], [B, B])]
        for my_history, opponent_history in histories:
            assert interpreter.decide(my_history, opponent_history) == \
                tit_for_tat(my_history, opponent_history)

    def test_grudger_tree_matches_function(self):
        """Test that the grudger logic tree holds a grudge across the match."""
        interpreter = compile_logic_tree(BUILTIN_LOGIC_TREES["grudger"])
        histories = [
            ([], []),
            ([C], [B]),
            ([C, B], [B, C]),
            ([C] * 18 + [B], [B] + [C] * 18),
            ([C] * 5, [C] * 5),
        ]
        for my_history, opponent_history in histories:
            assert interpreter.decide(my_history, opponent_history) == \
                grudger(my_history, opponent_history)

    def test_grudger_tree_lookback(self):
        """Test that the grudger tree looks back over every earlier round."""
        tree = grudger_logic_tree(rounds=5)
        assert [c.n for c in tree.clauses[0].conditions] == [1, 2, 3, 4]
        assert tree.clauses[0].match_mode == MatchMode.ANY

    def test_always_trees(self):
        """Test the always-cooperate and always-betray trees."""
        cooperate = compile_logic_tree(BUILTIN_LOGIC_TREES["alwaysCooperate"])
        betray = compile_logic_tree(BUILTIN_LOGIC_TREES["alwaysBetray"])
        for opponent_history in ([], [C], [B], [B, C]):
            assert cooperate.decide([], opponent_history) == C
            assert betray.decide([], opponent_history) == B

    def test_lookup(self):
        """Test looking up built-ins by name."""
        assert get_builtin_strategy("grudger") is grudger
        with pytest.raises(ValueError, match="Unknown built-in"):
            get_builtin_strategy("pavlov")
