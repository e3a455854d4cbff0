"""
Game constants for the Iterated Prisoner's Dilemma arena.
"""
from enum import Enum
from typing import Dict, Tuple


class Move(str, Enum):
    """A single round action."""
    COOPERATE = 'Cooperate'
    BETRAY = 'Betray'

    @classmethod
    def from_value(cls, value) -> 'Move':
        """Get Move from its serialized value."""
        if isinstance(value, Move):
            return value
        for move in cls:
            if move.value == value:
                return move
        raise ValueError(f"Unknown move: {value}")


class Action(str, Enum):
    """What a clause does when it matches."""
    COOPERATE = 'Cooperate'
    BETRAY = 'Betray'
    RANDOM = 'Random'

    @classmethod
    def from_value(cls, value) -> 'Action':
        """Get Action from its serialized value."""
        if isinstance(value, Action):
            return value
        if isinstance(value, Move):
            return cls(value.value)
        for action in cls:
            if action.value == value:
                return action
        raise ValueError(f"Unknown action: {value}")

    def to_move(self) -> Move:
        """Convert a fixed action to its move (RANDOM has none)."""
        if self is Action.RANDOM:
            raise ValueError("RANDOM action has no fixed move")
        return Move(self.value)


class ConditionKind(str, Enum):
    """Predicate kinds a condition can test."""
    OPPONENT_LAST_MOVE = 'opponent_last_move'
    YOUR_LAST_MOVE = 'your_last_move'
    OPPONENT_NTH_LAST_MOVE = 'opponent_nth_last_move'
    YOUR_NTH_LAST_MOVE = 'your_nth_last_move'
    OPPONENT_MOST_COMMON = 'opponent_most_common'
    YOUR_MOST_COMMON = 'your_most_common'

    @property
    def label(self) -> str:
        """Human-readable label for the condition editor."""
        return CONDITION_LABELS[self]

    @property
    def uses_n(self) -> bool:
        """Whether the N value is meaningful for this kind."""
        return self in (ConditionKind.OPPONENT_NTH_LAST_MOVE,
                        ConditionKind.YOUR_NTH_LAST_MOVE)


class ClauseRole(str, Enum):
    """Position of a clause in the IF / ELSEIF / ELSE chain."""
    IF = 'IF'
    ELSEIF = 'ELSEIF'
    ELSE = 'ELSE'


class MatchMode(str, Enum):
    """How a clause combines its conditions."""
    ALL = 'ALL'
    ANY = 'ANY'

    @classmethod
    def from_value(cls, value) -> 'MatchMode':
        """Get MatchMode from its serialized value, accepting AND/OR aliases."""
        if isinstance(value, MatchMode):
            return value
        normalized = str(value).upper()
        if normalized in MATCH_MODE_ALIASES:
            return MATCH_MODE_ALIASES[normalized]
        raise ValueError(f"Unknown match mode: {value}")


CONDITION_LABELS: Dict[ConditionKind, str] = {
    ConditionKind.OPPONENT_LAST_MOVE: "Opponent's last move is",
    ConditionKind.YOUR_LAST_MOVE: "Your last move is",
    ConditionKind.OPPONENT_NTH_LAST_MOVE: "Opponent's Nth last move is",
    ConditionKind.YOUR_NTH_LAST_MOVE: "Your Nth last move is",
    ConditionKind.OPPONENT_MOST_COMMON: "Opponent's most common move is",
    ConditionKind.YOUR_MOST_COMMON: "Your most common move is",
}

MATCH_MODE_ALIASES: Dict[str, MatchMode] = {
    'ALL': MatchMode.ALL,
    'AND': MatchMode.ALL,
    'ANY': MatchMode.ANY,
    'OR': MatchMode.ANY,
}

# Payoffs as (player 1, player 2) points
PAYOFF_MATRIX: Dict[Tuple[Move, Move], Tuple[int, int]] = {
    (Move.COOPERATE, Move.COOPERATE): (1, 1),
    (Move.BETRAY, Move.BETRAY): (0, 0),
    (Move.COOPERATE, Move.BETRAY): (0, 2),
    (Move.BETRAY, Move.COOPERATE): (2, 0),
}

# Move assumed for history lookups that fall outside the history
DEFAULT_MOVE = Move.COOPERATE

# Rounds per match
DEFAULT_ROUNDS = 20

# Tournament kinds
GRAND_TOURNAMENT = 'grand'
ON_SAVE_TOURNAMENT = 'on_save'

# Arena defaults
DEFAULT_ARENA_FILE = 'arena.json'
DEFAULT_OUTPUT_DIR = 'tournament_results'
ANONYMOUS_AUTHOR_PREFIX = 'User-'
