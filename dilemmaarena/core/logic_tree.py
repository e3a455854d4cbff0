"""
Logic tree model for user-authored strategies.

A logic tree is an ordered chain of IF / ELSEIF / ELSE clauses. Each clause
holds conditions over the move histories and the action taken when the clause
is the first one to match.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union

from dilemmaarena.constants import (
    Action,
    ClauseRole,
    ConditionKind,
    MatchMode,
    Move,
)

logger = logging.getLogger(__name__)


class LogicTreeError(ValueError):
    """Raised when a logic tree violates its structural rules."""


def _parse_kind(value: Any) -> Union[ConditionKind, str]:
    """Map a stored kind to ConditionKind, keeping unknown kinds verbatim."""
    if isinstance(value, ConditionKind):
        return value
    try:
        return ConditionKind(value)
    except ValueError:
        return str(value)


@dataclass(frozen=True)
class Condition:
    """
    A single predicate over move history.

    Attributes:
        kind: Which history and which lookup to use. Unknown kinds are kept
            as plain strings so stored data round-trips; they never match.
        target: Move the looked-up move is compared against
        n: How far back to look for the nth-last-move kinds (1 = last move)
    """

    kind: Union[ConditionKind, str]
    target: Move = Move.BETRAY
    n: int = 1

    def __post_init__(self):
        object.__setattr__(self, 'kind', _parse_kind(self.kind))
        object.__setattr__(self, 'target', Move.from_value(self.target))
        object.__setattr__(self, 'n', int(self.n))

    @property
    def is_known(self) -> bool:
        """Whether the kind is one of the built-in predicate kinds."""
        return isinstance(self.kind, ConditionKind)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Condition':
        """
        Create a Condition from a dictionary.

        Accepts both the native keys (kind, target, n) and the keys written
        by the browser editor (type, value, n_value).

        Args:
            data: Condition dictionary

        Returns:
            Condition instance

        Raises:
            LogicTreeError: If the target move or N value is malformed
        """
        kind = data.get('kind', data.get('type'))
        target = data.get('target', data.get('value', Move.BETRAY.value))
        n = data.get('n', data.get('n_value', 1))
        try:
            return cls(kind=kind, target=target, n=n if n is not None else 1)
        except (TypeError, ValueError) as e:
            raise LogicTreeError(f"Invalid condition {data!r}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        kind = self.kind.value if isinstance(self.kind, ConditionKind) else self.kind
        return {'kind': kind, 'n': self.n, 'target': self.target.value}

    def describe(self) -> str:
        """Human-readable description, e.g. "Opponent's last move is Betray"."""
        if not self.is_known:
            return f"<unknown condition {self.kind!r}> {self.target.value}"
        label = self.kind.label
        if self.kind.uses_n:
            label = label.replace('Nth', f"{self.n}th")
        return f"{label} {self.target.value}"


@dataclass(frozen=True)
class Clause:
    """
    One rule of a logic tree.

    Attributes:
        role: IF, ELSEIF or ELSE
        conditions: Conditions tested by the clause (ignored for ELSE)
        match_mode: ALL requires every condition, ANY requires one
        action: Move to play, or RANDOM
    """

    role: ClauseRole
    conditions: Tuple[Condition, ...] = ()
    match_mode: MatchMode = MatchMode.ALL
    action: Action = Action.COOPERATE

    def __post_init__(self):
        object.__setattr__(self, 'role', ClauseRole(self.role))
        object.__setattr__(self, 'conditions', tuple(self.conditions))
        object.__setattr__(self, 'match_mode', MatchMode.from_value(self.match_mode))
        object.__setattr__(self, 'action', Action.from_value(self.action))

    @classmethod
    def if_(cls, *conditions: Condition, action=Action.COOPERATE,
            match_mode=MatchMode.ALL) -> 'Clause':
        """Create an IF clause."""
        return cls(ClauseRole.IF, conditions, match_mode, action)

    @classmethod
    def elseif(cls, *conditions: Condition, action=Action.COOPERATE,
               match_mode=MatchMode.ALL) -> 'Clause':
        """Create an ELSEIF clause."""
        return cls(ClauseRole.ELSEIF, conditions, match_mode, action)

    @classmethod
    def else_(cls, action=Action.COOPERATE) -> 'Clause':
        """Create an ELSE clause."""
        return cls(ClauseRole.ELSE, (), MatchMode.ALL, action)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Clause':
        """
        Create a Clause from a dictionary.

        Args:
            data: Clause dictionary (native or editor keys)

        Returns:
            Clause instance

        Raises:
            LogicTreeError: If role, match mode or action is not recognized
        """
        role = data.get('role', data.get('type'))
        match_mode = data.get('match_mode', data.get('matchType', MatchMode.ALL.value))
        try:
            return cls(
                role=ClauseRole(role),
                conditions=[Condition.from_dict(c) for c in data.get('conditions', [])],
                match_mode=MatchMode.from_value(match_mode),
                action=Action.from_value(data.get('action', Action.COOPERATE.value)),
            )
        except LogicTreeError:
            raise
        except (TypeError, ValueError) as e:
            raise LogicTreeError(f"Invalid clause {data!r}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'role': self.role.value,
            'conditions': [c.to_dict() for c in self.conditions],
            'match_mode': self.match_mode.value,
            'action': self.action.value,
        }


@dataclass(frozen=True)
class LogicTree:
    """
    Ordered clauses, evaluated top to bottom.

    Construction validates the clause chain: it must start with the only IF
    clause, hold at most one ELSE and put that ELSE last, and every condition
    needs N >= 1. Use ``LogicTree.from_dict(data, strict=False)`` to load
    stored trees that predate validation; clauses after an ELSE are dropped
    because they can never be reached.
    """

    clauses: Tuple[Clause, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'clauses', tuple(self.clauses))
        errors = self.validate()
        if errors:
            raise LogicTreeError('; '.join(errors))

    def validate(self) -> List[str]:
        """
        Check structural rules.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.clauses:
            errors.append("A logic tree needs at least one clause")
            return errors

        if self.clauses[0].role != ClauseRole.IF:
            errors.append("The first clause must be IF")

        for index, clause in enumerate(self.clauses[1:], start=1):
            if clause.role == ClauseRole.IF:
                errors.append(f"Clause {index + 1} is a second IF clause")

        else_positions = [
            i for i, c in enumerate(self.clauses) if c.role == ClauseRole.ELSE
        ]
        if len(else_positions) > 1:
            errors.append("Only one ELSE clause is allowed")
        if else_positions and else_positions[0] != len(self.clauses) - 1:
            errors.append("The ELSE clause must be the last clause")

        for index, clause in enumerate(self.clauses):
            for condition in clause.conditions:
                if condition.n < 1:
                    errors.append(
                        f"Clause {index + 1}: N must be at least 1 (got {condition.n})"
                    )

        return errors

    def __iter__(self) -> Iterator[Clause]:
        return iter(self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    @property
    def has_else(self) -> bool:
        """Whether the tree ends with an ELSE clause."""
        return any(c.role == ClauseRole.ELSE for c in self.clauses)

    @property
    def uses_random(self) -> bool:
        """Whether any clause resolves to a RANDOM action."""
        return any(c.action == Action.RANDOM for c in self.clauses)

    @classmethod
    def from_clauses(cls, *clauses: Clause) -> 'LogicTree':
        """Create a LogicTree from clause arguments."""
        return cls(clauses=clauses)

    @classmethod
    def from_dict(cls, data: Any, strict: bool = True) -> 'LogicTree':
        """
        Create a LogicTree from serialized data.

        Args:
            data: Either ``{"clauses": [...]}`` or a bare list of clauses
            strict: If False, drop unreachable clauses after the first ELSE
                instead of rejecting the tree

        Returns:
            LogicTree instance

        Raises:
            LogicTreeError: If the data is malformed or the tree is invalid
        """
        if isinstance(data, dict):
            raw_clauses = data.get('clauses')
        else:
            raw_clauses = data
        if not isinstance(raw_clauses, list):
            raise LogicTreeError(f"Expected a list of clauses, got {type(raw_clauses).__name__}")

        clauses = [Clause.from_dict(c) for c in raw_clauses]

        if not strict:
            clauses = _truncate_after_else(clauses)

        return cls(clauses=clauses)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {'clauses': [c.to_dict() for c in self.clauses]}

    def describe(self) -> str:
        """Render the tree as indented pseudo-code."""
        lines = []
        for clause in self.clauses:
            if clause.role == ClauseRole.ELSE:
                lines.append(f"ELSE -> {clause.action.value}")
                continue
            joiner = ' AND ' if clause.match_mode == MatchMode.ALL else ' OR '
            body = joiner.join(c.describe() for c in clause.conditions) or '<no conditions>'
            lines.append(f"{clause.role.value} {body} -> {clause.action.value}")
        return '\n'.join(lines)


def _truncate_after_else(clauses: List[Clause]) -> List[Clause]:
    """Drop clauses that follow the first ELSE."""
    for index, clause in enumerate(clauses):
        if clause.role == ClauseRole.ELSE and index < len(clauses) - 1:
            logger.warning(
                f"Dropping {len(clauses) - index - 1} unreachable clause(s) after ELSE"
            )
            return clauses[:index + 1]
    return clauses
