"""
Tournament scheduling utilities.

This module provides functions for generating the pairings of a tournament
pass: a full round-robin, or one new entrant against every existing strategy.
"""

from dataclasses import dataclass
from typing import List, Sequence

from .strategies import Strategy


@dataclass(frozen=True)
class ScheduledMatch:
    """
    Represents a scheduled match in a tournament pass.

    Attributes:
        match_index: Position of the match within the pass
        strategy1: Strategy playing the first side
        strategy2: Strategy playing the second side
    """

    match_index: int
    strategy1: Strategy
    strategy2: Strategy

    def __repr__(self) -> str:
        return (
            f"ScheduledMatch({self.match_index}: "
            f"{self.strategy1.name} vs {self.strategy2.name})"
        )


def generate_round_robin_schedule(strategies: Sequence[Strategy]) -> List[ScheduledMatch]:
    """
    Generate a complete round-robin schedule.

    Every strategy meets every other strategy exactly once. Pairs are
    ordered by ascending (i, j) with i < j, and strategy i plays the
    first side.

    Args:
        strategies: Tournament participants, in snapshot order

    Returns:
        List of N*(N-1)/2 scheduled matches
    """
    schedule = []
    for i in range(len(strategies)):
        for j in range(i + 1, len(strategies)):
            schedule.append(
                ScheduledMatch(
                    match_index=len(schedule),
                    strategy1=strategies[i],
                    strategy2=strategies[j],
                )
            )
    return schedule


def generate_challenge_schedule(
    new_strategy: Strategy,
    existing: Sequence[Strategy],
) -> List[ScheduledMatch]:
    """
    Generate the matches for a newly saved strategy.

    The new strategy plays the first side against each existing strategy
    in iteration order. An existing entry with the same id is skipped.

    Args:
        new_strategy: Strategy that was just created
        existing: Strategies already in the arena

    Returns:
        One scheduled match per opponent
    """
    schedule = []
    for opponent in existing:
        if opponent.id == new_strategy.id:
            continue
        schedule.append(
            ScheduledMatch(
                match_index=len(schedule),
                strategy1=new_strategy,
                strategy2=opponent,
            )
        )
    return schedule


def calculate_total_matches(num_strategies: int) -> int:
    """
    Calculate the number of matches in a round-robin pass.

    Args:
        num_strategies: Number of participants

    Returns:
        Number of unordered pairs
    """
    if num_strategies < 2:
        return 0
    return num_strategies * (num_strategies - 1) // 2
