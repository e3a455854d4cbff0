"""
Dilemma Arena Tournament Library.

This package runs tournament passes between stored strategies. It supports:
- Round-robin "grand" tournaments over every strategy
- On-save tournaments of a new strategy against all existing ones
- Fixed-length match simulation with a seedable RANDOM source
- Result bundles (score deltas + match records) for atomic persistence
- Results export (JSON/CSV)

Example usage:
    from dilemmaarena.tournament import (
        Strategy,
        TournamentConfig,
        TournamentRunner,
    )

    strategies = [
        Strategy.builtin("titForTat"),
        Strategy.builtin("alwaysBetray"),
    ]

    runner = TournamentRunner(TournamentConfig(seed=42))
    outcome = runner.run_grand_tournament(strategies)
"""

from .strategies import Strategy, compile_strategy
from .match import MatchOutcome, simulate_match
from .schedule import (
    ScheduledMatch,
    calculate_total_matches,
    generate_challenge_schedule,
    generate_round_robin_schedule,
)
from .results import (
    MatchRecord,
    ResultsExporter,
    StrategyStanding,
    TournamentOutcome,
    rank_strategies,
)
from .config import TournamentConfig
from .runner import TournamentRunner

__all__ = [
    # Strategies
    "Strategy",
    "compile_strategy",
    # Matches
    "MatchOutcome",
    "simulate_match",
    # Scheduling
    "ScheduledMatch",
    "calculate_total_matches",
    "generate_challenge_schedule",
    "generate_round_robin_schedule",
    # Results
    "MatchRecord",
    "ResultsExporter",
    "StrategyStanding",
    "TournamentOutcome",
    "rank_strategies",
    # Config
    "TournamentConfig",
    # Runner
    "TournamentRunner",
]
