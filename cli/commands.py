"""
CLI Commands for Dilemma Arena.

This module contains the command implementations for the different modes:
- save: store a strategy from a logic tree file and run its on-save tournament
- tournament: run the grand tournament over the whole arena
- standings: show strategies ranked by score
- logs: show recent match records
- reset-scores: set every score to zero
- clear: delete every strategy and match record
- export: write standings and match logs to CSV
- seed-builtins: store the built-in reference strategies

Every command returns a process exit status.
"""

import logging

from dilemmaarena.arena import Arena
from dilemmaarena.core.builtins import BUILTIN_LOGIC_TREES
from dilemmaarena.core.logic_tree import LogicTreeError
from dilemmaarena.storage import JsonArenaStore, StorageError
from dilemmaarena.tournament.config import TournamentConfig
from dilemmaarena.tournament.results import (
    ResultsExporter,
    format_standings,
    summarize_outcome,
)
from dilemmaarena.utils.file_io import FileIO

logger = logging.getLogger(__name__)


def build_config(args):
    """Resolve configuration from a config file, the environment and flags."""
    if getattr(args, 'config', None):
        config = TournamentConfig.from_json(args.config)
    else:
        config = TournamentConfig()

    config.apply_environment()

    if getattr(args, 'arena', None):
        config.arena_file = args.arena
    if getattr(args, 'seed', None) is not None:
        config.seed = args.seed
    if getattr(args, 'rounds', None) is not None:
        config.rounds_per_match = args.rounds
    if getattr(args, 'output_dir', None):
        config.output_dir = args.output_dir

    return config


def build_arena(args):
    """Open the arena named by the arguments."""
    config = build_config(args)
    store = JsonArenaStore(config.arena_file)
    return Arena(store, config)


def save_mode(args):
    """Store a strategy and run its on-save tournament."""
    if not args.logic_file:
        logger.error("--logic-file is required for save mode")
        return 2
    if not args.name:
        logger.error("--name is required for save mode")
        return 2

    try:
        logic_tree = FileIO.load_logic_tree(args.logic_file)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load logic tree from {args.logic_file}: {e}")
        return 1

    arena = build_arena(args)
    try:
        strategy, outcome = arena.save_strategy(
            name=args.name,
            logic_tree=logic_tree,
            author_id=args.author_id,
            author_display_name=args.author,
        )
    except (LogicTreeError, ValueError) as e:
        logger.error(f"Invalid strategy: {e}")
        return 1
    except StorageError as e:
        logger.error(f"Failed to save or run tournament: {e}")
        return 1

    print(f"Saved '{strategy.name}' ({strategy.id}) by {strategy.author_display_name}")
    print(logic_tree.describe())
    print(summarize_outcome(outcome))
    for record in outcome.records:
        print(f"  vs {record.strategy2_name}: {record.score1}-{record.score2}")
    print(f"Score: {strategy.score}")
    return 0


def tournament_mode(args):
    """Run the grand tournament."""
    arena = build_arena(args)
    try:
        outcome = arena.run_grand_tournament()
    except StorageError as e:
        logger.error(f"Grand tournament failed: {e}")
        return 1

    if outcome is None:
        print("Grand tournament skipped (need at least 2 strategies).")
        return 0

    print(summarize_outcome(outcome))
    standings_mode(args, arena=arena)
    return 0


def standings_mode(args, arena=None):
    """Print strategies ranked by score."""
    arena = arena or build_arena(args)
    strategies = arena.store.list_strategies()

    if not strategies:
        print("The arena is empty.")
        return 0

    for line in format_standings(strategies):
        print(line)
    return 0


def logs_mode(args):
    """Print recent match records."""
    arena = build_arena(args)
    records = arena.match_logs(limit=args.limit)

    if not records:
        print("No matches played yet.")
        return 0

    for record in records:
        moves1, moves2 = record.moves_as_text()
        print(
            f"{record.strategy1_name} vs {record.strategy2_name}  "
            f"{record.score1} - {record.score2}"
        )
        print(f"  {moves1}")
        print(f"  {moves2}")
    return 0


def reset_mode(args):
    """Set every strategy's score to zero."""
    if not args.yes:
        print("Refusing to reset scores without --yes.")
        return 2
    arena = build_arena(args)
    try:
        reset = arena.reset_scores()
    except StorageError as e:
        logger.error(f"Failed to reset scores: {e}")
        return 1
    if not reset:
        print("A tournament is in progress; scores were not reset.")
        return 1
    print("All strategy scores have been reset to 0.")
    return 0


def clear_mode(args):
    """Delete every strategy and match record."""
    if not args.yes:
        print("Refusing to clear the arena without --yes.")
        return 2
    arena = build_arena(args)
    try:
        cleared = arena.clear_arena()
    except StorageError as e:
        logger.error(f"Failed to clear arena: {e}")
        return 1
    if not cleared:
        print("A tournament is in progress; the arena was not cleared.")
        return 1
    print("The entire arena (all strategies and logs) has been cleared.")
    return 0


def export_mode(args):
    """Export standings and match logs to CSV."""
    arena = build_arena(args)
    exporter = ResultsExporter(arena.config.output_dir)
    timestamp = FileIO.timestamp()
    strategies = arena.store.list_strategies()
    standings_path = exporter.export_standings_csv(strategies, timestamp)
    matches_path = exporter.export_matches_csv(arena.match_logs(), timestamp)
    exporter.print_standings(strategies)
    print(f"Standings: {standings_path}")
    print(f"Matches:   {matches_path}")
    return 0


def seed_builtins_mode(args):
    """Store every built-in logic tree as an arena strategy."""
    arena = build_arena(args)
    try:
        for key, logic_tree in BUILTIN_LOGIC_TREES.items():
            strategy, outcome = arena.save_strategy(
                name=key,
                logic_tree=logic_tree,
                author_id="arena",
                author_display_name="Arena",
            )
            print(f"Saved {strategy.name}: {summarize_outcome(outcome)}")
    except StorageError as e:
        logger.error(f"Failed to seed built-in strategies: {e}")
        return 1
    return 0


MODES = {
    'save': save_mode,
    'tournament': tournament_mode,
    'standings': standings_mode,
    'logs': logs_mode,
    'reset-scores': reset_mode,
    'clear': clear_mode,
    'export': export_mode,
    'seed-builtins': seed_builtins_mode,
}
