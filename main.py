"""
Dilemma Arena - Main Entry Point

Iterated Prisoner's Dilemma tournaments between user-authored strategies.

Usage:
    # Store the built-in strategies
    python main.py --mode seed-builtins

    # Save a strategy from a logic tree file and run its tournament
    python main.py --mode save --name "Forgiver" --logic-file forgiver.json

    # Run the grand tournament (what the hourly timer triggers)
    python main.py --mode tournament

    # Show standings / recent matches
    python main.py --mode standings
    python main.py --mode logs --limit 10
"""

import argparse
import logging
import sys

from cli.commands import MODES


def build_parser():
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Dilemma Arena - Iterated Prisoner's Dilemma tournaments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Save a strategy and compete
  python main.py --mode save --name Mirror --logic-file mirror.json --author Ada

  # Run the grand tournament with a reproducible RANDOM source
  python main.py --mode tournament --seed 42

  # Wipe the arena
  python main.py --mode clear --yes
        """
    )

    parser.add_argument(
        "--mode",
        type=str,
        default="standings",
        choices=sorted(MODES),
        help="Operation to run"
    )

    # Arena arguments
    parser.add_argument(
        "--arena",
        type=str,
        default=None,
        help="Path to the arena JSON file (default: arena.json or $DILEMMA_ARENA_FILE)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a tournament config JSON file"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for RANDOM actions"
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=None,
        help="Rounds per match (default: 20)"
    )

    # Save arguments
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Strategy name"
    )
    parser.add_argument(
        "--logic-file",
        type=str,
        default=None,
        help="Path to a logic tree JSON file"
    )
    parser.add_argument(
        "--author",
        type=str,
        default=None,
        help="Author display name"
    )
    parser.add_argument(
        "--author-id",
        type=str,
        default="cli",
        help="Author identifier"
    )

    # Output arguments
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of match records to show"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for exported results"
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm destructive operations"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    return MODES[args.mode](args)


if __name__ == "__main__":
    sys.exit(main())
