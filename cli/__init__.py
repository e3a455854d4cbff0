"""CLI commands for Dilemma Arena."""

from cli.commands import (
    MODES,
    clear_mode,
    export_mode,
    logs_mode,
    reset_mode,
    save_mode,
    seed_builtins_mode,
    standings_mode,
    tournament_mode,
)

__all__ = [
    'MODES', 'save_mode', 'tournament_mode', 'standings_mode', 'logs_mode',
    'reset_mode', 'clear_mode', 'export_mode', 'seed_builtins_mode',
]
