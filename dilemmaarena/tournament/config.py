"""
Tournament configuration.

This module provides a unified configuration class for tournament settings.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dilemmaarena.constants import DEFAULT_ARENA_FILE, DEFAULT_OUTPUT_DIR, DEFAULT_ROUNDS

ARENA_FILE_ENV = "DILEMMA_ARENA_FILE"
SEED_ENV = "DILEMMA_ARENA_SEED"


@dataclass
class TournamentConfig:
    """
    Configuration for tournaments.

    Attributes:
        name: Tournament name (used in logs and exports)
        rounds_per_match: Rounds played in every match
        seed: Seed for the RANDOM action generator (None = unseeded)
        arena_file: JSON file backing the arena store
        output_dir: Directory for exported results
        export_results: Whether to export each grand tournament pass
    """

    name: str = "Grand Tournament"
    rounds_per_match: int = DEFAULT_ROUNDS
    seed: Optional[int] = None
    arena_file: str = DEFAULT_ARENA_FILE
    output_dir: str = DEFAULT_OUTPUT_DIR
    export_results: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """
        Create TournamentConfig from dictionary.

        Supports both flat config and nested 'tournament' key format.

        Args:
            data: Configuration dictionary

        Returns:
            TournamentConfig instance
        """
        if "tournament" in data:
            tournament_data = data["tournament"]
            output_data = data.get("output", {})

            return cls(
                name=tournament_data.get("name", "Grand Tournament"),
                rounds_per_match=tournament_data.get("rounds_per_match", DEFAULT_ROUNDS),
                seed=tournament_data.get("seed"),
                arena_file=output_data.get("arena_file", DEFAULT_ARENA_FILE),
                output_dir=output_data.get("results_dir", DEFAULT_OUTPUT_DIR),
                export_results=output_data.get("export_results", False),
            )

        return cls(
            name=data.get("name", "Grand Tournament"),
            rounds_per_match=data.get("rounds_per_match", DEFAULT_ROUNDS),
            seed=data.get("seed"),
            arena_file=data.get("arena_file", DEFAULT_ARENA_FILE),
            output_dir=data.get("output_dir", DEFAULT_OUTPUT_DIR),
            export_results=data.get("export_results", False),
        )

    @classmethod
    def from_json(cls, filepath: str) -> "TournamentConfig":
        """
        Load configuration from JSON file.

        Args:
            filepath: Path to JSON config file

        Returns:
            TournamentConfig instance
        """
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def apply_environment(self, environ: Optional[Dict[str, str]] = None) -> "TournamentConfig":
        """
        Override settings from environment variables.

        DILEMMA_ARENA_FILE sets arena_file and DILEMMA_ARENA_SEED sets seed.

        Returns:
            self for chaining
        """
        environ = os.environ if environ is None else environ

        if environ.get(ARENA_FILE_ENV):
            self.arena_file = environ[ARENA_FILE_ENV]

        if environ.get(SEED_ENV):
            try:
                self.seed = int(environ[SEED_ENV])
            except ValueError as e:
                raise ValueError(
                    f"{SEED_ENV} must be an integer, got {environ[SEED_ENV]!r}"
                ) from e

        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "rounds_per_match": self.rounds_per_match,
            "seed": self.seed,
            "arena_file": self.arena_file,
            "output_dir": self.output_dir,
            "export_results": self.export_results,
        }

    def to_json(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not isinstance(self.rounds_per_match, int) or self.rounds_per_match < 1:
            errors.append("rounds_per_match must be a positive integer")

        if self.seed is not None and not isinstance(self.seed, int):
            errors.append(f"seed must be an integer, got {self.seed!r}")

        if not self.arena_file:
            errors.append("arena_file is required")

        return errors
