"""
Arena store persisted to a single JSON document.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

from dilemmaarena.tournament.results import MatchRecord
from dilemmaarena.tournament.strategies import Strategy
from dilemmaarena.utils.file_io import FileIO

from .base import StorageError
from .memory import InMemoryArenaStore

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class JsonArenaStore(InMemoryArenaStore):
    """
    Arena store backed by a JSON file.

    The document is ``{"version": 1, "strategies": [...], "match_records": [...]}``.
    Each change rewrites the whole document atomically before the in-memory
    state is replaced, so a failed write changes neither.
    """

    def __init__(self, filepath: str):
        """
        Open (or create on first write) an arena file.

        Args:
            filepath: Path to the arena JSON document

        Raises:
            StorageError: If the file exists but cannot be read
        """
        super().__init__()
        self.filepath = Path(filepath)
        self._load()

    def _load(self) -> None:
        try:
            data = FileIO.load_json(self.filepath, default=None)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read arena file {self.filepath}: {e}") from e

        if data is None:
            logger.info(f"No arena file at {self.filepath}; starting empty")
            return

        if not isinstance(data, dict):
            raise StorageError(
                f"Malformed arena file {self.filepath}: expected a JSON object, "
                f"got {type(data).__name__}"
            )

        try:
            strategies = [Strategy.from_dict(s) for s in data.get("strategies", [])]
            records = [MatchRecord.from_dict(r) for r in data.get("match_records", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Malformed arena file {self.filepath}: {e}") from e

        self._strategies = {s.id: s for s in strategies}
        self._records = records
        logger.info(
            f"Loaded arena from {self.filepath}: {len(strategies)} strategies, "
            f"{len(records)} match records"
        )

    def _commit(self, strategies: Dict[str, Strategy], records: List[MatchRecord]) -> None:
        document: Dict[str, Any] = {
            "version": FORMAT_VERSION,
            "strategies": [s.to_dict() for s in strategies.values()],
            "match_records": [r.to_dict() for r in records],
        }
        try:
            FileIO.save_json_atomic(document, self.filepath)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write arena file {self.filepath}: {e}", exc_info=True)
            raise StorageError(f"Could not write arena file {self.filepath}: {e}") from e

        super()._commit(strategies, records)
