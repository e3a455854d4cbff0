"""
File I/O utilities for arena documents, logic trees and exports.
"""
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from dilemmaarena.core.logic_tree import LogicTree

logger = logging.getLogger(__name__)


class FileIO:
    """Handles file input/output operations."""

    @staticmethod
    def load_json(filepath, default=None):
        """
        Load a JSON document.

        Args:
            filepath: Path to the JSON file
            default: Value returned when the file does not exist

        Returns:
            Parsed JSON data, or default for a missing file
        """
        filepath = Path(filepath)
        if not filepath.exists():
            return default

        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)

    @staticmethod
    def save_json_atomic(data, filepath):
        """
        Write a JSON document so readers never see a half-written file.

        The data goes to a temporary file in the same directory, which then
        replaces the target in one rename.

        Args:
            data: JSON-serializable data
            filepath: Destination path

        Returns:
            Path to the written file
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix='.tmp', dir=str(filepath.parent)
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, filepath)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug(f"Saved {filepath}")
        return str(filepath)

    @staticmethod
    def load_logic_tree(filepath, strict=True):
        """
        Load a logic tree from a JSON file.

        Args:
            filepath: Path to a file holding ``{"clauses": [...]}`` or a bare
                clause list
            strict: Reject structurally invalid trees

        Returns:
            LogicTree instance
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return LogicTree.from_dict(data, strict=strict)

    @staticmethod
    def save_logic_tree(logic_tree, filepath):
        """Save a logic tree to a JSON file."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(logic_tree.to_dict(), f, indent=2)
        return str(filepath)

    @staticmethod
    def timestamp():
        """Filename-friendly timestamp."""
        return datetime.now().strftime("%Y%m%d_%H%M%S")
