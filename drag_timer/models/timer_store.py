"""Persistence for active timers.

Timers are kept as a list of records under a single key. Every save
replaces the whole list.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .configuration_model import get_config_dir
from .errors import TimerStoreError

SAVED_TIMERS_KEY = "saved_timers"


class TimerStore:
    """Storage for the serialized live set."""

    def load_timer_records(self) -> list[dict[str, Any]]:
        raise NotImplementedError

    def save_timer_records(self, records: list[dict[str, Any]]) -> None:
        raise NotImplementedError


class JsonTimerStore(TimerStore):
    """TimerStore backed by a JSON document on disk."""

    DEFAULT_FILE = "timers.json"

    def __init__(self, file_path: Optional[str] = None):
        """Initialize the store.

        Args:
            file_path: Path of the JSON file (defaults to the OS config directory)
        """
        self.logger = logging.getLogger(__name__)
        self.file_path = Path(file_path) if file_path else get_config_dir() / self.DEFAULT_FILE

    def load_timer_records(self) -> list[dict[str, Any]]:
        """Read the saved records.

        Returns:
            The stored records, or an empty list when nothing was saved yet

        Raises:
            TimerStoreError: If the file cannot be read or has the wrong shape
        """
        if not self.file_path.exists():
            self.logger.debug(f"No saved timers at {self.file_path}")
            return []

        try:
            with open(self.file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise TimerStoreError(f"Could not read saved timers from {self.file_path}: {e}") from e

        records = data.get(SAVED_TIMERS_KEY, []) if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise TimerStoreError(f"Saved timers in {self.file_path} are not a list")

        self.logger.info(f"Loaded {len(records)} saved timer(s) from {self.file_path}")
        return records

    def save_timer_records(self, records: list[dict[str, Any]]) -> None:
        """Replace the saved records with ``records``.

        Raises:
            TimerStoreError: If the file cannot be written
        """
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump({SAVED_TIMERS_KEY: records}, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            raise TimerStoreError(f"Could not save timers to {self.file_path}: {e}") from e

        self.logger.debug(f"Saved {len(records)} timer(s) to {self.file_path}")
