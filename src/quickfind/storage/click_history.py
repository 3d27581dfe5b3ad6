"""
Click history for QuickFind.

Counts how often each path has been opened. The ranker turns these counts into
its strongest bonus, so results the user keeps choosing rise to the top.
"""

import threading
import logging
from typing import Dict, Optional
from pydantic import TypeAdapter, ValidationError, NonNegativeInt

from .persistent_store import PersistentStore, PersistenceError, CLICK_HISTORY_NAME


logger = logging.getLogger(__name__)

_entry_adapter = TypeAdapter(NonNegativeInt)


class ClickHistory:
    """
    Thread-safe path -> click count table persisted after every mutation.

    The lock guarding the in-memory map is also held while flushing, so
    concurrent clicks are serialized and the file always reflects a complete
    table.
    """

    def __init__(self, store: PersistentStore, name: str = CLICK_HISTORY_NAME):
        """
        Initialize the history and load any persisted counts.

        Args:
            store: Persistence backend
            name: Key of the history table inside the store
        """
        self.store = store
        self.name = name
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {}
        self.load()

    def load(self) -> None:
        """Replace the in-memory table with the persisted one."""
        try:
            raw = self.store.read_json(self.name, default={})
        except PersistenceError as e:
            logger.warning(f"Ignoring unreadable click history: {e}")
            return

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring click history with unexpected type {type(raw).__name__}")
            return

        counts = {}
        for path, value in raw.items():
            try:
                counts[str(path)] = _entry_adapter.validate_python(value)
            except ValidationError:
                logger.warning(f"Dropping invalid click count for {path}: {value!r}")

        with self._lock:
            self._counts = counts
        logger.info(f"Loaded {len(counts)} click history entries")

    def record_click(self, path: str) -> int:
        """
        Increment the click count for a path and persist the table.

        Args:
            path: Absolute path that was opened

        Returns:
            The new click count
        """
        with self._lock:
            count = self._counts.get(path, 0) + 1
            self._counts[path] = count
            try:
                self.store.write_json(self.name, self._counts)
            except PersistenceError as e:
                logger.warning(f"Click history not persisted: {e}")
        logger.info(f"Recorded click on {path} (count: {count})")
        return count

    def count(self, path: str) -> int:
        """Get the click count for a path (0 if never clicked)."""
        with self._lock:
            return self._counts.get(path, 0)

    def snapshot(self) -> Dict[str, int]:
        """Get a copy of the full table."""
        with self._lock:
            return dict(self._counts)

    def get(self, path: str, default: Optional[int] = None) -> Optional[int]:
        """Mapping-style lookup."""
        with self._lock:
            return self._counts.get(path, default)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
