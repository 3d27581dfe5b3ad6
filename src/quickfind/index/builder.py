"""
Background index builder for QuickFind.

Owns the in-memory path index. A long-lived loop polls the removable volume
set and rescans the configured roots when volumes change, when the periodic
rescan interval has passed, or when a caller forces an update. Every rescan
publishes a brand-new snapshot and persists it, so the next process start can
serve searches from the cache before its first scan finishes.
"""

import time
import threading
import logging
from typing import List, Optional

from ..models.config import EngineConfig
from ..models.search_results import IndexSnapshot
from ..storage.persistent_store import PersistentStore, PersistenceError, INDEX_CACHE_NAME
from ..tools.fs_walker import FSWalker
from .volume_watcher import VolumeWatcher


logger = logging.getLogger(__name__)


class IndexBuilder:
    """
    Maintains the file path index and decides when to rebuild it.

    ``is_indexing`` and ``force_update`` are the only calls other threads
    make besides ``snapshot``; all three are cheap and never block on I/O.
    """

    def __init__(self, config: EngineConfig, store: PersistentStore,
                 volume_watcher: Optional[VolumeWatcher] = None,
                 walker: Optional[FSWalker] = None):
        """
        Initialize the builder and load the persisted index cache.

        Args:
            config: Engine configuration
            store: Persistence backend for the index cache
            volume_watcher: Volume poller (defaults to one on the configured mount root)
            walker: Filesystem walker (defaults to one using the indexing config)
        """
        self.config = config
        self.store = store
        self.volume_watcher = volume_watcher or VolumeWatcher(config.paths.volumes_root)
        self.walker = walker or FSWalker(config.indexing)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._snapshot_lock = threading.Lock()
        self._snapshot = IndexSnapshot()
        self._indexing = threading.Event()
        self._force = threading.Event()
        self._last_full_scan: Optional[float] = None

        self._load_cache()

    def _load_cache(self) -> None:
        """Publish the persisted index, if any, as the initial snapshot."""
        try:
            paths = self.store.read_lines(INDEX_CACHE_NAME)
        except PersistenceError as e:
            self.logger.warning(f"Ignoring unreadable index cache: {e}")
            return
        if paths:
            self._publish(paths)
            self.logger.info(f"Loaded {len(paths)} index entries from cache")

    def snapshot(self) -> IndexSnapshot:
        """Get the current index snapshot."""
        with self._snapshot_lock:
            return self._snapshot

    def is_indexing(self) -> bool:
        """Check whether a rescan is in progress."""
        return self._indexing.is_set()

    def force_update(self) -> None:
        """Request a rescan on the next cycle."""
        self._force.set()

    def _publish(self, paths: List[str]) -> IndexSnapshot:
        snapshot = IndexSnapshot(paths=tuple(paths))
        with self._snapshot_lock:
            self._snapshot = snapshot
        return snapshot

    def _rescan_reason(self, volumes_changed: bool, now: float) -> Optional[str]:
        """
        Decide whether this cycle should rescan.

        Returns:
            A short reason for the log, or None to skip the rescan
        """
        if self._force.is_set():
            return "manual"
        if volumes_changed:
            return "volumes changed"
        if self._last_full_scan is None:
            return "initial"
        if now - self._last_full_scan > self.config.indexing.rescan_interval:
            return "periodic"
        return None

    def rebuild_if_needed(self, now: Optional[float] = None) -> bool:
        """
        Run one builder cycle.

        Args:
            now: Monotonic timestamp for the cycle (defaults to the current time)

        Returns:
            True if a rescan was performed
        """
        now = time.monotonic() if now is None else now
        volumes_changed, _ = self.volume_watcher.poll()
        reason = self._rescan_reason(volumes_changed, now)
        if reason is None:
            return False

        self.logger.info(f"Starting index rescan (reason: {reason})")
        self._force.clear()
        self._last_full_scan = now
        self.rebuild()
        return True

    def scan_roots(self) -> List[str]:
        """Get the roots walked by a rescan."""
        return self.config.get_scan_roots()

    def rebuild(self) -> IndexSnapshot:
        """
        Rescan all roots, persist the result, and publish a new snapshot.

        Whatever the walk collected is published even if it stopped early on
        an error.

        Returns:
            The published snapshot
        """
        self._indexing.set()
        started = time.monotonic()
        paths: List[str] = []
        try:
            self.walker.reset_stats()
            try:
                for path in self.walker.walk_paths(self.scan_roots()):
                    paths.append(path)
            except Exception as e:
                self.logger.error(f"Index walk aborted after {len(paths)} entries: {e}")

            try:
                self.store.write_lines(INDEX_CACHE_NAME, paths)
            except PersistenceError as e:
                self.logger.warning(f"Index cache not persisted: {e}")

            snapshot = self._publish(paths)
        finally:
            self._indexing.clear()

        stats = self.walker.get_stats()
        self.logger.info(
            f"Index rescan finished: {len(paths)} entries, {stats['errors']} errors, "
            f"{time.monotonic() - started:.2f}s"
        )
        return snapshot

    def run_forever(self, stop_event: threading.Event) -> None:
        """
        Run builder cycles until stopped.

        Cycles are ``poll_interval`` seconds apart regardless of how long a
        rescan takes. A failing cycle is logged and the loop continues.

        Args:
            stop_event: Event that ends the loop
        """
        while not stop_event.is_set():
            try:
                self.rebuild_if_needed()
            except Exception as e:
                self.logger.error(f"Index cycle failed: {e}")
            stop_event.wait(self.config.indexing.poll_interval)

