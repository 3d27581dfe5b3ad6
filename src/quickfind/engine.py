"""
Search engine facade for QuickFind.

This is the surface used by the application shell: search, indexing status,
forced reindexing, click recording, and the open/copy actions. It wires the
components together and owns the background index and alias refresh loops.
"""

import threading
import logging
from typing import Dict, List, Optional, Union
from pathlib import Path

from .config.parser import load_config
from .index.alias_table import AliasTable
from .index.builder import IndexBuilder
from .index.volume_watcher import VolumeWatcher
from .models.config import EngineConfig
from .models.search_results import SearchResult
from .search.query_engine import QueryEngine
from .storage.click_history import ClickHistory
from .storage.persistent_store import PersistentStore
from .tools import shell
from .tools.native_index import NativeIndexAdapter


logger = logging.getLogger(__name__)


class SearchEngine:
    """
    Entry point wiring the index, alias table, click history, and query engine.

    Background loops only run after ``start``; until then the engine serves
    searches from the persisted index cache.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 store: Optional[PersistentStore] = None,
                 native: Optional[NativeIndexAdapter] = None):
        """
        Initialize the engine.

        Args:
            config: Engine configuration (defaults to built-in settings)
            store: Persistence backend (defaults to one in ``paths.cache_dir``)
            native: Native index adapter (defaults to one built from the config)
        """
        self.config = config or EngineConfig()
        self.store = store or PersistentStore(self.config.paths.cache_dir)
        self.volumes = VolumeWatcher(self.config.paths.volumes_root)
        self.history = ClickHistory(self.store)
        self.aliases = AliasTable(self.config.paths.applications_dir, extra=self.config.aliases.extra)
        self.index = IndexBuilder(self.config, self.store, volume_watcher=self.volumes)
        self.query_engine = QueryEngine(
            self.config, self.index, self.aliases, self.history,
            native=native or NativeIndexAdapter(self.config),
            volumes=self.volumes
        )

        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    @classmethod
    def from_config_file(cls, config_path: Optional[Union[str, Path]] = None) -> 'SearchEngine':
        """
        Create an engine from a YAML configuration file.

        Args:
            config_path: Configuration file; searched for in default locations if None

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        result = load_config(config_path)
        for warning in result.warnings:
            logger.warning(warning)
        return cls(result.config)

    def start(self) -> None:
        """Start the index builder and alias refresh loops."""
        if self._threads:
            logger.warning("Search engine already started")
            return
        self._stop.clear()
        self._threads = [
            threading.Thread(target=self.index.run_forever, args=(self._stop,),
                             name="quickfind-indexer", daemon=True),
            threading.Thread(target=self.aliases.run_forever,
                             args=(self._stop, self.config.aliases.refresh_interval),
                             name="quickfind-aliases", daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        logger.info("Search engine started")

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal the background loops to exit.

        Args:
            timeout: Seconds to wait for each loop; None returns immediately
        """
        self._stop.set()
        if timeout is not None:
            for thread in self._threads:
                thread.join(timeout=timeout)
        self._threads = []
        logger.info("Search engine stopped")

    def search_results(self, keyword: str, type_filter: str = "all") -> List[SearchResult]:
        """Search and return scored results."""
        return self.query_engine.search(keyword, type_filter)

    def search(self, keyword: str, type_filter: str = "all") -> List[Dict[str, str]]:
        """
        Search the index and the native metadata index.

        Args:
            keyword: Keyword as typed by the user
            type_filter: One of all, image, video, audio, pdf, doc, folder, app

        Returns:
            Up to 100 ``{"path", "name"}`` entries in ranked order
        """
        return [result.to_dict() for result in self.search_results(keyword, type_filter)]

    def is_indexing(self) -> bool:
        """Check whether a rescan is in progress."""
        return self.index.is_indexing()

    def trigger_index_update(self) -> None:
        """Request a rescan on the next builder cycle."""
        self.index.force_update()

    def record_click(self, path: str) -> int:
        """
        Record that the user chose a result.

        Returns:
            The new click count for the path
        """
        return self.history.record_click(path)

    def open_file(self, path: str) -> Optional[str]:
        """Record a click and open the path; returns an error message on failure."""
        self.record_click(path)
        return shell.open_file(path)

    def open_folder(self, path: str) -> Optional[str]:
        """Record a click and open the containing folder; returns an error message on failure."""
        self.record_click(path)
        return shell.open_folder(path)

    def copy_to_clipboard(self, path: str) -> Optional[str]:
        """Copy a result to the clipboard; returns an error message on failure."""
        return shell.copy_to_clipboard(path)
