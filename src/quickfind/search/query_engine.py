"""
Dual-source query engine for QuickFind.

Each search fans out to the native metadata index and to a scan of the
in-memory path index, waits for both, merges and deduplicates their results,
and hands them to the ranker. Either branch may fail or time out; it then
contributes nothing and the search still succeeds.
"""

import time
import logging
from typing import FrozenSet, List, Optional, Set, Tuple
from concurrent.futures import Future, ThreadPoolExecutor, wait

from ..index.alias_table import AliasTable
from ..index.builder import IndexBuilder
from ..index.volume_watcher import VolumeWatcher
from ..models.config import EngineConfig
from ..models.search_query import SearchQuery
from ..models.search_results import IndexSnapshot, SearchResult, display_name
from ..storage.click_history import ClickHistory
from ..tools.native_index import NativeIndexAdapter
from .matching import is_acronym_match, is_alias_match
from .ranker import Ranker


logger = logging.getLogger(__name__)


def merge_results(*branches: List[SearchResult]) -> List[SearchResult]:
    """
    Concatenate result lists, keeping only the first occurrence of each path.

    Args:
        branches: Result lists in priority order

    Returns:
        Deduplicated results in encounter order
    """
    seen = set()
    merged = []
    for branch in branches:
        for result in branch:
            if result.path in seen:
                continue
            seen.add(result.path)
            merged.append(result)
    return merged


class QueryEngine:
    """
    Fan-out/fan-in search controller.

    Attributes:
        config: Engine configuration
        index: Source of in-memory index snapshots
        aliases: Alias table used to resolve the whole keyword
        history: Click history consulted by the ranker
        native: Native index adapter
        volumes: Volume watcher used to drop paths on detached volumes
        ranker: Result ranker
    """

    def __init__(self, config: EngineConfig, index: IndexBuilder, aliases: AliasTable,
                 history: ClickHistory, native: Optional[NativeIndexAdapter] = None,
                 volumes: Optional[VolumeWatcher] = None, ranker: Optional[Ranker] = None):
        self.config = config
        self.index = index
        self.aliases = aliases
        self.history = history
        self.native = native or NativeIndexAdapter(config)
        self.volumes = volumes or index.volume_watcher
        self.ranker = ranker or Ranker(config.paths.applications_dir, config.limits.max_results)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def search(self, keyword: str, type_filter: str = "all") -> List[SearchResult]:
        """
        Search both sources and return ranked results.

        Args:
            keyword: Keyword as typed by the user
            type_filter: One of all, image, video, audio, pdf, doc, folder, app

        Returns:
            At most ``limits.max_results`` results in ranked order; empty for a
            blank keyword
        """
        query = SearchQuery(keyword=keyword, type_filter=type_filter)
        if query.is_empty():
            return []

        started = time.monotonic()
        alias_hint = self.aliases.resolve(query.normalized)
        snapshot = self.index.snapshot()
        volumes = self.volumes.current_volumes()

        self.logger.debug(f"Search {query} (alias: {alias_hint})")

        pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="quickfind-search")
        try:
            native_future = pool.submit(self._search_native, query, alias_hint)
            memory_future = pool.submit(self.scan_index, query, alias_hint, snapshot, volumes)
            # One deadline shared by both branches
            done, _ = wait([native_future, memory_future], timeout=self.config.limits.branch_timeout)
            native_results = self._collect("native index", native_future, done)
            memory_results = self._collect("memory index", memory_future, done)
        finally:
            # A branch that overran its wait bound finishes in the background
            pool.shutdown(wait=False)

        merged = merge_results(native_results, memory_results)
        ranked = self.ranker.rank(merged, query, alias_hint, self.history.snapshot())

        self.logger.info(
            f"Search '{query.keyword}' ({query.type_filter.value}): native {len(native_results)}, "
            f"memory {len(memory_results)}, returned {len(ranked)} in {time.monotonic() - started:.3f}s"
        )
        return ranked

    def _collect(self, branch: str, future: Future, done: Set[Future]) -> List[SearchResult]:
        """Get a branch's results, treating timeout or failure as no results."""
        if future not in done:
            self.logger.warning(f"{branch} search timed out after {self.config.limits.branch_timeout}s")
            return []
        try:
            return future.result()
        except Exception as e:
            self.logger.warning(f"{branch} search failed: {e}")
        return []

    def _search_native(self, query: SearchQuery, alias_hint: Optional[str]) -> List[SearchResult]:
        paths = self.native.query(query.words, alias_hint, query.type_filter)
        return [SearchResult.from_path(path) for path in paths]

    def scan_index(self, query: SearchQuery, alias_hint: Optional[str], snapshot: IndexSnapshot,
                   volumes: FrozenSet[str]) -> List[SearchResult]:
        """
        Scan an index snapshot for matches.

        Args:
            query: Non-empty search query
            alias_hint: Canonical name resolved from the keyword, if any
            snapshot: Index snapshot to scan
            volumes: Currently mounted volumes

        Returns:
            Strong matches in index order, followed by fallback candidates when
            there are few strong matches
        """
        strong, fallback = self._classify(query, alias_hint, snapshot, volumes)

        limits = self.config.limits
        if len(strong) < limits.fallback_threshold:
            strong.extend(fallback[:limits.max_fallback])
        return strong

    def _classify(self, query: SearchQuery, alias_hint: Optional[str], snapshot: IndexSnapshot,
                  volumes: FrozenSet[str]) -> Tuple[List[SearchResult], List[SearchResult]]:
        keyword = query.normalized
        words = query.words
        type_filter = query.type_filter
        max_strong = self.config.limits.max_strong_matches

        strong: List[SearchResult] = []
        fallback: List[SearchResult] = []

        for path in snapshot.paths:
            if not type_filter.accepts(path):
                continue
            if not self.volumes.is_available(path, volumes):
                continue

            name = display_name(path)
            name_lc = name.lower()
            path_lc = path.lower()

            matched = sum(1 for word in words if word in name_lc or word in path_lc)
            if matched < len(words):
                if is_alias_match(alias_hint, name_lc) or is_acronym_match(keyword, name_lc):
                    matched = len(words)

            if matched == len(words):
                strong.append(SearchResult(path=path, name=name))
                if len(strong) >= max_strong:
                    break
            elif matched > 0 and len(words) > 1:
                fallback.append(SearchResult(path=path, name=name))

        return strong, fallback
