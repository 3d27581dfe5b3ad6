"""
Filesystem walker for QuickFind.

This module traverses the index roots and yields every visited path, files and
directories alike. Pruning patterns decide which entries are skipped and which
directories are listed without being descended into (for example a
``node_modules`` folder is indexed, its contents are not).
"""

import os
from pathlib import Path
from typing import Dict, List, Iterator
import logging

from ..models.config import IndexingConfig


logger = logging.getLogger(__name__)


class FSWalker:
    """
    Pruned directory walker used by the index builder.

    This class provides directory traversal with support for:
    - Ignore pattern matching (gitignore-style) on files and directories
    - Listing a directory while pruning its contents
    - An upper bound on the number of collected entries
    - Error counting without aborting the walk
    """

    def __init__(self, config: IndexingConfig):
        """
        Initialize the filesystem walker.

        Args:
            config: Indexing configuration holding pruning patterns and limits
        """
        self.config = config
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'entries_collected': 0,
            'directories_traversed': 0,
            'entries_ignored': 0,
            'errors': 0
        }

    def walk_paths(self, roots: List[str]) -> Iterator[str]:
        """
        Walk through root directories and yield every indexed path.

        Roots themselves are not yielded. Missing roots are skipped.

        Args:
            roots: List of root directory paths to walk

        Yields:
            Absolute paths in traversal order
        """
        for root in roots:
            root_path = Path(root).expanduser()
            if not root_path.exists():
                logger.debug(f"Root directory does not exist: {root_path}")
                continue

            if not root_path.is_dir():
                logger.warning(f"Root path is not a directory: {root_path}")
                continue

            if self._limit_reached():
                return

            logger.info(f"Walking directory tree: {root_path}")
            count_before = self._stats['entries_collected']
            yield from self._walk_directory(str(root_path))
            logger.info(
                f"Finished {root_path}: {self._stats['entries_collected'] - count_before} entries"
            )

    def _walk_directory(self, root_path: str) -> Iterator[str]:
        """
        Walk a single directory tree.

        Args:
            root_path: Root directory to walk

        Yields:
            Absolute paths of kept files and directories
        """
        for current_dir, subdirs, files in os.walk(root_path, onerror=self._on_walk_error):
            self._stats['directories_traversed'] += 1

            kept_subdirs = []
            for dirname in sorted(subdirs):
                dir_path = os.path.join(current_dir, dirname)
                if self.config.should_ignore(dir_path):
                    self._stats['entries_ignored'] += 1
                    continue

                yield dir_path
                self._stats['entries_collected'] += 1

                # Listed but not descended into
                if not self.config.prunes_children(dir_path):
                    kept_subdirs.append(dirname)

                if self._limit_reached():
                    return
            subdirs[:] = kept_subdirs

            for filename in sorted(files):
                file_path = os.path.join(current_dir, filename)
                if self.config.should_ignore(file_path):
                    self._stats['entries_ignored'] += 1
                    continue

                yield file_path
                self._stats['entries_collected'] += 1

                if self._limit_reached():
                    return

    def _on_walk_error(self, error: OSError) -> None:
        """Log a directory that could not be listed and keep walking."""
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")
        self._stats['errors'] += 1

    def _limit_reached(self) -> bool:
        if self._stats['entries_collected'] >= self.config.max_index_entries:
            logger.warning(f"Reached maximum index size: {self.config.max_index_entries}")
            return True
        return False

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the filesystem walking operation.

        Returns:
            Dictionary containing operation statistics
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = self._empty_stats()
