"""
Removable volume tracking for QuickFind.

The index builder polls the volume mount root each cycle and rescans when the
set of mounted volumes changes. The query engine uses the same set to drop
indexed paths that live on volumes which are no longer attached.
"""

import os
import logging
from typing import FrozenSet, Optional, Tuple


logger = logging.getLogger(__name__)


class VolumeWatcher:
    """Polls a mount root for attach/detach changes."""

    def __init__(self, volumes_root: str):
        """
        Initialize the watcher.

        Args:
            volumes_root: Directory whose entries are the mounted volumes
        """
        self.volumes_root = volumes_root.rstrip('/') or '/'
        self._last: FrozenSet[str] = frozenset()

    def current_volumes(self) -> FrozenSet[str]:
        """
        List the currently mounted volumes.

        Returns:
            Absolute paths of the entries directly under the mount root; empty
            if the root is missing or unreadable
        """
        try:
            names = os.listdir(self.volumes_root)
        except FileNotFoundError:
            return frozenset()
        except OSError as e:
            logger.warning(f"Cannot list volumes under {self.volumes_root}: {e}")
            return frozenset()
        return frozenset(os.path.join(self.volumes_root, name) for name in names)

    def poll(self) -> Tuple[bool, FrozenSet[str]]:
        """
        Compare the mounted volumes with the previous poll.

        Returns:
            Tuple of (changed, current volume set)
        """
        current = self.current_volumes()
        changed = current != self._last
        if changed:
            added = sorted(current - self._last)
            removed = sorted(self._last - current)
            logger.info(f"Volume set changed (added: {added}, removed: {removed})")
        self._last = current
        return changed, current

    @property
    def last_volumes(self) -> FrozenSet[str]:
        """Volume set seen by the most recent poll."""
        return self._last

    def volume_for(self, path: str) -> Optional[str]:
        """
        Get the volume a path lives on.

        Args:
            path: Absolute path

        Returns:
            The volume root path, or None if the path is not under the mount root
        """
        prefix = self.volumes_root + '/'
        if not path.startswith(prefix):
            return None
        name = path[len(prefix):].split('/', 1)[0]
        if not name:
            return None
        return prefix + name

    def is_available(self, path: str, volumes: FrozenSet[str]) -> bool:
        """
        Check whether a path is reachable given a mounted volume set.

        Paths outside the mount root are always available.

        Args:
            path: Absolute path
            volumes: Currently mounted volumes

        Returns:
            False only if the path sits on a volume missing from the set
        """
        volume = self.volume_for(path)
        return volume is None or volume in volumes
