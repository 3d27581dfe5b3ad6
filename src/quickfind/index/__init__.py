"""
Index maintenance for QuickFind.

This module contains the background index builder, the removable volume
watcher it polls, and the alias table used to expand shorthand queries.
"""

from .alias_table import AliasTable
from .builder import IndexBuilder
from .volume_watcher import VolumeWatcher

__all__ = ['AliasTable', 'IndexBuilder', 'VolumeWatcher']
