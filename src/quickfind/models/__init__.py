"""
Data models for QuickFind.

This module contains the core data structures used throughout the engine.
"""

from .config import EngineConfig
from .search_query import SearchQuery
from .search_results import IndexEntry, IndexSnapshot, SearchResult
from .type_filter import TypeFilter

__all__ = [
    'EngineConfig',
    'IndexEntry',
    'IndexSnapshot',
    'SearchQuery',
    'SearchResult',
    'TypeFilter'
]
