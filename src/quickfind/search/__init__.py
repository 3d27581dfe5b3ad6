"""
Search and ranking for QuickFind.

This module contains the dual-source query engine and the ranker that orders
its merged results.
"""

from .query_engine import QueryEngine, merge_results
from .ranker import Ranker

__all__ = ['QueryEngine', 'Ranker', 'merge_results']
