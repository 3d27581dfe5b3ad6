"""
Persistence for QuickFind.

This module contains the on-disk store for the index cache and the click
history table built on top of it.
"""

from .persistent_store import PersistentStore, PersistenceError
from .click_history import ClickHistory

__all__ = ['PersistentStore', 'PersistenceError', 'ClickHistory']
