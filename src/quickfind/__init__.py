"""
QuickFind - Core Package

A local desktop file-search backend that keeps a self-refreshing index of
filesystem entries, merges it with the operating system's metadata index,
and ranks results using a click-history feedback loop.
"""

__version__ = "0.1.0"
__author__ = "QuickFind Team"
