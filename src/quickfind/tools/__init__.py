"""
Filesystem and operating system integration for QuickFind.

This module contains the pruned filesystem walker, the native metadata index
adapter, and the shell shims used to open and copy results.
"""
