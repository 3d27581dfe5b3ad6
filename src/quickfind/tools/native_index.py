"""
Native metadata index adapter for QuickFind.

Builds predicate strings for the operating system's metadata search tool
(``mdfind`` on macOS), runs scoped queries with per-scope timeouts, and parses
the returned path list. The tool is an external collaborator: if it is missing,
slow, or failing, the adapter simply contributes no results.
"""

import shutil
import subprocess
import logging
from typing import List, Optional, Sequence
from concurrent.futures import ThreadPoolExecutor

from ..models.config import EngineConfig
from ..models.type_filter import TypeFilter


logger = logging.getLogger(__name__)


EXCLUDED_FRAGMENTS = ("/Contents/MacOS/", "/Library/")


def name_clause(text: str) -> str:
    """Case- and diacritic-insensitive substring match on the file name."""
    escaped = text.replace('\\', '\\\\').replace("'", "\\'")
    return f"kMDItemFSName == '*{escaped}*'cd"


def build_predicate(words: Sequence[str], alias_hint: Optional[str], type_filter: TypeFilter) -> str:
    """
    Build a native index predicate.

    Word clauses are AND-ed; an alias hint is OR-ed with the word group as an
    alternative; the type predicate is AND-ed with the whole expression.

    Args:
        words: Lowercase query words
        alias_hint: Canonical name resolved from the keyword, if any
        type_filter: Active result type filter

    Returns:
        Predicate string; the bare type predicate when there are no words and
        no alias (empty for the ALL filter)
    """
    parts = [name_clause(word) for word in words if word]
    type_predicate = type_filter.native_predicate

    if not parts and not alias_hint:
        return type_predicate

    if alias_hint:
        alias_part = name_clause(alias_hint)
        if parts:
            base_query = f"(({' && '.join(parts)}) || {alias_part})"
        else:
            base_query = alias_part
    elif len(parts) > 1:
        base_query = f"({' && '.join(parts)})"
    else:
        base_query = parts[0]

    if not type_predicate:
        return base_query
    return f"({base_query}) && ({type_predicate})"


def parse_output(output: str) -> List[str]:
    """
    Parse the tool's newline-separated output into result paths.

    Blank lines and paths inside bundle executables or library directories
    are dropped.
    """
    paths = []
    for line in output.splitlines():
        path = line.strip()
        if not path or any(fragment in path for fragment in EXCLUDED_FRAGMENTS):
            continue
        paths.append(path)
    return paths


class NativeIndexAdapter:
    """
    Runs filtered queries against the native metadata index.

    Two scopes are queried concurrently: the user's home plus the
    applications directory, and the removable volume root. Each has its own
    timeout and fails independently.
    """

    def __init__(self, config: EngineConfig):
        """
        Initialize the adapter.

        Args:
            config: Engine configuration providing paths, command, and timeouts
        """
        self.config = config
        self.native = config.native
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def is_available(self) -> bool:
        """Check whether native queries can be issued on this host."""
        return self.native.enabled and shutil.which(self.native.command) is not None

    def query(self, words: Sequence[str], alias_hint: Optional[str], type_filter: TypeFilter) -> List[str]:
        """
        Query the native index.

        Args:
            words: Lowercase query words
            alias_hint: Canonical name resolved from the keyword, if any
            type_filter: Active result type filter

        Returns:
            Result paths, home/applications scope first; empty if the tool is
            unavailable or both scopes failed
        """
        if not self.is_available():
            self.logger.debug(f"Native index command '{self.native.command}' unavailable, skipping")
            return []

        predicate = build_predicate(words, alias_hint, type_filter)
        self.logger.debug(f"Native index predicate: {predicate}")

        paths = self.config.paths
        scopes = [
            ([paths.home_dir, paths.applications_dir], self.native.home_timeout),
            ([paths.volumes_root], self.native.volumes_timeout),
        ]

        with ThreadPoolExecutor(max_workers=len(scopes), thread_name_prefix="quickfind-native") as pool:
            futures = [pool.submit(self._run_scoped, dirs, predicate, timeout) for dirs, timeout in scopes]
            results: List[str] = []
            for future in futures:
                results.extend(future.result())
        return results

    def _run_scoped(self, scope_dirs: Sequence[str], predicate: str, timeout: float) -> List[str]:
        """
        Run one scoped query.

        Args:
            scope_dirs: Directories the query is restricted to
            predicate: Native predicate string
            timeout: Seconds before the query is abandoned

        Returns:
            Parsed result paths, or an empty list on timeout or failure
        """
        command = [self.native.command]
        for directory in scope_dirs:
            command.extend(['-onlyin', directory])
        command.append(predicate)

        try:
            completed = subprocess.run(command, capture_output=True, timeout=timeout, check=False)
        except subprocess.TimeoutExpired:
            self.logger.warning(f"Native query timed out after {timeout}s in {', '.join(scope_dirs)}")
            return []
        except OSError as e:
            self.logger.warning(f"Native query failed in {', '.join(scope_dirs)}: {e}")
            return []

        if completed.returncode != 0:
            stderr = completed.stderr.decode('utf-8', errors='replace').strip() if completed.stderr else ''
            self.logger.warning(f"Native query exited {completed.returncode} in {', '.join(scope_dirs)}: {stderr}")
            return []

        stdout = completed.stdout.decode('utf-8', errors='replace') if completed.stdout else ''
        return parse_output(stdout)
