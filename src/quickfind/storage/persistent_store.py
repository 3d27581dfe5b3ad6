"""
Local persistence for QuickFind.

Stores the index cache (newline-delimited paths) and the click-history table
(JSON) under a per-application cache directory. Every write replaces the whole
file so readers never see a partial update. Files are UTF-8 with surrogate
escapes, so filenames that are not valid UTF-8 round-trip unchanged.
"""

import os
import json
import tempfile
import logging
from pathlib import Path
from typing import Any, Iterable, List, Union


logger = logging.getLogger(__name__)


INDEX_CACHE_NAME = "index.cache"
CLICK_HISTORY_NAME = "click_history.json"


class PersistenceError(Exception):
    """Raised when cached state cannot be read or written."""
    pass


class PersistentStore:
    """
    Key-value and line-list persistence on local disk.

    Each key is a file name inside the cache directory. Missing files read
    back as empty; I/O and decode failures raise PersistenceError.
    """

    def __init__(self, cache_dir: Union[str, Path]):
        """
        Initialize the store.

        Args:
            cache_dir: Directory holding the persisted files (created on first write)
        """
        self.cache_dir = Path(cache_dir).expanduser()

    def path_for(self, name: str) -> Path:
        """Get the on-disk path for a key."""
        return self.cache_dir / name

    def exists(self, name: str) -> bool:
        """Check whether a key has been persisted."""
        return self.path_for(name).is_file()

    def read_lines(self, name: str) -> List[str]:
        """
        Read a newline-delimited list.

        Args:
            name: Key to read

        Returns:
            Non-empty lines in file order, or an empty list if the key is missing

        Raises:
            PersistenceError: If the file exists but cannot be read
        """
        path = self.path_for(name)
        if not path.exists():
            return []
        try:
            with open(path, 'r', encoding='utf-8', errors='surrogateescape') as f:
                return [line.rstrip('\n') for line in f if line.strip()]
        except OSError as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def write_lines(self, name: str, lines: Iterable[str]) -> None:
        """
        Replace a newline-delimited list.

        Args:
            name: Key to write
            lines: Lines to store, one per line

        Raises:
            PersistenceError: If the file cannot be written
        """
        content = ''.join(f"{line}\n" for line in lines)
        self._replace(name, content)

    def read_json(self, name: str, default: Any = None) -> Any:
        """
        Read a JSON document.

        Args:
            name: Key to read
            default: Value returned when the key is missing

        Returns:
            Decoded JSON value

        Raises:
            PersistenceError: If the file cannot be read or decoded
        """
        path = self.path_for(name)
        if not path.exists():
            return default
        try:
            with open(path, 'r', encoding='utf-8', errors='surrogateescape') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt JSON in {path}: {e}") from e
        except OSError as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def write_json(self, name: str, data: Any) -> None:
        """
        Replace a JSON document.

        Args:
            name: Key to write
            data: JSON-serializable value

        Raises:
            PersistenceError: If the value cannot be encoded or written
        """
        try:
            content = json.dumps(data, ensure_ascii=False, sort_keys=True)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot encode {name}: {e}") from e
        self._replace(name, content)

    def _replace(self, name: str, content: str) -> None:
        """Write content to a temp file beside the target, then swap it in."""
        path = self.path_for(name)
        tmp_name = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", dir=str(self.cache_dir))
            with os.fdopen(fd, 'w', encoding='utf-8', errors='surrogateescape') as f:
                f.write(content)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, UnicodeError) as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug(f"Could not remove temporary file {tmp_name}")

    def __str__(self) -> str:
        return f"PersistentStore({self.cache_dir})"
