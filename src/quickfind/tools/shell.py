"""
Shell integration shims for QuickFind.

Open a result, reveal its folder, or put it on the clipboard. Every function
returns None on success or a human-readable error string for the caller to
show; nothing here raises for bad input.
"""

import os
import sys
import shutil
import subprocess
import logging
from typing import List, Optional


logger = logging.getLogger(__name__)


def _opener() -> List[str]:
    if sys.platform == 'darwin':
        return ['open']
    if sys.platform.startswith('win'):
        return ['explorer']
    return ['xdg-open']


def _spawn(command: List[str]) -> Optional[str]:
    try:
        subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        return f"Cannot run {command[0]}: {e}"
    return None


def open_file(path: str) -> Optional[str]:
    """
    Open a file or application with the system default handler.

    Args:
        path: Absolute path to open

    Returns:
        None on success, otherwise an error message
    """
    if not os.path.exists(path):
        return f"Cannot open file: {path} does not exist"
    error = _spawn(_opener() + [path])
    if error:
        return f"Cannot open file: {error}"
    return None


def containing_folder(path: str) -> str:
    """Get the folder to reveal for a path: itself if a directory, else its parent."""
    if os.path.isdir(path):
        return path
    return os.path.dirname(path.rstrip('/')) or '/'


def open_folder(path: str) -> Optional[str]:
    """
    Open the folder containing a path.

    Args:
        path: Absolute path of a file or directory

    Returns:
        None on success, otherwise an error message
    """
    folder = containing_folder(path)
    if not os.path.isdir(folder):
        return f"Cannot open folder: {folder} does not exist"
    error = _spawn(_opener() + [folder])
    if error:
        return f"Cannot open folder: {error}"
    return None


def _applescript_string(text: str) -> str:
    return text.replace('\\', '\\\\').replace('"', '\\"')


def copy_to_clipboard(path: str) -> Optional[str]:
    """
    Put a file on the clipboard, falling back to its path as text.

    Args:
        path: Absolute path to copy

    Returns:
        None on success, otherwise an error message
    """
    if shutil.which('osascript'):
        script = f'set the clipboard to (POSIX file "{_applescript_string(path)}")'
        try:
            completed = subprocess.run(['osascript', '-e', script], capture_output=True, timeout=5, check=False)
            if completed.returncode == 0:
                return None
            logger.debug(f"osascript clipboard copy failed: {completed.stderr!r}")
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"osascript clipboard copy failed: {e}")

    for command in (['pbcopy'], ['xclip', '-selection', 'clipboard'], ['wl-copy']):
        if not shutil.which(command[0]):
            continue
        try:
            subprocess.run(command, input=path.encode('utf-8'), timeout=5, check=True)
            return None
        except (OSError, subprocess.SubprocessError) as e:
            return f"Cannot copy to clipboard: {e}"

    return "Cannot copy to clipboard: no clipboard tool available"
