"""
Alias table for QuickFind.

Maps lowercase shorthand (abbreviations, pinyin initials, localized names) to
the canonical lowercase application names they stand for, so that a search for
"ps" finds Photoshop. The table combines a built-in list with names discovered
in the applications directory and is rebuilt periodically.
"""

import os
import re
import threading
import logging
from typing import Dict, Iterable, Optional, Tuple


logger = logging.getLogger(__name__)


# Earlier entries win when a token repeats.
BUILTIN_ALIASES: Tuple[Tuple[str, str], ...] = (
    # design
    ("ps", "photoshop"), ("lr", "lightroom"), ("pr", "premiere"), ("ae", "after effects"),
    ("ai", "illustrator"), ("id", "indesign"), ("au", "audition"), ("dw", "dreamweaver"),
    ("an", "animate"), ("pl", "prelude"), ("br", "bridge"), ("ch", "character animator"),
    ("me", "media encoder"), ("ic", "incopy"), ("fs", "fuse"), ("sc", "scout"), ("st", "stock"),
    ("xd", "xd"), ("dc", "acrobat"), ("dpp", "digital photo professional"),
    ("fcpx", "final cut pro"), ("c4d", "cinema 4d"), ("sketch", "sketch"), ("figma", "figma"),
    ("photoshop", "photoshop"), ("illustrator", "illustrator"), ("premiere", "premiere"),
    ("aftereffects", "after effects"), ("lightroom", "lightroom"),
    # social and office
    ("wx", "wechat"), ("微信", "wechat"), ("qq", "qq"), ("dd", "dingtalk"), ("钉钉", "dingtalk"),
    ("fs", "feishu"), ("飞书", "feishu"), ("lark", "feishu"), ("word", "microsoft word"),
    ("excel", "microsoft excel"), ("ppt", "microsoft powerpoint"), ("wps", "wpsoffice"),
    ("pdf", "acrobat"), ("obs", "obs studio"), ("yx", "neteasemail"), ("邮箱", "mail"),
    ("notes", "notes"), ("memo", "notes"), ("wechat", "wechat"), ("dingtalk", "dingtalk"),
    ("feishu", "feishu"),
    # video, entertainment, AI
    ("jy", "videofusion"), ("剪映", "videofusion"), ("capcut", "videofusion"), ("vf", "videofusion"),
    ("db", "doubao"), ("豆包", "doubao"), ("doubao", "doubao"), ("videofusion", "videofusion"),
    ("db", "douban"), ("dy", "douyin"), ("bili", "bilibili"), ("bz", "bilibili"),
    ("music", "music"), ("网易云", "neteasemusic"), ("spotify", "spotify"), ("douyin", "douyin"),
    ("tiktok", "douyin"), ("jianying", "videofusion"), ("jianyingpro", "videofusion"),
    # productivity
    ("wp", "wpsoffice"), ("wps", "wpsoffice"), ("word", "microsoft word"),
    ("excel", "microsoft excel"), ("ppt", "microsoft powerpoint"), ("pages", "pages"),
    ("numbers", "numbers"), ("keynote", "keynote"),
    # tools and development
    ("llq", "browser"), ("浏览器", "browser"), ("safari", "safari"), ("chrome", "google chrome"),
    ("edge", "microsoft edge"), ("fd", "finder"), ("访达", "finder"), ("zd", "terminal"),
    ("终端", "terminal"), ("iterm", "iterm"), ("code", "visual studio code"),
    ("vs", "visual studio code"), ("vscode", "visual studio code"), ("st", "sublime text"),
    ("idea", "intellij idea"), ("webstorm", "webstorm"), ("py", "pycharm"), ("git", "github"),
    ("postman", "postman"), ("docker", "docker"),
    # system
    ("sz", "settings"), ("设置", "settings"), ("jh", "calculator"), ("计算器", "calculator"),
    ("activity", "activity monitor"), ("monitor", "activity monitor"), ("disk", "disk utility"),
    ("keychain", "keychain access"), ("console", "console"),
)

APP_SUFFIX = ".app"

_NAME_SEPARATORS = re.compile(r'[ \-]')


def name_shorthand(base_name: str) -> str:
    """
    Build the initials shorthand of an application name.

    Args:
        base_name: Lowercase application name, e.g. "activity monitor"

    Returns:
        One character per space- or hyphen-separated segment, e.g. "am"
    """
    return ''.join(segment[0] for segment in _NAME_SEPARATORS.split(base_name) if segment)


class AliasTable:
    """
    Thread-safe token -> canonical name table.

    Lookups are exact on the lowercased token. The table is only ever
    replaced as a whole by ``refresh``.
    """

    def __init__(self, applications_dir: str, extra: Optional[Dict[str, str]] = None,
                 builtin: Iterable[Tuple[str, str]] = BUILTIN_ALIASES):
        """
        Initialize and build the table.

        Args:
            applications_dir: Directory scanned for installed application bundles
            extra: User aliases, registered ahead of the built-in table
            builtin: Built-in (token, canonical name) pairs
        """
        self.applications_dir = applications_dir
        self.extra = dict(extra or {})
        self.builtin = tuple(builtin)
        self._lock = threading.Lock()
        self._mapping: Dict[str, str] = {}
        self.refresh()

    def resolve(self, token: str) -> Optional[str]:
        """
        Look up the canonical name for a token.

        Args:
            token: Shorthand as typed; matched case-insensitively

        Returns:
            Canonical lowercase name, or None if the token is unknown
        """
        key = token.strip().lower()
        with self._lock:
            return self._mapping.get(key)

    def snapshot(self) -> Dict[str, str]:
        """Get a copy of the current table."""
        with self._lock:
            return dict(self._mapping)

    def refresh(self) -> int:
        """
        Rebuild the table from the static entries and the installed applications.

        Returns:
            Number of tokens in the new table
        """
        mapping: Dict[str, str] = {}
        for token, target in self.extra.items():
            mapping.setdefault(token.lower(), target.lower())
        for token, target in self.builtin:
            mapping.setdefault(token.lower(), target.lower())

        discovered = self._register_installed_apps(mapping)

        with self._lock:
            self._mapping = mapping
        logger.info(f"Alias table rebuilt: {len(mapping)} tokens ({discovered} from installed apps)")
        return len(mapping)

    def run_forever(self, stop_event: threading.Event, interval: float) -> None:
        """
        Rebuild the table every ``interval`` seconds until ``stop_event`` is set.

        A failed rebuild keeps the previous table and the loop continues.
        """
        while not stop_event.wait(interval):
            try:
                self.refresh()
            except Exception as e:
                logger.error(f"Alias table refresh failed: {e}")

    def _register_installed_apps(self, mapping: Dict[str, str]) -> int:
        """
        Add installed application names and their initials to a mapping.

        Args:
            mapping: Table under construction; existing tokens are kept

        Returns:
            Number of application bundles seen
        """
        try:
            names = sorted(os.listdir(self.applications_dir))
        except FileNotFoundError:
            logger.debug(f"Applications directory not found: {self.applications_dir}")
            return 0
        except OSError as e:
            logger.warning(f"Cannot list applications in {self.applications_dir}: {e}")
            return 0

        seen = 0
        for name in names:
            if not name.endswith(APP_SUFFIX):
                continue
            base_name = name[:-len(APP_SUFFIX)].lower()
            if not base_name:
                continue
            seen += 1
            mapping.setdefault(base_name, base_name)

            if _NAME_SEPARATORS.search(base_name):
                short = name_shorthand(base_name)
                if len(short) > 1:
                    mapping.setdefault(short, base_name)
        return seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._mapping)
