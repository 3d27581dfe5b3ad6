"""
Result type filters for QuickFind.

Each filter knows its native metadata-index predicate and the extension
allow-list used when scanning the in-memory index.
"""

from typing import Dict, Tuple
from enum import Enum
import logging


logger = logging.getLogger(__name__)


class TypeFilter(Enum):
    """Enumeration of result type filters."""
    ALL = "all"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    PDF = "pdf"
    DOC = "doc"
    FOLDER = "folder"
    APP = "app"

    @classmethod
    def parse(cls, value) -> 'TypeFilter':
        """
        Convert a filter name to a TypeFilter.

        Unknown names degrade to ALL so a bad filter never fails a search.

        Args:
            value: Filter name, TypeFilter, or None

        Returns:
            Matching TypeFilter
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ALL
        name = str(value).strip().lower()
        if not name:
            return cls.ALL
        try:
            return cls(name)
        except ValueError:
            logger.warning(f"Unknown type filter '{value}', searching all types")
            return cls.ALL

    @property
    def native_predicate(self) -> str:
        """Native index predicate restricting results to this type."""
        return _NATIVE_PREDICATES[self]

    @property
    def extensions(self) -> Tuple[str, ...]:
        """Lowercase extension allow-list for this type."""
        return _EXTENSIONS[self]

    def matches_extension(self, path: str) -> bool:
        """
        Check a path against the extension allow-list.

        Application bundles are matched by containment: anything with
        ``.app`` in its path that is not inside a bundle's contents.

        Args:
            path: Path to check

        Returns:
            True if the path has an allowed extension (or no list applies)
        """
        if not self.extensions:
            return True
        path_lc = path.lower()
        if '.app' in self.extensions and '.app' in path_lc and '.app/contents/' not in path_lc:
            return True
        return any(path_lc.endswith(ext) for ext in self.extensions)

    def accepts(self, path: str) -> bool:
        """
        Check whether an indexed path satisfies this filter.

        Folders are recognised heuristically since the index keeps no
        file-type metadata: a path with no dot, or an application bundle.

        Args:
            path: Indexed path

        Returns:
            True if the path belongs to this type
        """
        if self is TypeFilter.ALL:
            return True
        if self is TypeFilter.FOLDER:
            return '.' not in path or path.endswith('.app')
        return self.matches_extension(path)


_NATIVE_PREDICATES: Dict[TypeFilter, str] = {
    TypeFilter.ALL: "",
    TypeFilter.IMAGE: "kMDItemContentTypeTree == 'public.image'",
    TypeFilter.VIDEO: "kMDItemContentTypeTree == 'public.movie'",
    TypeFilter.AUDIO: "kMDItemContentTypeTree == 'public.audio'",
    TypeFilter.PDF: "kMDItemContentTypeTree == 'com.adobe.pdf'",
    TypeFilter.DOC: (
        "(kMDItemContentTypeTree == 'public.text' || "
        "kMDItemContentTypeTree == 'public.content' || "
        "kMDItemContentTypeTree == 'com.microsoft.word.doc' || "
        "kMDItemContentTypeTree == 'com.adobe.pdf')"
    ),
    TypeFilter.FOLDER: "kMDItemContentTypeTree == 'public.folder'",
    TypeFilter.APP: (
        "(kMDItemContentTypeTree == 'com.apple.application-bundle' || "
        "kMDItemContentTypeTree == 'com.apple.systempreference.pane')"
    ),
}

_EXTENSIONS: Dict[TypeFilter, Tuple[str, ...]] = {
    TypeFilter.ALL: (),
    TypeFilter.IMAGE: ('.jpg', '.png', '.jpeg', '.gif', '.webp', '.bmp', '.heic'),
    TypeFilter.VIDEO: ('.mp4', '.mov', '.avi', '.mkv', '.flv', '.wmv'),
    TypeFilter.AUDIO: ('.mp3', '.wav', '.flac', '.aac', '.m4a'),
    TypeFilter.PDF: ('.pdf',),
    TypeFilter.DOC: ('.pdf', '.txt', '.md', '.doc', '.docx', '.xls', '.xlsx', '.ppt', '.pptx'),
    TypeFilter.FOLDER: (),
    TypeFilter.APP: ('.app', '.prefpane'),
}
