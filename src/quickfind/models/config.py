"""
Configuration data models for QuickFind.

This module defines the data structures for managing engine configuration,
including filesystem locations, index pruning patterns, alias refresh settings,
native index query settings, and search limits.
"""

from typing import Dict, List, Optional, Any
from pathlib import Path
import re
import fnmatch
from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator


DEFAULT_IGNORE_PATTERNS = [
    "**/node_modules/**",
    "**/.git/**",
    "**/Library/**",
    "**/Contents/MacOS/**",
    "**/.*",
]


class PathsConfig(BaseModel):
    """
    Filesystem locations used by the engine.

    Attributes:
        home_dir: The user's home directory (native query scope)
        applications_dir: The system application directory
        volumes_root: Mount root for removable volumes
        cache_dir: Per-application directory for the index cache and click history
        scan_dirs: User directories rescanned by the index builder
    """

    home_dir: str = Field("~", description="User home directory")
    applications_dir: str = Field("/Applications", description="System application directory")
    volumes_root: str = Field("/Volumes", description="Mount root for removable volumes")
    cache_dir: str = Field("~/Library/Caches/quickfind", description="Cache directory for persisted state")
    scan_dirs: List[str] = Field(
        default_factory=lambda: ["~/Desktop", "~/Downloads", "~/Documents"],
        description="User directories included in every rescan"
    )

    @field_validator('home_dir', 'applications_dir', 'volumes_root', 'cache_dir')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Expand user paths and strip trailing separators."""
        if not v or not v.strip():
            raise ValueError("Path cannot be empty")
        expanded = str(Path(v.strip()).expanduser())
        if len(expanded) > 1:
            expanded = expanded.rstrip('/')
        return expanded

    @field_validator('scan_dirs')
    @classmethod
    def validate_scan_dirs(cls, v: List[str]) -> List[str]:
        """Expand user paths, dropping blank entries."""
        return [str(Path(d.strip()).expanduser()) for d in v if d and d.strip()]

    def get_cache_path(self) -> Path:
        """Get the cache directory as a Path."""
        return Path(self.cache_dir)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class IndexingConfig(BaseModel):
    """
    Configuration for the background index builder.

    Attributes:
        poll_interval: Seconds between index builder cycles
        rescan_interval: Seconds after which a full rescan is due
        max_index_entries: Upper bound on entries collected by one rescan
        ignore: Gitignore-style pruning patterns applied during the walk
    """

    poll_interval: float = Field(30.0, gt=0, description="Seconds between builder cycles")
    rescan_interval: float = Field(600.0, gt=0, description="Seconds between periodic full rescans")
    max_index_entries: int = Field(2000000, gt=0, description="Maximum entries collected by one rescan")
    ignore: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS),
        description="Pruning patterns (gitignore-style)"
    )
    _compiled_ignore_patterns: List[re.Pattern] = PrivateAttr(default_factory=list)

    def model_post_init(self, __context) -> None:
        """Normalize and compile the pruning patterns."""
        self._normalize_ignore_patterns()
        self._compile_ignore_patterns()

    def _normalize_ignore_patterns(self) -> None:
        """Anchor relative patterns anywhere in the tree."""
        normalized = []
        for pattern in self.ignore:
            pattern = pattern.strip() if pattern else ''
            if not pattern or pattern.startswith('#'):
                continue
            if pattern.startswith('**/') or pattern.startswith('/'):
                normalized.append(pattern)
            else:
                normalized.append('**/' + pattern)
        self.ignore = normalized

    def _compile_ignore_patterns(self) -> None:
        """Compile pruning patterns into regexes."""
        self._compiled_ignore_patterns = []
        for pattern in self.ignore:
            try:
                self._compiled_ignore_patterns.append(re.compile(self._glob_to_regex(pattern)))
            except re.error as e:
                raise ValueError(f"Invalid ignore pattern '{pattern}': {e}")

    @staticmethod
    def _glob_to_regex(pattern: str) -> str:
        """
        Convert a gitignore-style pattern to a regex over slash-stripped paths.

        ``**/`` matches zero or more leading directories, a trailing ``/**``
        matches everything below a directory (but not the directory itself),
        and the remaining segments use fnmatch semantics.

        Args:
            pattern: Normalized pattern starting with ``**/`` or ``/``

        Returns:
            Regex pattern string
        """
        is_rooted = pattern.startswith('/')
        body = pattern.lstrip('/')
        if body.startswith('**/'):
            body = body[3:]

        parts = body.split('/**/')
        regex_parts = []
        for i, part in enumerate(parts):
            if i > 0:
                regex_parts.append(r'/(?:[^/]+/)*')
            trailing_all = part.endswith('/**')
            if trailing_all:
                part = part[:-3]
            translated = fnmatch.translate(part)
            # fnmatch anchors the end; strip it so parts can be joined
            for anchor in (r"\Z", r"\z"):
                if translated.endswith(anchor):
                    translated = translated[:-len(anchor)]
            regex_parts.append(translated)
            if trailing_all:
                regex_parts.append(r'/.+')

        joined = ''.join(regex_parts)
        if is_rooted:
            return f'^{joined}$'
        return f'(^|/)(?:[^/]+/)*{joined}$'

    def should_ignore(self, path: str) -> bool:
        """
        Check whether a path is pruned by any ignore pattern.

        Args:
            path: Absolute or relative path to check

        Returns:
            True if the path should not be indexed
        """
        normalized = Path(path).as_posix().lstrip('/')
        return any(regex.search(normalized) for regex in self._compiled_ignore_patterns)

    def prunes_children(self, directory: str) -> bool:
        """Check whether everything below a directory is pruned."""
        return self.should_ignore(directory.rstrip('/') + '/_')

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class AliasConfig(BaseModel):
    """
    Configuration for the alias table.

    Attributes:
        refresh_interval: Seconds between rebuilds of the alias table
        extra: User-defined aliases, registered before the built-in table
    """

    refresh_interval: float = Field(3600.0, gt=0, description="Seconds between alias table rebuilds")
    extra: Dict[str, str] = Field(default_factory=dict, description="User-defined aliases")

    @field_validator('extra')
    @classmethod
    def validate_extra(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Lowercase tokens and targets, rejecting blanks."""
        normalized = {}
        for token, target in v.items():
            if not str(token).strip() or not str(target).strip():
                raise ValueError(f"Alias entries cannot be blank: {token!r} -> {target!r}")
            normalized[str(token).strip().lower()] = str(target).strip().lower()
        return normalized

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class NativeIndexConfig(BaseModel):
    """
    Configuration for queries against the OS metadata index.

    Attributes:
        enabled: Whether native queries are issued at all
        command: Name or path of the metadata query tool
        home_timeout: Timeout for the home + applications scope (seconds)
        volumes_timeout: Timeout for the removable volume scope (seconds)
    """

    enabled: bool = Field(True, description="Whether native index queries are issued")
    command: str = Field("mdfind", min_length=1, description="Metadata query command")
    home_timeout: float = Field(3.0, gt=0, description="Timeout for the home scope")
    volumes_timeout: float = Field(4.0, gt=0, description="Timeout for the volume scope")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class LimitsConfig(BaseModel):
    """
    Configuration for search limits.

    Attributes:
        max_results: Maximum number of ranked results returned per search
        max_strong_matches: In-memory scan stops after this many strong matches
        fallback_threshold: Fallback candidates are used below this many strong matches
        max_fallback: Maximum number of fallback candidates appended
        branch_timeout: Upper bound on waiting for either search branch (seconds)
    """

    max_results: int = Field(100, gt=0, description="Maximum ranked results")
    max_strong_matches: int = Field(1000, gt=0, description="Strong match cap for the memory scan")
    fallback_threshold: int = Field(20, ge=0, description="Strong match count below which fallback is used")
    max_fallback: int = Field(50, ge=0, description="Maximum fallback candidates appended")
    branch_timeout: float = Field(10.0, gt=0, description="Wait bound for a search branch")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class EngineConfig(BaseModel):
    """
    Main configuration class for QuickFind.

    Attributes:
        paths: Filesystem locations
        indexing: Background index builder settings
        aliases: Alias table settings
        native: Native index query settings
        limits: Search limits
    """

    paths: PathsConfig = Field(default_factory=PathsConfig, description="Filesystem locations")
    indexing: IndexingConfig = Field(default_factory=IndexingConfig, description="Index builder settings")
    aliases: AliasConfig = Field(default_factory=AliasConfig, description="Alias table settings")
    native: NativeIndexConfig = Field(default_factory=NativeIndexConfig, description="Native index settings")
    limits: LimitsConfig = Field(default_factory=LimitsConfig, description="Search limits")

    @model_validator(mode='after')
    def validate_timeouts(self):
        """Native sub-query timeouts must fit inside the branch wait bound."""
        longest = max(self.native.home_timeout, self.native.volumes_timeout)
        if longest >= self.limits.branch_timeout:
            raise ValueError(
                f"limits.branch_timeout ({self.limits.branch_timeout}) must exceed "
                f"the native query timeouts ({longest})"
            )
        return self

    def get_scan_roots(self) -> List[str]:
        """
        Get the directories walked by a rescan.

        Returns:
            Configured user directories, the applications directory, and the
            volumes root, in that order
        """
        roots = list(self.paths.scan_dirs)
        roots.append(self.paths.applications_dir)
        roots.append(self.paths.volumes_root)
        return roots

    def validate_configuration(self) -> List[str]:
        """
        Check the configuration for non-fatal problems.

        Returns:
            List of warning messages
        """
        warnings = []
        if not Path(self.paths.home_dir).is_dir():
            warnings.append(f"Home directory does not exist: {self.paths.home_dir}")
        if not Path(self.paths.applications_dir).is_dir():
            warnings.append(f"Applications directory does not exist: {self.paths.applications_dir}")
        missing = [d for d in self.paths.scan_dirs if not Path(d).is_dir()]
        if missing:
            warnings.append(f"Scan directories not found: {', '.join(missing)}")
        if self.indexing.rescan_interval < self.indexing.poll_interval:
            warnings.append("rescan_interval is shorter than poll_interval; every cycle will rescan")
        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'paths': self.paths.to_dict(),
            'indexing': self.indexing.to_dict(),
            'aliases': self.aliases.to_dict(),
            'native': self.native.to_dict(),
            'limits': self.limits.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'EngineConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data or {})

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Scan dirs: {len(self.paths.scan_dirs)}"]
        parts.append(f"Applications: {self.paths.applications_dir}")
        parts.append(f"Cache: {self.paths.cache_dir}")
        parts.append(f"Native index: {'on' if self.native.enabled else 'off'}")

        return " | ".join(parts)
