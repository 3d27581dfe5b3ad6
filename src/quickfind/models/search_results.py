"""
Index and search result data models for QuickFind.

This module defines the index entry and snapshot types shared between the
index builder and the query engine, and the ranked search result record.
"""

from typing import Dict, Iterator, Tuple
from dataclasses import dataclass, field
import time
from pydantic import BaseModel, Field, field_validator


def display_name(path: str) -> str:
    """Get the final segment of a path, or the path itself if it has none."""
    name = path.rstrip('/').rsplit('/', 1)[-1]
    return name or path


@dataclass(frozen=True)
class IndexEntry:
    """
    A single indexed filesystem entry.

    Attributes:
        path: Absolute path of the file or directory
        name: Display name (final path segment)
    """
    path: str
    name: str

    @classmethod
    def from_path(cls, path: str) -> 'IndexEntry':
        """Create an entry, deriving the display name from the path."""
        return cls(path=path, name=display_name(path))


@dataclass(frozen=True)
class IndexSnapshot:
    """
    Point-in-time view of the in-memory index.

    Snapshots are immutable and replaced wholesale by the index builder, so
    a reader holding one never observes a partially built index.

    Attributes:
        paths: Indexed absolute paths in walk order
        built_at: Wall-clock time the snapshot was published
    """
    paths: Tuple[str, ...] = ()
    built_at: float = field(default_factory=time.time)

    def __len__(self) -> int:
        return len(self.paths)

    def entries(self) -> Iterator[IndexEntry]:
        """Iterate the snapshot as IndexEntry values."""
        for path in self.paths:
            yield IndexEntry.from_path(path)


class SearchResult(BaseModel):
    """
    A single ranked search result.

    Attributes:
        path: Absolute path of the matched entry
        name: Display name (final path segment)
        score: Query-scoped ranking score, never shown to callers
    """

    path: str = Field(..., min_length=1, description="Absolute path of the matched entry")
    name: str = Field("", description="Display name")
    score: int = Field(0, description="Query-scoped ranking score")

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject blank paths."""
        if not v.strip():
            raise ValueError("Result path cannot be empty")
        return v

    @classmethod
    def from_path(cls, path: str) -> 'SearchResult':
        """Create an unscored result, deriving the display name from the path."""
        return cls(path=path, name=display_name(path))

    def to_dict(self) -> Dict[str, str]:
        """Convert to the public representation, omitting the score."""
        return {'path': self.path, 'name': self.name}

    def __str__(self) -> str:
        """String representation of the search result."""
        return f"{self.name} -> {self.path} (score: {self.score})"
