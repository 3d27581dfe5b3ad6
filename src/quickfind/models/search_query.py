"""
Search query data model for QuickFind.

This module defines the structure used to carry a user's keyword and type
filter through the query engine and ranker.
"""

from typing import Dict, List, Any
from pydantic import BaseModel, Field, field_validator

from .type_filter import TypeFilter


class SearchQuery(BaseModel):
    """
    Represents a single search request.

    An empty or whitespace-only keyword is valid: it produces no results
    and short-circuits the search.

    Attributes:
        keyword: Raw keyword as typed by the user
        type_filter: Result type restriction
    """

    keyword: str = Field("", description="Keyword as typed by the user")
    type_filter: TypeFilter = Field(TypeFilter.ALL, description="Result type restriction")

    @field_validator('keyword', mode='before')
    @classmethod
    def validate_keyword(cls, v) -> str:
        """Treat a missing keyword as empty."""
        if v is None:
            return ""
        return str(v)

    @field_validator('type_filter', mode='before')
    @classmethod
    def validate_type_filter(cls, v) -> TypeFilter:
        """Convert filter names to TypeFilter, degrading unknown names to ALL."""
        return TypeFilter.parse(v)

    @property
    def normalized(self) -> str:
        """Lowercased, trimmed keyword used for matching and alias lookup."""
        return self.keyword.strip().lower()

    @property
    def words(self) -> List[str]:
        """Whitespace-separated lowercase words of the keyword."""
        return self.normalized.split()

    def is_empty(self) -> bool:
        """Check whether the keyword has no searchable content."""
        return not self.normalized

    def to_dict(self) -> Dict[str, Any]:
        """Convert the search query to a dictionary representation."""
        return {'keyword': self.keyword, 'type_filter': self.type_filter.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchQuery':
        """Create a SearchQuery instance from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the search query."""
        return f"Query: '{self.keyword}' | Type: {self.type_filter.value}"
