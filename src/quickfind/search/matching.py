"""
Text matching helpers shared by the query engine and the ranker.
"""

import re
from typing import Optional, Sequence


_NON_ALNUM = re.compile(r'[\W_]+')

MIN_ACRONYM_LENGTH = 2


def initials(name: str) -> str:
    """
    Build the acronym of a name: the first character of every alphanumeric segment.

    >>> initials("digital photo professional.app")
    'dppa'
    """
    return ''.join(segment[0] for segment in _NON_ALNUM.split(name) if segment)


def is_acronym_match(keyword: str, name: str) -> bool:
    """
    Check whether a keyword appears in the acronym of a name.

    Args:
        keyword: Lowercase keyword
        name: Lowercase display name

    Returns:
        True if the keyword is at least two characters and contained in the initials
    """
    return len(keyword) >= MIN_ACRONYM_LENGTH and keyword in initials(name)


def is_alias_match(alias_hint: Optional[str], name: str) -> bool:
    """Check whether the resolved canonical name occurs in a lowercase display name."""
    return bool(alias_hint) and alias_hint in name


def in_order(words: Sequence[str], text: str) -> bool:
    """
    Check whether words occur left to right without overlapping.

    >>> in_order(["visual", "code"], "visual studio code")
    True
    >>> in_order(["code", "visual"], "visual studio code")
    False
    """
    position = 0
    for word in words:
        found = text.find(word, position)
        if found < 0:
            return False
        position = found + len(word)
    return True
