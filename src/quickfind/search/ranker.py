"""
Result ranking for QuickFind.

Scores are additive integers computed independently per result from name
match quality, alias and acronym matches, click history, and path heuristics.
The constants are empirically tuned and overlap on purpose; the formula is
applied exactly as written rather than as a strict priority order.
"""

from typing import List, Mapping, Optional

from ..models.search_query import SearchQuery
from ..models.search_results import SearchResult
from ..models.type_filter import TypeFilter
from .matching import in_order, is_acronym_match, is_alias_match


STRONG_NAME_BONUS = 20000
ORDERED_NAME_BONUS = 10000
NAME_PREFIX_BONUS = 5000
UNORDERED_NAME_BONUS = 5000
PATH_MATCH_BONUS = 2000
APP_FILTER_BONUS = 10000
CLICK_BONUS = 5000
NESTED_BUNDLE_PENALTY = 10000
DEPTH_PENALTY = 50
APPLICATIONS_BONUS = 5000
DESKTOP_BONUS = 1000

BUNDLE_CONTENTS = ".app/Contents/"
DESKTOP_SEGMENT = "/Desktop"


class Ranker:
    """Scores and orders merged search results."""

    def __init__(self, applications_dir: str = "/Applications", max_results: int = 100):
        """
        Initialize the ranker.

        Args:
            applications_dir: System application directory (location bonus, no depth penalty)
            max_results: Number of results kept by ``rank``
        """
        self.applications_dir = applications_dir
        self.max_results = max_results

    def score_one(self, result: SearchResult, query: SearchQuery, alias_hint: Optional[str],
                  history: Mapping[str, int]) -> int:
        """
        Compute the score of a single result.

        Args:
            result: Result to score
            query: The search query
            alias_hint: Canonical name resolved from the keyword, if any
            history: Click counts by exact path

        Returns:
            Integer score (higher ranks first)
        """
        keyword = query.normalized
        words = query.words
        name_lc = result.name.lower()
        path_lc = result.path.lower()
        path = result.path

        all_in_name = all(word in name_lc for word in words)
        all_in_path = all(word in path_lc for word in words)

        alias_match = is_alias_match(alias_hint, name_lc)
        if alias_match:
            all_in_name = True

        acronym_match = False
        if not all_in_name and is_acronym_match(keyword, name_lc):
            all_in_name = True
            acronym_match = True

        score = 0
        if all_in_name:
            if alias_match or acronym_match or name_lc == keyword:
                score += STRONG_NAME_BONUS
            elif in_order(words, name_lc):
                score += ORDERED_NAME_BONUS
                if words and name_lc.startswith(words[0]):
                    score += NAME_PREFIX_BONUS
            else:
                score += UNORDERED_NAME_BONUS
        elif all_in_path:
            score += PATH_MATCH_BONUS

        if query.type_filter is TypeFilter.APP and (path.endswith('.app') or path.endswith('.app/')):
            score += APP_FILTER_BONUS

        score += CLICK_BONUS * history.get(path, 0)

        if BUNDLE_CONTENTS in path:
            score -= NESTED_BUNDLE_PENALTY

        if path.startswith(self.applications_dir):
            score += APPLICATIONS_BONUS
        else:
            score -= DEPTH_PENALTY * len(path.split('/'))
            if DESKTOP_SEGMENT in path:
                score += DESKTOP_BONUS

        return score

    def score(self, results: List[SearchResult], query: SearchQuery, alias_hint: Optional[str],
              history: Mapping[str, int]) -> List[SearchResult]:
        """
        Score all results and sort them.

        Args:
            results: Deduplicated results; their ``score`` fields are overwritten
            query: The search query
            alias_hint: Canonical name resolved from the keyword, if any
            history: Click counts by exact path

        Returns:
            Results in descending score order; ties keep their input order
        """
        for result in results:
            result.score = self.score_one(result, query, alias_hint, history)
        return sorted(results, key=lambda r: r.score, reverse=True)

    def rank(self, results: List[SearchResult], query: SearchQuery, alias_hint: Optional[str],
             history: Mapping[str, int]) -> List[SearchResult]:
        """Score, sort, and keep the top ``max_results``."""
        ranked = self.score(results, query, alias_hint, history)
        return ranked[:self.max_results]
