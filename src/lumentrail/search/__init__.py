"""LumenTrail query side — lexical search and provenance."""

from lumentrail.search.engine import SearchResult, count_occurrences, search
from lumentrail.search.explain import explain

__all__ = ["SearchResult", "count_occurrences", "explain", "search"]
