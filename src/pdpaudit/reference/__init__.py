"""
Optional reference lookup: web search for a corroborating listing of the
audited product, used to improve suggested values.
"""

from .resolver import ReferenceResolver, build_query, merge_reference, title_similarity
from .search_client import SearchResult, SerpApiClient

__all__ = [
    "ReferenceResolver",
    "SearchResult",
    "SerpApiClient",
    "build_query",
    "merge_reference",
    "title_similarity",
]
