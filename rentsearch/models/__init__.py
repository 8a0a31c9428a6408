"""
Pydantic models for rentsearch.
All data contracts are defined here for strict validation.
"""

from .listing import ListingRecord, ScoredMatch
from .intent import AnalyzedIntent, PriceRange
from .search import SearchOptions, SearchResult, DEFAULT_LIMIT, DEFAULT_MIN_SIMILARITY

__all__ = [
    # Listing
    "ListingRecord",
    "ScoredMatch",
    # Intent
    "AnalyzedIntent",
    "PriceRange",
    # Search
    "SearchOptions",
    "SearchResult",
    "DEFAULT_LIMIT",
    "DEFAULT_MIN_SIMILARITY",
]
