"""
rentsearch - natural-language search over rental listings.

    from rentsearch import search
    result = search("2 bedroom downtown with parking", {"limit": 5, "analyze_intent": True})
"""
import logging
from typing import Any, Optional, Union

from .errors import EmbeddingError, ListingStoreError
from .models import AnalyzedIntent, ListingRecord, ScoredMatch, SearchOptions, SearchResult
from .pipeline import ListingIndexer, SearchOrchestrator

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

_default_orchestrator: Optional[SearchOrchestrator] = None


def get_orchestrator() -> SearchOrchestrator:
    """Orchestrator over the configured Supabase project, built on first use."""
    global _default_orchestrator
    if _default_orchestrator is None:
        from .client.supabase_store import SupabaseListingStore

        _default_orchestrator = SearchOrchestrator(SupabaseListingStore())
    return _default_orchestrator


def search(
    query: str,
    options: Union[SearchOptions, dict[str, Any], None] = None,
    *,
    orchestrator: Optional[SearchOrchestrator] = None,
) -> SearchResult:
    """Search listings. Failures are reported in SearchResult.error, never raised."""
    if orchestrator is None:
        try:
            orchestrator = get_orchestrator()
        except ListingStoreError as e:
            logger.error(f"Search backend unavailable: {e}")
            return SearchResult(search_query=query, error=str(e))
    return orchestrator.search(query, options)


__all__ = [
    "search",
    "get_orchestrator",
    "SearchOrchestrator",
    "ListingIndexer",
    "SearchOptions",
    "SearchResult",
    "ScoredMatch",
    "ListingRecord",
    "AnalyzedIntent",
    "ListingStoreError",
    "EmbeddingError",
]
