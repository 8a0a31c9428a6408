"""Search pipeline: ranking, strategies and the orchestrator."""

from .scoring import RankingEngine
from .strategies import (
    EnhancedLexicalStrategy,
    PlainLexicalStrategy,
    SearchContext,
    SemanticStrategy,
    StrategyOutcome,
)
from .orchestrator import SearchOrchestrator
from .indexing import IndexResult, ListingIndexer

__all__ = [
    "RankingEngine",
    "EnhancedLexicalStrategy",
    "PlainLexicalStrategy",
    "SearchContext",
    "SemanticStrategy",
    "StrategyOutcome",
    "SearchOrchestrator",
    "IndexResult",
    "ListingIndexer",
]
