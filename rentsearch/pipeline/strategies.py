"""
Candidate generators - the three search strategies of the fallback cascade.
Each returns a StrategyOutcome instead of raising, so the orchestrator can
move on to the next strategy.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from ..ai.embedding_client import EmbeddingClient
from ..client.listing_store import DEFAULT_ORDER, FilterCondition, ListingStore
from ..errors import EmbeddingError, ListingStoreError
from ..models.intent import AnalyzedIntent
from ..models.listing import ScoredMatch
from ..models.search import SearchOptions, StrategyName
from .scoring import RankingEngine


logger = logging.getLogger(__name__)


ENHANCED_MIN_SCORE = 0.1
PLAIN_MIN_SCORE = 0.0


@dataclass
class SearchContext:
    """Per-call state shared by the strategies. Discarded when the call returns."""
    query: str
    options: SearchOptions
    api_key: Optional[str] = None
    intent: Optional[AnalyzedIntent] = None


@dataclass
class StrategyOutcome:
    """Either the final matches, or the reason to fall through to the next strategy."""
    matches: list[ScoredMatch] = field(default_factory=list)
    fallthrough_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.fallthrough_reason is None

    @classmethod
    def ok(cls, matches: list[ScoredMatch]) -> "StrategyOutcome":
        return cls(matches=matches)

    @classmethod
    def fallthrough(cls, reason: str) -> "StrategyOutcome":
        return cls(fallthrough_reason=reason)


def intent_conditions(intent: Optional[AnalyzedIntent]) -> list[FilterCondition]:
    """Datastore predicates implied by the analyzed intent."""
    if intent is None:
        return []

    conditions = []
    if intent.bedrooms is not None:
        conditions.append(FilterCondition.eq("bedrooms", intent.bedrooms))
    if intent.bathrooms is not None:
        conditions.append(FilterCondition.gte("bathrooms", intent.bathrooms))
    if intent.price_range is not None:
        if intent.price_range.min is not None:
            conditions.append(FilterCondition.gte("price", intent.price_range.min))
        if intent.price_range.max is not None:
            conditions.append(FilterCondition.lte("price", intent.price_range.max))
    return conditions


class SearchStrategy:
    """Base class for a candidate generator."""

    name: StrategyName
    uses_intent: bool = False

    def __init__(self, store: ListingStore, ranking: Optional[RankingEngine] = None):
        self.store = store
        self.ranking = ranking or RankingEngine()

    def run(self, context: SearchContext) -> StrategyOutcome:
        raise NotImplementedError


class SemanticStrategy(SearchStrategy):
    """Embedding + vector similarity RPC, re-ranked with intent boosts."""

    name = "semantic"
    uses_intent = True

    def __init__(
        self,
        store: ListingStore,
        embedder: EmbeddingClient,
        ranking: Optional[RankingEngine] = None,
        overfetch_factor: int = 2,
    ):
        super().__init__(store, ranking)
        self.embedder = embedder
        self.overfetch_factor = overfetch_factor

    def run(self, context: SearchContext) -> StrategyOutcome:
        if not context.api_key:
            return StrategyOutcome.fallthrough("no API key for embeddings")

        options = context.options
        try:
            embedding = self.embedder.embed(context.query, context.api_key)
        except EmbeddingError as e:
            return StrategyOutcome.fallthrough(f"embedding failed: {e}")

        try:
            raw = self.store.vector_similarity(
                embedding,
                threshold=options.min_similarity,
                count=options.limit * self.overfetch_factor,
                offset=options.offset,
            )
        except ListingStoreError as e:
            return StrategyOutcome.fallthrough(f"vector search failed: {e}")

        candidates = [m for m in raw if not m.is_sold]
        ranked = self.ranking.rerank_semantic(candidates, context.intent)
        logger.info(f"Semantic search found {len(ranked)} matches")
        return StrategyOutcome.ok(ranked[:options.limit])


class EnhancedLexicalStrategy(SearchStrategy):
    """Intent-filtered datastore query scored lexically with intent weights."""

    name = "enhanced_lexical"
    uses_intent = True

    def __init__(
        self,
        store: ListingStore,
        ranking: Optional[RankingEngine] = None,
        candidate_limit: int = 50,
    ):
        super().__init__(store, ranking)
        self.candidate_limit = candidate_limit

    def run(self, context: SearchContext) -> StrategyOutcome:
        conditions = intent_conditions(context.intent)
        try:
            listings = self.store.query_listings(
                conditions,
                order_by=DEFAULT_ORDER,
                limit=self.candidate_limit,
            )
        except ListingStoreError as e:
            return StrategyOutcome.fallthrough(f"enhanced query failed: {e}")

        scored = self.ranking.score_enhanced(listings, context.query, context.intent)
        matches = self.ranking.rank(scored, context.options.limit, min_score=ENHANCED_MIN_SCORE)
        logger.info(f"Enhanced search found {len(matches)} matches")
        return StrategyOutcome.ok(matches)


class PlainLexicalStrategy(SearchStrategy):
    """Recent non-sold listings scored by query tokens only. Last resort."""

    name = "plain_lexical"

    def __init__(
        self,
        store: ListingStore,
        ranking: Optional[RankingEngine] = None,
        candidate_limit: int = 50,
    ):
        super().__init__(store, ranking)
        self.candidate_limit = candidate_limit

    def run(self, context: SearchContext) -> StrategyOutcome:
        try:
            listings = self.store.query_listings(
                [],
                order_by=DEFAULT_ORDER,
                limit=self.candidate_limit,
            )
        except ListingStoreError as e:
            return StrategyOutcome.fallthrough(str(e))

        scored = self.ranking.score_plain(listings, context.query)
        matches = self.ranking.rank(scored, context.options.limit, min_score=PLAIN_MIN_SCORE)
        logger.info(f"Fallback search found {len(matches)} matches")
        return StrategyOutcome.ok(matches)
