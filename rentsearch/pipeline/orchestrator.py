"""
Search orchestrator - runs the strategy cascade for one query.
"""
import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..ai.embedding_client import EmbeddingClient
from ..ai.intent_extractor import IntentExtractor
from ..client.credentials import CredentialProvider
from ..client.listing_store import ListingStore
from ..config import Config, get_config
from ..models.intent import AnalyzedIntent
from ..models.search import SearchOptions, SearchResult
from .scoring import RankingEngine
from .strategies import (
    EnhancedLexicalStrategy,
    PlainLexicalStrategy,
    SearchContext,
    SearchStrategy,
    SemanticStrategy,
    StrategyOutcome,
)


logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """
    Entry point of the search pipeline.

    Cascade:
    1. No API key -> plain lexical search only.
    2. analyze_intent -> ask the model for structured intent (None on failure).
    3. use_semantic_search -> embedding + vector RPC, re-ranked by intent.
    4. Intent-filtered lexical search.
    5. Plain lexical search; a datastore error here is the only error
       reported to the caller, as SearchResult.error.
    """

    def __init__(
        self,
        store: ListingStore,
        credentials: Optional[CredentialProvider] = None,
        intent_extractor: Optional[IntentExtractor] = None,
        embedder: Optional[EmbeddingClient] = None,
        ranking: Optional[RankingEngine] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or get_config()
        self.store = store
        self.credentials = credentials or CredentialProvider(store, self.config)
        self.intent_extractor = intent_extractor or IntentExtractor()
        ranking = ranking or RankingEngine()

        search_config = self.config.search
        self.semantic = SemanticStrategy(
            store,
            embedder or EmbeddingClient(),
            ranking,
            overfetch_factor=search_config.overfetch_factor,
        )
        self.enhanced = EnhancedLexicalStrategy(store, ranking, search_config.candidate_limit)
        self.plain = PlainLexicalStrategy(store, ranking, search_config.candidate_limit)

    def plan(self, options: SearchOptions, has_api_key: bool) -> list[SearchStrategy]:
        """Ordered strategies to try for a call."""
        if not has_api_key:
            return [self.plain]
        chain: list[SearchStrategy] = []
        if options.use_semantic_search:
            chain.append(self.semantic)
        chain.extend([self.enhanced, self.plain])
        return chain

    def search(
        self,
        query: str,
        options: Union[SearchOptions, dict[str, Any], None] = None,
    ) -> SearchResult:
        """
        Search listings for a free-text query. Never raises.

        Args:
            query: User's natural language search query
            options: SearchOptions or an equivalent dict

        Returns:
            SearchResult with matches sorted by similarity descending
        """
        try:
            options = self._coerce_options(options)
        except (ValidationError, TypeError) as e:
            logger.error(f"Rejected search options: {e}")
            return SearchResult(search_query=query, error=f"Invalid search options: {e}")

        logger.info(f"Starting search with query: {query!r}")
        context = SearchContext(query=query, options=options)

        context.api_key = self._get_api_key()
        if not context.api_key:
            logger.info("No OpenAI API key found, falling back to direct search")
        elif options.analyze_intent:
            context.intent = self._analyze_intent(query, context.api_key, options.model)

        outcome = StrategyOutcome.fallthrough("no strategy ran")
        for strategy in self.plan(options, bool(context.api_key)):
            outcome = self._run_strategy(strategy, context)
            if outcome.succeeded:
                return SearchResult(
                    matches=outcome.matches,
                    search_query=query,
                    analyzed_query=context.intent if strategy.uses_intent else None,
                    strategy=strategy.name,
                )
            logger.warning(f"{strategy.name} search fell through: {outcome.fallthrough_reason}")

        logger.error(f"All search strategies failed for {query!r}")
        return SearchResult(
            matches=[],
            search_query=query,
            error=outcome.fallthrough_reason or "Unknown error occurred",
        )

    def _coerce_options(self, options: Union[SearchOptions, dict[str, Any], None]) -> SearchOptions:
        if isinstance(options, SearchOptions):
            return options
        defaults = {
            "limit": self.config.search.default_limit,
            "min_similarity": self.config.search.default_min_similarity,
        }
        return SearchOptions.model_validate({**defaults, **(options or {})})

    def _get_api_key(self) -> Optional[str]:
        try:
            return self.credentials.get_api_key()
        except Exception as e:
            logger.warning(f"Credential lookup failed: {e}")
            return None

    def _analyze_intent(self, query: str, api_key: str, model: Optional[str]) -> Optional[AnalyzedIntent]:
        try:
            return self.intent_extractor.analyze(query, api_key, model)
        except Exception:
            logger.exception("Intent analysis failed, continuing without intent")
            return None

    def _run_strategy(self, strategy: SearchStrategy, context: SearchContext) -> StrategyOutcome:
        logger.info(f"Trying {strategy.name} search")
        try:
            return strategy.run(context)
        except Exception as e:
            logger.exception(f"Unexpected error in {strategy.name} search")
            return StrategyOutcome.fallthrough(str(e) or type(e).__name__)
