"""
Ranking engine - deterministic lexical scoring and intent boosts.

Two scales are in use and they are not comparable:
- semantic matches start from a vector similarity in [0, 1], get small
  additive intent boosts and are clamped to 1.0;
- lexical matches count token hits plus integer intent weights, then divide
  by the token count (enhanced path: token count + 2, clamped to 1.0;
  plain path: token count, unclamped).
"""
import logging
from typing import Iterable, Optional

from ..models.intent import AnalyzedIntent
from ..models.listing import ListingRecord, ScoredMatch


logger = logging.getLogger(__name__)


MIN_TOKEN_LENGTH = 3
FEATURED_BOOST = 0.5
MAX_SIMILARITY = 1.0

# Lexical (enhanced) path weights
LEXICAL_PET_BOOST = 3.0
LEXICAL_AMENITY_BOOST = 2.0
LEXICAL_KEYWORD_BOOST = 1.0
LEXICAL_PET_TERMS = ("pet", "dog", "cat", "animal")
EMPTY_QUERY_DIVISOR = 5

# Semantic path weights
SEMANTIC_BEDROOM_BOOST = 0.2
SEMANTIC_BATHROOM_BOOST = 0.15
SEMANTIC_PRICE_BOUND_BOOST = 0.1
SEMANTIC_AMENITY_BOOST = 0.15
SEMANTIC_PET_BOOST = 0.25
SEMANTIC_KEYWORD_BOOST = 0.08
SEMANTIC_PET_TERMS = ("pet", "dog", "cat")


def tokenize_query(query: str) -> list[str]:
    """Lowercase whitespace tokens, dropping anything shorter than 3 chars."""
    return [t for t in query.lower().split() if len(t) >= MIN_TOKEN_LENGTH]


def lexical_match(haystack: str, tokens: list[str]) -> tuple[float, list[str]]:
    """One point per query token present in the haystack (presence, not frequency)."""
    matched = [t for t in tokens if t in haystack]
    return float(len(matched)), matched


def lexical_intent_boost(haystack: str, intent: AnalyzedIntent) -> tuple[float, list[str]]:
    """Intent contribution on the lexical scale."""
    score = 0.0
    reasons: list[str] = []

    if intent.pet_friendly and any(term in haystack for term in LEXICAL_PET_TERMS):
        score += LEXICAL_PET_BOOST
        reasons.append("pet-friendly")

    amenities = [a for a in intent.amenities if a.lower() in haystack]
    if amenities:
        score += len(amenities) * LEXICAL_AMENITY_BOOST
        reasons.extend(amenities)

    keywords = [k for k in intent.keywords if k.lower() in haystack]
    if keywords:
        score += len(keywords) * LEXICAL_KEYWORD_BOOST
        reasons.extend(keywords)

    return score, reasons


def semantic_intent_boost(match: ListingRecord, intent: AnalyzedIntent) -> tuple[float, list[str]]:
    """Intent contribution on the similarity scale."""
    boost = 0.0
    reasons: list[str] = []

    if intent.bedrooms is not None and match.bedrooms == intent.bedrooms:
        boost += SEMANTIC_BEDROOM_BOOST
        reasons.append(f"{intent.bedrooms} bedrooms")

    if (
        intent.bathrooms is not None
        and match.bathrooms is not None
        and match.bathrooms >= intent.bathrooms
    ):
        boost += SEMANTIC_BATHROOM_BOOST
        reasons.append(f"{match.bathrooms} bathrooms")

    price_range = intent.price_range
    if price_range is not None and match.price is not None:
        min_ok = price_range.min is not None and match.price >= price_range.min
        max_ok = price_range.max is not None and match.price <= price_range.max
        if min_ok:
            boost += SEMANTIC_PRICE_BOUND_BOOST
        if max_ok:
            boost += SEMANTIC_PRICE_BOUND_BOOST
        if min_ok and max_ok:
            reasons.append("within price range")

    listing_amenities = [a.lower() for a in match.amenities]
    if intent.amenities and listing_amenities:
        matching = [
            a for a in intent.amenities
            if any(a.lower() in la for la in listing_amenities)
        ]
        if matching:
            boost += len(matching) * SEMANTIC_AMENITY_BOOST
            reasons.extend(matching)

    if intent.pet_friendly and any(
        term in la for la in listing_amenities for term in SEMANTIC_PET_TERMS
    ):
        boost += SEMANTIC_PET_BOOST
        reasons.append("pet friendly")

    if intent.keywords:
        text = f"{match.title} {match.description or ''}".lower()
        matching = [k for k in intent.keywords if k.lower() in text]
        if matching:
            boost += len(matching) * SEMANTIC_KEYWORD_BOOST
            reasons.extend(matching)

    return boost, reasons


class RankingEngine:
    """
    Scores candidates, sorts them by similarity and truncates.
    Sorting is Python's stable sort, so ties keep the order the datastore returned.
    """

    def score_enhanced(
        self,
        listings: Iterable[ListingRecord],
        query: str,
        intent: Optional[AnalyzedIntent],
    ) -> list[ScoredMatch]:
        """Lexical score plus intent weights, normalized by token count + 2 and clamped to 1.0."""
        tokens = tokenize_query(query)
        scored = []

        for listing in listings:
            haystack = listing.search_text
            score, matched_terms = lexical_match(haystack, tokens)

            reasons: list[str] = []
            if intent is not None:
                boost, reasons = lexical_intent_boost(haystack, intent)
                score += boost

            if listing.featured:
                score += FEATURED_BOOST

            divisor = len(tokens) + 2 if tokens else EMPTY_QUERY_DIVISOR
            scored.append(ScoredMatch.from_listing(
                listing,
                similarity=min(score / divisor, MAX_SIMILARITY),
                match_reasons=matched_terms + reasons,
            ))

        return scored

    def score_plain(
        self,
        listings: Iterable[ListingRecord],
        query: str,
    ) -> list[ScoredMatch]:
        """Lexical score only, normalized by token count and left unclamped."""
        tokens = tokenize_query(query)
        scored = []

        for listing in listings:
            score, matched_terms = lexical_match(listing.search_text, tokens)
            if listing.featured:
                score += FEATURED_BOOST

            similarity = score / len(tokens) if tokens else score
            scored.append(ScoredMatch.from_listing(listing, similarity, matched_terms))

        return scored

    def rerank_semantic(
        self,
        matches: Iterable[ScoredMatch],
        intent: Optional[AnalyzedIntent],
    ) -> list[ScoredMatch]:
        """Add intent boosts to vector similarities, clamp to 1.0 and re-sort."""
        if intent is None:
            return self.sort(matches)

        reranked = []
        for match in matches:
            boost, reasons = semantic_intent_boost(match, intent)
            reranked.append(match.model_copy(update={
                "similarity": min(match.similarity + boost, MAX_SIMILARITY),
                "match_reasons": reasons,
            }))
        return self.sort(reranked)

    def sort(self, matches: Iterable[ScoredMatch]) -> list[ScoredMatch]:
        return sorted(matches, key=lambda m: m.similarity, reverse=True)

    def rank(
        self,
        matches: Iterable[ScoredMatch],
        limit: int,
        min_score: Optional[float] = None,
    ) -> list[ScoredMatch]:
        """Drop scores <= min_score, sort descending and keep the top `limit`."""
        if min_score is not None:
            matches = [m for m in matches if m.similarity > min_score]
        return self.sort(matches)[:limit]
