"""
Tests for Pydantic models.
"""
import pytest
from pydantic import ValidationError

from rentsearch.models.intent import AnalyzedIntent, PriceRange
from rentsearch.models.listing import ListingRecord, ScoredMatch
from rentsearch.models.search import SearchOptions, SearchResult


class TestSearchOptions:
    """Tests for option validation and coercion."""

    def test_defaults(self):
        """Test documented defaults."""
        options = SearchOptions()

        assert options.limit == 10
        assert options.offset == 0
        assert options.min_similarity == 0.3
        assert options.use_semantic_search is False
        assert options.analyze_intent is False
        assert options.model is None

    @pytest.mark.parametrize("limit", [0, -1, -50])
    def test_non_positive_limit_coerced_to_default(self, limit):
        """Test that limit <= 0 falls back to the default of 10."""
        assert SearchOptions(limit=limit).limit == 10

    def test_negative_offset_floored(self):
        """Test that a negative offset becomes 0."""
        assert SearchOptions(offset=-3).offset == 0

    @pytest.mark.parametrize("given,expected", [(-0.5, 0.0), (1.7, 1.0), (0.45, 0.45)])
    def test_min_similarity_clamped(self, given, expected):
        """Test min_similarity is clamped into [0, 1]."""
        assert SearchOptions(min_similarity=given).min_similarity == expected

    def test_unknown_option_rejected(self):
        """Test that unrecognized keys are rejected at the boundary."""
        with pytest.raises(ValidationError):
            SearchOptions.model_validate({"limit": 5, "fuzzy": True})

    def test_options_are_immutable(self):
        """Test options cannot be mutated after validation."""
        options = SearchOptions(limit=5)
        with pytest.raises(ValidationError):
            options.limit = 20


class TestAnalyzedIntent:
    """Tests for intent parsing from model output."""

    def test_parses_camel_case_payload(self):
        """Test parsing the JSON shape the prompt asks for."""
        intent = AnalyzedIntent.model_validate({
            "bedrooms": 2,
            "bathrooms": None,
            "priceRange": {"min": 1500, "max": 2500},
            "amenities": ["Pool", "parking", "pool"],
            "propertyType": "apartment",
            "petFriendly": True,
            "keywords": ["modern", " ", "downtown"],
            "location": "Downtown",
            "confidence": 0.9,
        })

        assert intent.bedrooms == 2
        assert intent.price_range == PriceRange(min=1500, max=2500)
        assert intent.amenities == ["pool", "parking"]
        assert intent.property_type == "apartment"
        assert intent.pet_friendly is True
        assert intent.keywords == ["modern", "downtown"]

    def test_inverted_price_range_is_swapped(self):
        """Test min <= max holds after validation."""
        price_range = PriceRange(min=3000, max=2000)

        assert price_range.min == 2000
        assert price_range.max == 3000

    def test_negative_counts_dropped(self):
        """Test that negative bedroom counts are treated as unknown."""
        intent = AnalyzedIntent.model_validate({"bedrooms": -1, "bathrooms": 1.0})

        assert intent.bedrooms is None
        assert intent.bathrooms == 1

    def test_null_lists_become_empty(self):
        """Test null amenities/keywords from the model."""
        intent = AnalyzedIntent.model_validate({"amenities": None, "keywords": None})

        assert intent.amenities == []
        assert intent.keywords == []

    @pytest.mark.parametrize("payload", [
        {"amenities": 5},
        {"keywords": True},
        {"amenities": {"pool": True}},
        {"bedrooms": float("inf")},
        {"bathrooms": float("nan")},
        {"priceRange": {"max": float("inf")}},
    ])
    def test_malformed_values_raise_validation_error(self, payload):
        """Test that wrongly typed model output fails validation instead of crashing."""
        with pytest.raises(ValidationError):
            AnalyzedIntent.model_validate(payload)

    def test_bare_string_lists(self):
        """Test that a single string is one item, not a list of characters."""
        intent = AnalyzedIntent.model_validate({"amenities": " Pool ", "keywords": "modern"})

        assert intent.amenities == ["pool"]
        assert intent.keywords == ["modern"]


class TestListingModels:
    """Tests for listing records and scored matches."""

    def test_search_text_skips_missing_parts(self):
        """Test haystack construction."""
        listing = ListingRecord(
            id=7,
            title="Sunny Loft",
            description=None,
            location="Venice",
            amenities=["Roof Deck", "Gym"],
        )

        assert listing.id == "7"
        assert listing.search_text == "sunny loft venice roof deck gym"

    def test_null_collections_and_flags(self):
        """Test datastore nulls coerce to safe defaults."""
        listing = ListingRecord.model_validate({
            "id": "a",
            "title": "x",
            "amenities": None,
            "images": None,
            "featured": None,
            "embedding": [0.1, 0.2],
        })

        assert listing.amenities == []
        assert listing.images == []
        assert listing.featured is False

    def test_sold_detection_is_case_insensitive(self):
        assert ListingRecord(id="1", status="Sold").is_sold
        assert not ListingRecord(id="1", status=None).is_sold

    def test_scored_match_from_listing(self):
        """Test a match keeps listing fields and adds score data."""
        listing = ListingRecord(id="1", title="Loft", price=2000)

        match = ScoredMatch.from_listing(listing, 0.75, ["loft"])

        assert match.id == "1"
        assert match.price == 2000
        assert match.similarity == 0.75
        assert match.match_reasons == ["loft"]


class TestSearchResult:
    """Tests for the search result payload."""

    def test_payload_omits_unset_fields(self):
        result = SearchResult(search_query="loft")

        payload = result.to_payload()

        assert payload == {"matches": [], "searchQuery": "loft"}
        assert result.succeeded

    def test_payload_uses_intent_aliases(self):
        result = SearchResult(
            search_query="loft",
            analyzed_query=AnalyzedIntent(price_range=PriceRange(max=2000)),
        )

        assert result.to_payload()["analyzedQuery"]["priceRange"] == {"max": 2000.0}

    def test_payload_uses_camel_case_keys(self):
        match = ScoredMatch(id="1", title="Loft", similarity=0.5, match_reasons=["loft"])
        result = SearchResult(search_query="loft", matches=[match], strategy="plain_lexical")

        payload = result.to_payload()

        assert payload["searchQuery"] == "loft"
        assert payload["matches"][0]["matchReasons"] == ["loft"]
        assert "match_reasons" not in payload["matches"][0]
        assert payload["strategy"] == "plain_lexical"
