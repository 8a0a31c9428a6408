"""
Shared fixtures and fakes for the search pipeline tests.
No test talks to OpenAI or Supabase.
"""
from datetime import datetime
from typing import Optional

import pytest

from rentsearch.client.memory_store import InMemoryListingStore
from rentsearch.config import Config, OpenAIConfig, SearchConfig
from rentsearch.errors import EmbeddingError, ListingStoreError
from rentsearch.models.intent import AnalyzedIntent
from rentsearch.models.listing import ListingRecord


class StaticCredentials:
    """Credential provider returning a fixed key (or None)."""

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key
        self.calls = 0

    def get_api_key(self) -> Optional[str]:
        self.calls += 1
        return self.api_key


class FakeIntentExtractor:
    """Records calls and returns a canned intent."""

    def __init__(self, intent: Optional[AnalyzedIntent] = None):
        self.intent = intent
        self.calls: list[tuple[str, str, Optional[str]]] = []

    def analyze(self, text, api_key, model=None):
        self.calls.append((text, api_key, model))
        return self.intent


class FakeEmbedder:
    """Returns a fixed vector, or raises EmbeddingError when `fail` is set."""

    def __init__(self, vector: Optional[list[float]] = None, fail: bool = False):
        self.vector = vector or [1.0, 0.0, 0.0]
        self.fail = fail
        self.calls: list[str] = []

    def embed(self, text, api_key):
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("connection reset")
        return self.vector


class RecordingStore(InMemoryListingStore):
    """In-memory store that records every call and can be told to fail."""

    def __init__(self, *args, fail_queries: int = 0, fail_vector: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_queries = fail_queries
        self.fail_vector = fail_vector
        self.query_calls: list[dict] = []
        self.vector_calls: list[dict] = []
        self.vector_results = None

    def query_listings(self, conditions, order_by=None, limit=50, include_sold=False):
        self.query_calls.append({
            "conditions": list(conditions),
            "order_by": order_by,
            "limit": limit,
            "include_sold": include_sold,
        })
        if self.fail_queries > 0:
            self.fail_queries -= 1
            raise ListingStoreError("relation \"listings\" is unavailable")
        return super().query_listings(conditions, order_by, limit, include_sold)

    def vector_similarity(self, embedding, threshold, count, offset=0):
        self.vector_calls.append({
            "embedding": embedding,
            "threshold": threshold,
            "count": count,
            "offset": offset,
        })
        if self.fail_vector:
            raise ListingStoreError("function match_listings does not exist")
        if self.vector_results is not None:
            return list(self.vector_results)
        return super().vector_similarity(embedding, threshold, count, offset)


@pytest.fixture
def config() -> Config:
    """Config with no API key and default search settings."""
    return Config(openai=OpenAIConfig(api_key=""), search=SearchConfig(credential_cache_ttl=0))


@pytest.fixture
def sample_listings() -> list[ListingRecord]:
    """A small catalogue covering the fields the scorer reads."""
    return [
        ListingRecord(
            id="1",
            title="Modern 2 bedroom apartment downtown",
            description="Bright unit with city views",
            location="Downtown Los Angeles",
            price=2400,
            bedrooms=2,
            bathrooms=2,
            amenities=["Parking", "Gym"],
            status="active",
            featured=True,
            created_at=datetime(2024, 5, 1),
        ),
        ListingRecord(
            id="2",
            title="Cozy studio near the beach",
            description="Walk to the pier",
            location="Santa Monica",
            price=1800,
            bedrooms=0,
            bathrooms=1,
            amenities=["Laundry"],
            status="active",
            featured=False,
            created_at=datetime(2024, 6, 1),
        ),
        ListingRecord(
            id="3",
            title="Spacious 2 bedroom house with garden",
            description="Quiet street, pets welcome",
            location="Pasadena",
            price=3100,
            bedrooms=2,
            bathrooms=1,
            amenities=["Garden", "Dog run"],
            status="active",
            featured=False,
            created_at=datetime(2024, 4, 1),
        ),
        ListingRecord(
            id="4",
            title="Downtown 2 bedroom loft",
            description="Already rented",
            location="Downtown Los Angeles",
            price=2200,
            bedrooms=2,
            bathrooms=1,
            amenities=["Parking"],
            status="sold",
            featured=True,
            created_at=datetime(2024, 7, 1),
        ),
    ]


@pytest.fixture
def store(sample_listings) -> RecordingStore:
    return RecordingStore(
        sample_listings,
        embeddings={
            "1": [1.0, 0.0, 0.0],
            "2": [0.0, 1.0, 0.0],
            "3": [0.8, 0.6, 0.0],
            "4": [1.0, 0.0, 0.0],
        },
    )
