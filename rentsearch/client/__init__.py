"""Datastore adapters and credential lookup."""

from .listing_store import (
    DEFAULT_ORDER,
    FilterCondition,
    ListingStore,
    OrderBy,
)
from .supabase_store import SupabaseListingStore
from .memory_store import InMemoryListingStore, cosine_similarity
from .credentials import CredentialProvider

__all__ = [
    "DEFAULT_ORDER",
    "FilterCondition",
    "ListingStore",
    "OrderBy",
    "SupabaseListingStore",
    "InMemoryListingStore",
    "cosine_similarity",
    "CredentialProvider",
]
