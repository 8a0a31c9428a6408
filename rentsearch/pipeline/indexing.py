"""
Listing indexer - writes embeddings so listings are reachable by semantic search.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..ai.embedding_client import EmbeddingClient
from ..client.credentials import CredentialProvider
from ..client.listing_store import ListingStore
from ..errors import EmbeddingError, ListingStoreError
from ..models.listing import ListingRecord


logger = logging.getLogger(__name__)


@dataclass
class IndexResult:
    listing_id: str
    success: bool
    error: Optional[str] = None


def build_embedding_text(listing: ListingRecord) -> str:
    """Document embedded for a listing; queries are compared against this."""
    return "\n".join([
        f"Title: {listing.title}",
        f"Location: {listing.location or ''}",
        f"Description: {listing.description or ''}",
        f"Amenities: {', '.join(listing.amenities)}",
    ])


class ListingIndexer:
    """Embeds listings one at a time. Failures are returned, not raised."""

    def __init__(
        self,
        store: ListingStore,
        credentials: Optional[CredentialProvider] = None,
        embedder: Optional[EmbeddingClient] = None,
    ):
        self.store = store
        self.credentials = credentials or CredentialProvider(store)
        self.embedder = embedder or EmbeddingClient()

    def embed_listing(self, listing_id: str) -> IndexResult:
        api_key = self.credentials.get_api_key()
        if not api_key:
            logger.error("OpenAI API key not found")
            return IndexResult(listing_id, False, "API key not configured")

        try:
            listing = self.store.get_listing(listing_id)
        except ListingStoreError as e:
            logger.error(f"Error fetching listing {listing_id} for embedding: {e}")
            return IndexResult(listing_id, False, str(e))

        if listing is None:
            return IndexResult(listing_id, False, "Listing not found")

        try:
            embedding = self.embedder.embed(build_embedding_text(listing), api_key)
        except EmbeddingError as e:
            logger.error(f"Embedding failed for listing {listing_id}: {e}")
            return IndexResult(listing_id, False, str(e))

        try:
            self.store.update_embedding(listing_id, embedding)
        except ListingStoreError as e:
            logger.error(f"Error updating listing {listing_id} with embedding: {e}")
            return IndexResult(listing_id, False, str(e))

        logger.info(f"Embedded listing {listing_id} ({len(embedding)} dims)")
        return IndexResult(listing_id, True)

    def embed_listings(self, listing_ids: list[str]) -> list[IndexResult]:
        return [self.embed_listing(listing_id) for listing_id in listing_ids]
