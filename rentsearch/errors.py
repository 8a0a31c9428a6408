"""
Exceptions raised by the upstream adapters.
The search entry point converts all of them into fallbacks or a result error.
"""


class ListingStoreError(Exception):
    """A datastore read or write failed."""


class EmbeddingError(Exception):
    """The embeddings endpoint failed or returned an unusable vector."""
