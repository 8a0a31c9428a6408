"""
Embedding client - text to vector via the OpenAI embeddings endpoint.
"""
import logging
from typing import Callable

from openai import OpenAIError

from ..errors import EmbeddingError
from .llm_client import LLMClient


logger = logging.getLogger(__name__)


class EmbeddingClient:
    """
    Unlike the intent extractor this raises on failure, so callers can tell
    a transient upstream error apart from a missing key.
    """

    def __init__(self, client_factory: Callable[..., LLMClient] = LLMClient):
        self.client_factory = client_factory

    def embed(self, text: str, api_key: str) -> list[float]:
        if not api_key:
            raise EmbeddingError("No API key supplied for embedding")

        llm = self.client_factory(api_key=api_key)
        try:
            vector = llm.embed(text)
        except OpenAIError as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        if not vector:
            raise EmbeddingError("Embedding endpoint returned an empty vector")

        logger.debug(f"Embedded {len(text)} chars into {len(vector)} dims")
        return vector
