"""AI modules for intent analysis and embeddings."""

from .llm_client import LLMClient
from .intent_extractor import IntentExtractor
from .embedding_client import EmbeddingClient

__all__ = ["LLMClient", "IntentExtractor", "EmbeddingClient"]
