"""
OpenAI access for the search pipeline: JSON-mode chat for intent, embeddings for vectors.
"""
import json
import logging
from typing import Optional, Type, TypeVar

from openai import OpenAI
from pydantic import BaseModel

from ..config import get_config


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

JSON_MODE = {"type": "json_object"}


class LLMClient:
    """
    OpenAI client bound to one API key.
    Without a key the client is unavailable and every request raises RuntimeError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        embedding_model: Optional[str] = None,
    ):
        settings = get_config().openai
        self.api_key = api_key or settings.api_key
        self.model = model or settings.chat_model
        self.embedding_model = embedding_model or settings.embedding_model
        self.max_tokens = settings.max_tokens
        self.temperature = settings.temperature

        self.client: Optional[OpenAI] = None
        if self.api_key:
            self.client = OpenAI(api_key=self.api_key, timeout=settings.timeout)
        else:
            logger.warning("No OpenAI API key configured")

    def is_available(self) -> bool:
        return self.client is not None

    def _require_client(self) -> OpenAI:
        if self.client is None:
            raise RuntimeError("LLM client not configured")
        return self.client

    def call_with_schema(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: Type[T],
    ) -> T:
        """
        Ask the chat model for a JSON object and validate it into `response_model`.

        Raises:
            json.JSONDecodeError: If the reply is not JSON
            ValidationError: If the reply doesn't fit the schema
            openai.OpenAIError: On transport or API errors
        """
        response = self._require_client().chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            response_format=JSON_MODE,
        )
        reply = response.choices[0].message.content or ""

        try:
            data = json.loads(reply)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON from {self.model}: {e}")
            raise

        return response_model.model_validate(data)

    def embed(self, text: str) -> list[float]:
        """Return the embedding vector for a piece of text."""
        response = self._require_client().embeddings.create(model=self.embedding_model, input=text)
        return list(response.data[0].embedding)
