"""
Intent extractor - turns a free-text rental query into structured requirements.
"""
import json
import logging
from typing import Callable, Optional

from openai import OpenAIError
from pydantic import ValidationError

from ..models.intent import AnalyzedIntent
from .llm_client import LLMClient


logger = logging.getLogger(__name__)


AMENITY_VOCABULARY = [
    "pool", "gym", "parking", "balcony", "garden", "security", "elevator",
    "air conditioning", "heating", "laundry", "dishwasher", "wifi", "furnished",
]

PET_TRIGGER_WORDS = ["pet", "pets", "dog", "cat"]

_AMENITY_LIST = ", ".join(AMENITY_VOCABULARY)
_PET_LIST = ", ".join(f'"{w}"' for w in PET_TRIGGER_WORDS)


INTENT_SYSTEM_PROMPT = f"""You are a real estate search assistant. Analyze the user's search query and extract specific requirements. Return a JSON object with the following structure:
{{
  "bedrooms": number or null,
  "bathrooms": number or null,
  "priceRange": {{"min": number or null, "max": number or null}},
  "amenities": ["pool", "gym", "parking", etc.],
  "propertyType": "apartment", "house", "villa", etc. or null,
  "petFriendly": boolean or null,
  "keywords": ["modern", "luxury", "downtown", etc.],
  "location": string or null
}}

Common amenities to look for: {_AMENITY_LIST}.
Normalize amenity synonyms to these names and return them in lowercase.
Look for pet-related terms like "pet friendly", "pets allowed", {_PET_LIST}.
Extract price ranges from terms like "under $2000", "between $1500-2500", "max $3000".
Extract only what's explicitly mentioned or strongly implied in the query."""


class IntentExtractor:
    """
    Asks the chat model for an AnalyzedIntent.
    Never raises: any failure is logged and reported as None.
    """

    def __init__(self, client_factory: Callable[..., LLMClient] = LLMClient):
        self.client_factory = client_factory

    def analyze(
        self,
        text: str,
        api_key: str,
        model: Optional[str] = None,
    ) -> Optional[AnalyzedIntent]:
        """
        Extract structured intent from a query.

        Args:
            text: Raw user query
            api_key: OpenAI API key for this call
            model: Chat model override

        Returns:
            AnalyzedIntent, or None if the model call or its output failed
        """
        if not text or not text.strip():
            return None

        llm = self.client_factory(api_key=api_key, model=model)
        if not llm.is_available():
            logger.warning("Intent analysis skipped: no OpenAI API key")
            return None

        try:
            intent = llm.call_with_schema(
                system_prompt=INTENT_SYSTEM_PROMPT,
                user_prompt=text,
                response_model=AnalyzedIntent,
            )
        except OpenAIError as e:
            logger.warning(f"Intent analysis request failed: {e}")
            return None
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Intent analysis returned unusable output: {e}")
            return None

        logger.info(f"Analyzed query: {intent.model_dump(exclude_none=True)}")
        return intent
