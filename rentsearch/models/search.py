"""
Search request/response models.
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .intent import AnalyzedIntent
from .listing import ScoredMatch


DEFAULT_LIMIT = 10
DEFAULT_MIN_SIMILARITY = 0.3

StrategyName = Literal["semantic", "enhanced_lexical", "plain_lexical"]


class SearchOptions(BaseModel):
    """
    Options accepted by search().
    Out-of-range values are coerced rather than rejected; unknown keys are rejected.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    model: Optional[str] = Field(default=None, description="Chat model used for intent analysis")
    limit: int = Field(default=DEFAULT_LIMIT)
    offset: int = Field(default=0)
    min_similarity: float = Field(default=DEFAULT_MIN_SIMILARITY)
    use_semantic_search: bool = False
    analyze_intent: bool = False

    @field_validator("limit", mode="after")
    @classmethod
    def default_non_positive_limit(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_LIMIT

    @field_validator("offset", mode="after")
    @classmethod
    def floor_offset(cls, v: int) -> int:
        return max(0, v)

    @field_validator("min_similarity", mode="after")
    @classmethod
    def clamp_similarity(cls, v: float) -> float:
        return min(1.0, max(0.0, v))


class SearchResult(BaseModel):
    """Outcome of one search call. Errors are reported here, never raised."""
    matches: list[ScoredMatch] = Field(default_factory=list)
    search_query: str = Field(serialization_alias="searchQuery")
    error: Optional[str] = None
    analyzed_query: Optional[AnalyzedIntent] = Field(default=None, serialization_alias="analyzedQuery")
    strategy: Optional[StrategyName] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys, dropping unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)
