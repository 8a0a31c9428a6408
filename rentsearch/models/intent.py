"""
Intent models - structured requirements extracted from a free-text query.
"""
import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PriceRange(BaseModel):
    """Monthly rent bounds. Either side may be open."""
    model_config = ConfigDict(extra="ignore")

    min: Optional[float] = Field(default=None, allow_inf_nan=False)
    max: Optional[float] = Field(default=None, allow_inf_nan=False)

    @model_validator(mode="after")
    def order_bounds(self) -> "PriceRange":
        if self.min is not None and self.max is not None and self.min > self.max:
            self.min, self.max = self.max, self.min
        return self


class AnalyzedIntent(BaseModel):
    """
    What the user asked for, as understood by the language model.
    Every field is optional; absent fields simply don't contribute to ranking.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    price_range: Optional[PriceRange] = Field(default=None, alias="priceRange")
    amenities: list[str] = Field(default_factory=list)
    property_type: Optional[str] = Field(default=None, alias="propertyType")
    pet_friendly: Optional[bool] = Field(default=None, alias="petFriendly")
    keywords: list[str] = Field(default_factory=list)
    location: Optional[str] = None

    @field_validator("bedrooms", "bathrooms", mode="before")
    @classmethod
    def drop_negative_counts(cls, v: Any) -> Any:
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("count must be a finite number")
        if isinstance(v, (int, float)) and v < 0:
            return None
        if isinstance(v, float):
            return int(v)
        return v

    @field_validator("amenities", mode="before")
    @classmethod
    def normalize_amenities(cls, v: Any) -> list[str]:
        seen: list[str] = []
        for amenity in _string_items(v):
            amenity = amenity.lower()
            if amenity not in seen:
                seen.append(amenity)
        return seen

    @field_validator("keywords", mode="before")
    @classmethod
    def clean_keywords(cls, v: Any) -> list[str]:
        return _string_items(v)


def _string_items(v: Any) -> list[str]:
    """Stripped non-blank strings from a model-supplied list; a bare string counts as one item."""
    if v is None:
        return []
    if isinstance(v, str):
        v = [v]
    if not isinstance(v, (list, tuple)):
        raise ValueError(f"expected a list of strings, got {type(v).__name__}")
    return [item.strip() for item in v if isinstance(item, str) and item.strip()]
