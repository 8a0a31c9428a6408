"""
Listing models - datastore rows and scored search matches.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ListingRecord(BaseModel):
    """
    A rental listing as read from the datastore.
    Only the columns the search pipeline reads are modeled; the rest are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    description: Optional[str] = None
    location: Optional[str] = None
    price: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    status: Optional[str] = None
    featured: bool = False
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Datastores may hand back integer or UUID ids."""
        return str(v) if v is not None else v

    @field_validator("amenities", "images", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("featured", mode="before")
    @classmethod
    def none_to_false(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def is_sold(self) -> bool:
        return (self.status or "").lower() == "sold"

    @property
    def search_text(self) -> str:
        """Lowercase haystack used for lexical matching."""
        parts = [self.title, self.description, self.location, " ".join(self.amenities)]
        return " ".join(p for p in parts if p).lower()


class ScoredMatch(ListingRecord):
    """A listing with its similarity score and the reasons it matched."""
    similarity: float = 0.0
    match_reasons: list[str] = Field(default_factory=list, serialization_alias="matchReasons")

    @classmethod
    def from_listing(
        cls,
        listing: ListingRecord,
        similarity: float,
        match_reasons: Optional[list[str]] = None,
    ) -> "ScoredMatch":
        data = listing.model_dump(exclude={"similarity", "match_reasons"})
        return cls(**data, similarity=similarity, match_reasons=list(match_reasons or []))
