"""
Listing store contract - filters, ordering and the adapter protocol.
"""
from typing import Any, Literal, Optional, Protocol

from pydantic import BaseModel

from ..models.listing import ListingRecord, ScoredMatch


Operator = Literal["eq", "neq", "gt", "gte", "lt", "lte", "ilike"]

SOLD_STATUS = "sold"


class FilterCondition(BaseModel):
    """One column predicate, e.g. bedrooms = 2 or price >= 1500."""
    column: str
    operator: Operator
    value: Any

    @classmethod
    def eq(cls, column: str, value: Any) -> "FilterCondition":
        return cls(column=column, operator="eq", value=value)

    @classmethod
    def neq(cls, column: str, value: Any) -> "FilterCondition":
        return cls(column=column, operator="neq", value=value)

    @classmethod
    def gte(cls, column: str, value: Any) -> "FilterCondition":
        return cls(column=column, operator="gte", value=value)

    @classmethod
    def lte(cls, column: str, value: Any) -> "FilterCondition":
        return cls(column=column, operator="lte", value=value)

    @classmethod
    def ilike(cls, column: str, value: str) -> "FilterCondition":
        return cls(column=column, operator="ilike", value=value)


class OrderBy(BaseModel):
    column: str
    descending: bool = True


# Featured listings first, then newest
DEFAULT_ORDER = [
    OrderBy(column="featured", descending=True),
    OrderBy(column="created_at", descending=True),
]


def sold_exclusion(
    conditions: list[FilterCondition],
    include_sold: bool,
) -> list[FilterCondition]:
    """
    Return the conditions with the implicit "not sold" predicate added.
    A caller-supplied status condition or include_sold=True overrides it.
    """
    if include_sold or any(c.column == "status" for c in conditions):
        return list(conditions)
    return [FilterCondition.neq("status", SOLD_STATUS), *conditions]


class ListingStore(Protocol):
    """Read (and embedding write) operations the search pipeline needs."""

    def query_listings(
        self,
        conditions: list[FilterCondition],
        order_by: Optional[list[OrderBy]] = None,
        limit: int = 50,
        include_sold: bool = False,
    ) -> list[ListingRecord]:
        ...

    def vector_similarity(
        self,
        embedding: list[float],
        threshold: float,
        count: int,
        offset: int = 0,
    ) -> list[ScoredMatch]:
        ...

    def get_listing(self, listing_id: str) -> Optional[ListingRecord]:
        ...

    def update_embedding(self, listing_id: str, embedding: list[float]) -> None:
        ...

    def fetch_settings_row(self) -> Optional[dict[str, Any]]:
        ...
