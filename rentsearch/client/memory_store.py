"""
In-memory listing store - evaluates the same filters locally.
Used for tests and for running searches against a JSON fixture.
"""
import json
import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np

from ..models.listing import ListingRecord, ScoredMatch
from .listing_store import DEFAULT_ORDER, FilterCondition, OrderBy, sold_exclusion


logger = logging.getLogger(__name__)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two vectors; 0.0 if either has zero length."""
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape:
        raise ValueError(f"Vector dimensions differ: {va.shape} vs {vb.shape}")
    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0:
        return 0.0
    return float(np.dot(va, vb) / norm)


def _matches(listing: ListingRecord, condition: FilterCondition) -> bool:
    actual = getattr(listing, condition.column, None)
    expected = condition.value
    op = condition.operator

    if op == "ilike":
        needle = str(expected).lower()
        if isinstance(actual, list):
            return any(needle in str(item).lower() for item in actual)
        return actual is not None and needle in str(actual).lower()
    if op == "eq":
        return actual == expected
    if op == "neq":
        # SQL semantics: NULL <> 'sold' is not true
        return actual is not None and actual != expected
    if actual is None:
        return False
    if op == "gt":
        return actual > expected
    if op == "gte":
        return actual >= expected
    if op == "lt":
        return actual < expected
    if op == "lte":
        return actual <= expected
    return False


def _apply_order(rows: list[ListingRecord], order_by: list[OrderBy]) -> list[ListingRecord]:
    """
    Multi-key stable sort, applied least-significant key first.
    Nulls sort first on descending keys and last on ascending ones, as in PostgreSQL.
    """
    for order in reversed(order_by):
        present = [r for r in rows if getattr(r, order.column, None) is not None]
        missing = [r for r in rows if getattr(r, order.column, None) is None]
        present.sort(key=lambda r: getattr(r, order.column), reverse=order.descending)
        rows = missing + present if order.descending else present + missing
    return rows


class InMemoryListingStore:
    """Listing store over a Python list, with optional per-listing embeddings."""

    def __init__(
        self,
        listings: Optional[list[ListingRecord]] = None,
        embeddings: Optional[dict[str, list[float]]] = None,
        settings_row: Optional[dict[str, Any]] = None,
    ):
        self.listings = list(listings or [])
        self.embeddings = dict(embeddings or {})
        self.settings_row = settings_row

    @classmethod
    def from_json(cls, path: Path) -> "InMemoryListingStore":
        """
        Load a fixture file: a list of listing rows, or an object with
        "listings" and optional "settings" keys. Rows may carry an "embedding".
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, list):
            rows, settings_row = data, None
        else:
            rows, settings_row = data.get("listings", []), data.get("settings")

        listings = []
        embeddings = {}
        for row in rows:
            listing = ListingRecord.model_validate(row)
            listings.append(listing)
            if row.get("embedding"):
                embeddings[listing.id] = row["embedding"]

        logger.info(f"Loaded {len(listings)} listings from {path}")
        return cls(listings, embeddings, settings_row)

    def query_listings(
        self,
        conditions: list[FilterCondition],
        order_by: Optional[list[OrderBy]] = None,
        limit: int = 50,
        include_sold: bool = False,
    ) -> list[ListingRecord]:
        effective = sold_exclusion(conditions, include_sold)
        rows = [l for l in self.listings if all(_matches(l, c) for c in effective)]
        return _apply_order(rows, order_by or DEFAULT_ORDER)[:limit]

    def vector_similarity(
        self,
        embedding: list[float],
        threshold: float,
        count: int,
        offset: int = 0,
    ) -> list[ScoredMatch]:
        scored = []
        for listing in self.listings:
            if listing.is_sold:
                continue
            stored = self.embeddings.get(listing.id)
            if stored is None:
                continue
            similarity = cosine_similarity(embedding, stored)
            if similarity > threshold:
                scored.append(ScoredMatch.from_listing(listing, similarity))

        scored.sort(key=lambda m: m.similarity, reverse=True)
        return scored[offset:offset + count]

    def get_listing(self, listing_id: str) -> Optional[ListingRecord]:
        return next((l for l in self.listings if l.id == listing_id), None)

    def update_embedding(self, listing_id: str, embedding: list[float]) -> None:
        self.embeddings[listing_id] = list(embedding)

    def fetch_settings_row(self) -> Optional[dict[str, Any]]:
        return self.settings_row
