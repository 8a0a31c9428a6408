"""
Supabase listing store - PostgREST over HTTP with retry logic.
"""
import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError
from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from ..config import SupabaseConfig, get_config
from ..errors import ListingStoreError
from ..models.listing import ListingRecord, ScoredMatch
from .listing_store import DEFAULT_ORDER, FilterCondition, OrderBy, sold_exclusion


logger = logging.getLogger(__name__)


TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


def encode_value(value: Any) -> str:
    """Render a filter value the way PostgREST expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_condition(condition: FilterCondition) -> tuple[str, str]:
    """FilterCondition -> (column, "op.value") query parameter."""
    if condition.operator == "ilike":
        return condition.column, f"ilike.*{condition.value}*"
    return condition.column, f"{condition.operator}.{encode_value(condition.value)}"


def encode_order(order_by: list[OrderBy]) -> str:
    return ",".join(f"{o.column}.{'desc' if o.descending else 'asc'}" for o in order_by)


class SupabaseListingStore:
    """
    Listing store backed by a Supabase project's REST API.
    Connection errors and timeouts are retried; anything else raises ListingStoreError.
    """

    def __init__(
        self,
        config: Optional[SupabaseConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_config().supabase
        if not self.config.url or not self.config.key:
            raise ListingStoreError("SUPABASE_URL and SUPABASE_KEY must be configured")

        self.base_url = self.config.url.rstrip("/") + "/rest/v1"
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": self.config.key,
            "Authorization": f"Bearer {self.config.key}",
            "Accept": "application/json",
        })
        logger.info(f"SupabaseListingStore initialized for {self.base_url}")

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[list[tuple[str, str]]] = None,
        json_body: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send one request, returning decoded JSON (or None for empty bodies)."""
        retrying = Retrying(
            stop=stop_after_attempt(self.config.retry_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=lambda retry_state: logger.warning(
                f"Retry attempt {retry_state.attempt_number} for {method} {path}"
            ),
            reraise=True,
        )

        try:
            for attempt in retrying:
                with attempt:
                    response = self.session.request(
                        method,
                        f"{self.base_url}/{path}",
                        params=params,
                        json=json_body,
                        headers=headers,
                        timeout=self.config.timeout,
                    )
        except requests.RequestException as e:
            raise ListingStoreError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise ListingStoreError(
                f"{method} {path} returned {response.status_code}: {response.text[:200]}"
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ListingStoreError(f"{method} {path} returned invalid JSON") from e

    def query_listings(
        self,
        conditions: list[FilterCondition],
        order_by: Optional[list[OrderBy]] = None,
        limit: int = 50,
        include_sold: bool = False,
    ) -> list[ListingRecord]:
        params = [("select", "*")]
        params.extend(encode_condition(c) for c in sold_exclusion(conditions, include_sold))
        params.append(("order", encode_order(order_by or DEFAULT_ORDER)))
        params.append(("limit", str(limit)))

        rows = self._request("GET", self.config.listings_table, params=params) or []
        return self._parse_rows(rows, ListingRecord)

    def vector_similarity(
        self,
        embedding: list[float],
        threshold: float,
        count: int,
        offset: int = 0,
    ) -> list[ScoredMatch]:
        body = {
            "query_embedding": embedding,
            "match_threshold": threshold,
            "match_count": count,
            "match_offset": offset,
        }
        rows = self._request("POST", f"rpc/{self.config.match_function}", json_body=body) or []
        return self._parse_rows(rows, ScoredMatch)

    def get_listing(self, listing_id: str) -> Optional[ListingRecord]:
        params = [("select", "*"), ("id", f"eq.{listing_id}"), ("limit", "1")]
        rows = self._request("GET", self.config.listings_table, params=params) or []
        parsed = self._parse_rows(rows, ListingRecord)
        return parsed[0] if parsed else None

    def update_embedding(self, listing_id: str, embedding: list[float]) -> None:
        self._request(
            "PATCH",
            self.config.listings_table,
            params=[("id", f"eq.{listing_id}")],
            json_body={"embedding": embedding},
            headers={"Prefer": "return=minimal"},
        )

    def fetch_settings_row(self) -> Optional[dict[str, Any]]:
        rows = self._request(
            "GET",
            self.config.settings_table,
            params=[("select", "*"), ("limit", "1")],
        ) or []
        return rows[0] if rows else None

    def _parse_rows(self, rows: Any, model: type) -> list:
        if not isinstance(rows, list):
            raise ListingStoreError(f"Expected a list of rows, got {type(rows).__name__}")
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as e:
            raise ListingStoreError(f"Malformed listing row: {e}") from e
