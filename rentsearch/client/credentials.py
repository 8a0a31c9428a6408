"""
Language-model credential lookup with an optional short-lived cache.
"""
import logging
import threading
import time
from typing import Callable, Optional

from ..config import Config, get_config
from ..errors import ListingStoreError
from .listing_store import ListingStore


logger = logging.getLogger(__name__)

SETTINGS_KEY_COLUMN = "openai_api_key"


class CredentialProvider:
    """
    Resolves the OpenAI key: environment first, then the datastore settings row.
    A missing or unreadable key is reported as None, never raised.
    """

    def __init__(
        self,
        store: Optional[ListingStore] = None,
        config: Optional[Config] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.config = config or get_config()
        self.ttl = self.config.search.credential_cache_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._cached: Optional[str] = None
        self._cached_at: Optional[float] = None

    def get_api_key(self) -> Optional[str]:
        if self.ttl <= 0:
            return self._lookup()

        with self._lock:
            now = self._clock()
            if self._cached_at is not None and now - self._cached_at < self.ttl:
                return self._cached
            self._cached = self._lookup()
            self._cached_at = now
            return self._cached

    def _lookup(self) -> Optional[str]:
        if self.config.openai.api_key:
            return self.config.openai.api_key

        if self.store is None:
            return None

        try:
            row = self.store.fetch_settings_row()
        except ListingStoreError as e:
            logger.warning(f"Could not read AI settings: {e}")
            return None

        key = (row or {}).get(SETTINGS_KEY_COLUMN)
        if not key:
            logger.info("No OpenAI API key found in settings")
            return None
        return key
