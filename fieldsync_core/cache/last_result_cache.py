# fieldsync_core/cache/last_result_cache.py
"""
Last-result cache for fire-and-forget submissions.
Keeps one JSON copy per logical key so a result screen can render the most
recent submission without fetching it again.
"""
import json
from typing import Any, Optional

from fieldsync_core.logging import get_logger
from fieldsync_core.storage import KeyValueStore

logger = get_logger(__name__)

LAST_PREDICTION_KEY = "lastPredictionResponse"
LAST_POST_DELIVERY_KEY = "lastPostDeliveryRecord"


class LastResultCache:
    """Persists the latest result of each submission flow."""

    # Logical keys this cache may hold
    CACHEABLE_KEYS = [
        LAST_PREDICTION_KEY,
        LAST_POST_DELIVERY_KEY,
    ]

    def __init__(self, store: KeyValueStore):
        self._store = store

    def _check_key(self, key: str) -> None:
        if key not in self.CACHEABLE_KEYS:
            raise ValueError(f"Unknown cache key: {key}")

    def save(self, key: str, value: Any) -> None:
        """
        Serialize value and overwrite the entry for key.

        Args:
            key: One of CACHEABLE_KEYS
            value: JSON-serializable value
        """
        self._check_key(key)
        self._store.set(key, json.dumps(value))
        logger.debug(f"Cached {key}")

    def load(self, key: str) -> Optional[Any]:
        """
        Load the cached value for key.

        Returns:
            The deserialized value, or None if nothing was saved or the stored
            entry cannot be parsed
        """
        self._check_key(key)
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Discarding unreadable cache entry for {key}")
            return None

    def has(self, key: str) -> bool:
        return self.load(key) is not None

    def clear(self, key: str) -> None:
        """Forget the cached value for key."""
        self._check_key(key)
        self._store.remove(key)
