# =============================================================================
# fieldsync_core/storage/__init__.py
# Durable local storage for session and cache entries
# =============================================================================

from .local_store import KeyValueStore, get_key_value_store

__all__ = ["KeyValueStore", "get_key_value_store"]
