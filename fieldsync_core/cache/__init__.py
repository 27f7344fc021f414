# fieldsync_core/cache/__init__.py
"""
Cache module for persisting the last result of each submission flow.
"""
from .last_result_cache import (
    LastResultCache,
    LAST_PREDICTION_KEY,
    LAST_POST_DELIVERY_KEY,
)

__all__ = [
    "LastResultCache",
    "LAST_PREDICTION_KEY",
    "LAST_POST_DELIVERY_KEY",
]
