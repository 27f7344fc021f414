# =============================================================================
# fieldsync_core/sync/__init__.py
# Remote collection loading and optimistic mutation
# =============================================================================

from .result import ServiceResult
from .pagination import PaginatedCollectionLoader, LoadStatus
from .optimistic import LocalCollection, OptimisticMutator

__all__ = [
    "ServiceResult",
    "PaginatedCollectionLoader",
    "LoadStatus",
    "LocalCollection",
    "OptimisticMutator",
]
