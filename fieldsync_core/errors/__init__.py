# =============================================================================
# fieldsync_core/errors/__init__.py
# Centralized Error Handling for FieldSync
# =============================================================================

from .exceptions import (
    FieldSyncError,
    ClientError,
    AuthExpiredError,
    ValidationError,
    ServerError,
    StorageError,
    ConfigurationError,
)

from .handlers import handle_error

__all__ = [
    # Exceptions
    "FieldSyncError",
    "ClientError",
    "AuthExpiredError",
    "ValidationError",
    "ServerError",
    "StorageError",
    "ConfigurationError",
    # Handlers
    "handle_error",
]
