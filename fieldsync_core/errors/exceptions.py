# =============================================================================
# fieldsync_core/errors/exceptions.py
# Exception Hierarchy for FieldSync
# =============================================================================

from typing import Optional, Dict, Any


class FieldSyncError(Exception):
    """
    Base exception for all FieldSync errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "API_400")
        details: Additional context as a dictionary
        recoverable: Whether the caller can retry or continue
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "FS_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# REMOTE CLIENT EXCEPTIONS
# =============================================================================

class ClientError(FieldSyncError):
    """Raised when a remote call does not produce a successful response"""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status is not None:
            details["status"] = status
        if method:
            details["method"] = method
        if path:
            details["path"] = path

        kwargs.setdefault("code", "API_000")
        super().__init__(message=message, details=details, **kwargs)
        self.status = status


class AuthExpiredError(ClientError):
    """Raised on a 401 from an authenticated call; the session is gone"""

    def __init__(self, message: str = "Session expired. Please sign in again.", token: Optional[str] = None, **kwargs):
        kwargs.setdefault("status", 401)
        super().__init__(message=message, code="AUTH_001", recoverable=False, **kwargs)
        # Token the failed request was sent with; not part of details
        self.token = token


class ValidationError(ClientError):
    """Raised on a 4xx response or a draft rejected before sending"""

    def __init__(self, message: str, problems: Optional[list] = None, **kwargs):
        details = kwargs.pop("details", {})
        if problems:
            details["problems"] = list(problems)
        super().__init__(message=message, code="API_400", details=details, **kwargs)
        self.problems = list(problems or [])


class ServerError(ClientError):
    """Raised on a 5xx response or a transport failure (including timeouts)"""

    def __init__(self, message: str, aborted: bool = False, **kwargs):
        details = kwargs.pop("details", {})
        if aborted:
            details["aborted"] = True
        super().__init__(message=message, code="API_500", details=details, **kwargs)
        self.aborted = aborted


# =============================================================================
# LOCAL STORAGE EXCEPTIONS
# =============================================================================

class StorageError(FieldSyncError):
    """Raised when the local key-value store cannot be read or written"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key
        super().__init__(message=message, code="STORE_001", details=details, **kwargs)


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(FieldSyncError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
