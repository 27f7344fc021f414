# =============================================================================
# fieldsync_core/sync/result.py
# Standard result container for sync operations
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Any

from fieldsync_core.errors import FieldSyncError


@dataclass
class ServiceResult:
    """
    Standard result container for service operations.

    Provides consistent structure for all service method returns.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Dict[str, Any] = None
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata,
        )

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, FieldSyncError):
            return cls(
                success=False,
                error=e.message,
                error_code=e.code,
                metadata=e.details,
            )
        return cls(
            success=False,
            error=str(e),
            error_code="EXCEPTION",
        )
