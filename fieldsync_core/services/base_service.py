# =============================================================================
# fieldsync_core/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
from abc import ABC
from typing import Any, Callable, List

from fieldsync_core.errors import FieldSyncError, ValidationError, handle_error
from fieldsync_core.logging import LogContext, get_logger
from fieldsync_core.sync.result import ServiceResult


class BaseService(ABC):
    """
    Abstract base class for all view-model services.

    Provides common functionality:
    - Logging
    - Error handling
    - Result standardization

    Usage:
        class MyService(BaseService):
            def do_something(self) -> ServiceResult:
                return self.safe_execute("Doing something", self._do_something)
    """

    def __init__(self):
        self.logger = get_logger(f"{type(self).__module__}.{type(self).__name__}")

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Loading dashboard"):
                client.call("GET", "/supervisor/dashboard")
        """
        return LogContext(self.logger, operation, expected=(FieldSyncError,))

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """
        Execute a function with error handling and logging.

        Args:
            operation: Description of the operation
            func: Function to execute
            *args, **kwargs: Arguments to pass to func

        Returns:
            ServiceResult with success/failure status
        """
        try:
            with self.log_operation(operation):
                result = func(*args, **kwargs)
            return ServiceResult.ok(result)
        except FieldSyncError as e:
            handle_error(e, show_user_message=False)
            return ServiceResult.from_exception(e)
        except Exception as e:
            self.logger.error(f"{operation} failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e), error_code="EXCEPTION")

    @staticmethod
    def rejected(problems: List[str], prefix: str = "Please complete") -> ServiceResult:
        """Result for a draft that failed local validation."""
        error = ValidationError(f"{prefix}: {', '.join(problems)}", problems=problems)
        return ServiceResult.from_exception(error)
