"""Standardized error handling patterns for gdbcapture.

This module provides a decorator for the transport layer and a context manager
for the extraction layer so both report failures through the package's own
exception hierarchy.
"""

from __future__ import annotations

from functools import wraps
import logging
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    from collections.abc import Callable
    import types

from pygdbmi.constants import GdbTimeoutError

from gdbcapture.errors.capture_errors import CaptureTimeoutError
from gdbcapture.errors.capture_errors import ExtractionError
from gdbcapture.errors.capture_errors import GdbCaptureError
from gdbcapture.errors.capture_errors import TransportError

logger = logging.getLogger(__name__)

# Exception types that indicate the debugger process or its pipes went away.
_TRANSPORT_ERRORS = (ConnectionError, BrokenPipeError, EOFError, OSError, ValueError)
_TIMEOUT_ERRORS = (TimeoutError, GdbTimeoutError)


def _classify_transport_error(
    e: Exception, *, transport: str, operation: str
) -> GdbCaptureError:
    """Classify a generic exception into the appropriate ``GdbCaptureError`` subtype."""
    error_msg = f"Error in transport operation {operation}: {e!s}"

    if isinstance(e, _TIMEOUT_ERRORS):
        return CaptureTimeoutError(error_msg, cause=e, details={"operation": operation})
    if isinstance(e, _TRANSPORT_ERRORS):
        return TransportError(
            error_msg, transport=transport, cause=e, details={"operation": operation}
        )
    return GdbCaptureError(
        error_msg,
        error_code="TransportError",
        cause=e,
        details={"operation": operation, "transport": transport},
    )


def handle_transport_errors(
    transport: str,
    operation: str | None = None,
    *,
    log_level: int = logging.ERROR,
) -> Callable:
    """Decorator for transport-level error handling.

    Exceptions that are already ``GdbCaptureError`` instances pass through
    untouched; anything else is logged and re-raised wrapped in
    ``TransportError`` (or ``CaptureTimeoutError`` for timeouts).

    Args:
        transport: Name of the transport (e.g., "gdb-process")
        operation: Name of the transport operation being performed
        log_level: Logging level for wrapped exceptions

    Returns:
        Decorated function
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except GdbCaptureError:
                raise
            except Exception as e:
                wrapped_error = _classify_transport_error(
                    e, transport=transport, operation=operation or func.__name__
                )
                logger.log(log_level, str(wrapped_error), exc_info=True)
                raise wrapped_error from e

        return wrapper

    return decorator


class ErrorContext:
    """Context manager for standardized error handling with context."""

    def __init__(
        self,
        operation: str,
        error_type: type[GdbCaptureError] = ExtractionError,
        **context_kwargs: Any,
    ):
        self.operation = operation
        self.error_type = error_type
        self.context = context_kwargs

    def __enter__(self) -> None:
        return None

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> bool:
        if exc_val is not None:
            if isinstance(exc_val, GdbCaptureError):
                logger.debug("gdbcapture error in %s: %s", self.operation, exc_val)
            elif isinstance(exc_val, Exception):
                wrapped_error = self.error_type(
                    f"Error in {self.operation}: {exc_val!s}",
                    cause=exc_val,
                    details={"operation": self.operation, **self.context},
                )
                logger.exception("Wrapped error in %s: %s", self.operation, wrapped_error)
                raise wrapped_error from exc_val
        return False
