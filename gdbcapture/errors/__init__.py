"""Error handling for gdbcapture."""

from gdbcapture.errors.capture_errors import CaptureOverlapError
from gdbcapture.errors.capture_errors import CaptureTimeoutError
from gdbcapture.errors.capture_errors import CommandError
from gdbcapture.errors.capture_errors import ConfigurationError
from gdbcapture.errors.capture_errors import ExtractionError
from gdbcapture.errors.capture_errors import GdbCaptureError
from gdbcapture.errors.capture_errors import InvalidArgumentError
from gdbcapture.errors.capture_errors import TransportError
from gdbcapture.errors.error_patterns import ErrorContext
from gdbcapture.errors.error_patterns import handle_transport_errors

__all__ = [
    "CaptureOverlapError",
    "CaptureTimeoutError",
    "CommandError",
    "ConfigurationError",
    "ErrorContext",
    "ExtractionError",
    "GdbCaptureError",
    "InvalidArgumentError",
    "TransportError",
    "handle_transport_errors",
]
