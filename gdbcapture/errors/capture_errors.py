"""Centralized error types for gdbcapture.

This module provides a hierarchy of exceptions for the failures that can occur
while sending a console command to GDB, capturing its output and turning that
output into records.
"""

from __future__ import annotations

from typing import Any


class GdbCaptureError(Exception):
    """Base exception for all gdbcapture errors.

    All package-specific exceptions inherit from this class so callers can
    catch a single type and still get structured details.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for reporting."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause!s})"
        return self.message


class ConfigurationError(GdbCaptureError):
    """Raised when there's a configuration problem."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, error_code="ConfigurationError", details=details, **kwargs)
        self.config_key = config_key


class InvalidArgumentError(GdbCaptureError):
    """Raised before anything is sent when a required argument is unusable."""

    def __init__(
        self,
        message: str,
        *,
        argument: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if argument:
            details["argument"] = argument
        super().__init__(message, error_code="InvalidArgumentError", details=details, **kwargs)
        self.argument = argument


class TransportError(GdbCaptureError):
    """Raised when the MI line transport fails."""

    def __init__(
        self,
        message: str,
        *,
        transport: str | None = None,
        endpoint: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if transport:
            details["transport"] = transport
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(message, error_code="TransportError", details=details, **kwargs)
        self.transport = transport
        self.endpoint = endpoint


class CaptureTimeoutError(GdbCaptureError):
    """Raised when a command's terminal response never arrives."""

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: float | None = None,
        command: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if timeout_seconds is not None:
            details["timeout_seconds"] = timeout_seconds
        if command:
            details["command"] = command
        super().__init__(message, error_code="TimeoutError", details=details, **kwargs)
        self.timeout_seconds = timeout_seconds
        self.command = command


class CaptureOverlapError(GdbCaptureError):
    """Raised when a second capture is attempted while one is in flight."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        active_command: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if command:
            details["command"] = command
        if active_command:
            details["active_command"] = active_command
        super().__init__(message, error_code="CaptureOverlapError", details=details, **kwargs)
        self.command = command
        self.active_command = active_command


class CommandError(GdbCaptureError):
    """Raised when GDB answers a command with an ``^error`` record."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        gdb_message: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if command:
            details["command"] = command
        if gdb_message:
            details["gdb_message"] = gdb_message
        super().__init__(message, error_code="CommandError", details=details, **kwargs)
        self.command = command
        self.gdb_message = gdb_message


class ExtractionError(GdbCaptureError):
    """Raised when captured text lacks a record's mandatory fields."""

    def __init__(
        self,
        message: str,
        *,
        record_kind: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if record_kind:
            details["record_kind"] = record_kind
        super().__init__(message, error_code="ExtractionError", details=details, **kwargs)
        self.record_kind = record_kind
