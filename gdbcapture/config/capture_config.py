"""Centralized configuration for gdbcapture.

Settings for the debugger process, response waiting and capture
serialization live here instead of being passed around as loose keyword
arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any

from gdbcapture.errors import ConfigurationError


def _default_gdb_arguments() -> list[str]:
    return ["--nx", "--quiet", "--interpreter=mi3"]


@dataclass
class GdbProcessConfig:
    """Debugger process configuration."""

    gdb_path: str = "gdb"
    arguments: list[str] = field(default_factory=_default_gdb_arguments)
    program: str | None = None
    additional_output_seconds: float = 0.2

    def command_line(self) -> list[str]:
        """Return the argv used to start the debugger."""
        command = [self.gdb_path, *self.arguments]
        if self.program:
            command.append(self.program)
        return command


@dataclass
class CaptureConfig:
    """Configuration for capture-correlated dispatch.

    Attributes:
        process: How to start the debugger when gdbcapture owns the process.
        response_timeout_seconds: How long to wait for a terminal response.
        poll_interval_seconds: Granularity of the wait loop.
        serialize_dispatch: Wait for an in-flight capture on the same handle
            instead of failing immediately.
        lock_timeout_seconds: Upper bound on that wait.
        max_write_bytes: Largest buffer accepted by ``write_memory``.
    """

    process: GdbProcessConfig = field(default_factory=GdbProcessConfig)
    response_timeout_seconds: float = 10.0
    poll_interval_seconds: float = 0.1
    serialize_dispatch: bool = True
    lock_timeout_seconds: float = 30.0
    max_write_bytes: int = 255

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> CaptureConfig:
        """Create config from a plain mapping (e.g. parsed JSON settings)."""
        process_data = data.get("process", {})
        process = GdbProcessConfig(
            gdb_path=process_data.get("gdbPath", "gdb"),
            arguments=list(process_data.get("arguments", _default_gdb_arguments())),
            program=process_data.get("program"),
            additional_output_seconds=process_data.get("additionalOutputSeconds", 0.2),
        )

        return cls(
            process=process,
            response_timeout_seconds=data.get("responseTimeoutSeconds", 10.0),
            poll_interval_seconds=data.get("pollIntervalSeconds", 0.1),
            serialize_dispatch=data.get("serializeDispatch", True),
            lock_timeout_seconds=data.get("lockTimeoutSeconds", 30.0),
            max_write_bytes=data.get("maxWriteBytes", 255),
        )

    def validate(self) -> None:
        """Validate configuration and raise errors for invalid setups."""
        if not self.process.gdb_path:
            raise ConfigurationError(
                "Debugger path must not be empty",
                config_key="gdb_path",
            )

        if not any(arg.startswith("--interpreter=mi") for arg in self.process.arguments):
            raise ConfigurationError(
                "Debugger must be started with an MI interpreter",
                config_key="arguments",
                details={"arguments": list(self.process.arguments)},
            )

        for key in ("response_timeout_seconds", "poll_interval_seconds"):
            if getattr(self, key) <= 0:
                raise ConfigurationError(
                    f"{key} must be positive",
                    config_key=key,
                    details={key: getattr(self, key)},
                )

        if self.lock_timeout_seconds < 0:
            raise ConfigurationError(
                "lock_timeout_seconds must not be negative",
                config_key="lock_timeout_seconds",
                details={"lock_timeout_seconds": self.lock_timeout_seconds},
            )

        if self.max_write_bytes < 1:
            raise ConfigurationError(
                "max_write_bytes must be at least 1",
                config_key="max_write_bytes",
                details={"max_write_bytes": self.max_write_bytes},
            )


# Default configuration instance
DEFAULT_CONFIG = CaptureConfig()
