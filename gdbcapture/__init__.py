"""gdbcapture - capture GDB console output and extract typed records."""

from __future__ import annotations

from gdbcapture.config import CaptureConfig
from gdbcapture.core import MiHandle
from gdbcapture.errors import GdbCaptureError
from gdbcapture.protocol import GdbProcessTransport

__all__ = ["CaptureConfig", "GdbCaptureError", "MiHandle", "__version__", "open_handle"]
__version__ = "0.1.0"


def open_handle(config: CaptureConfig | None = None) -> MiHandle:
    """Start GDB and return a handle bound to it.

    Args:
        config: Capture settings; the global configuration when omitted.
    """
    transport = GdbProcessTransport(config.process if config is not None else None)
    return MiHandle(transport, config)
