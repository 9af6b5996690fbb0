"""Memory write operations issued through console ``set`` commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gdbcapture.errors import InvalidArgumentError
from gdbcapture.protocol import commands

if TYPE_CHECKING:
    from gdbcapture.core.dispatch import MiHandle

logger = logging.getLogger(__name__)


def write_memory(handle: MiHandle, address: str, data: bytes) -> bool:
    """Write raw bytes at an address expression.

    Returns:
        True once the debugger acknowledged the write.

    Raises:
        InvalidArgumentError: empty data or more than ``max_write_bytes``.
    """
    limit = handle.config.max_write_bytes
    if not data or len(data) > limit:
        raise InvalidArgumentError(
            f"data must hold between 1 and {limit} bytes",
            argument="data",
            details={"size": len(data) if data else 0, "limit": limit},
        )
    context = handle.dispatch(commands.write_memory_command(address, bytes(data)))
    context.discard()
    logger.debug("Wrote %d byte(s) at %s", len(data), address)
    return True


def write_value(handle: MiHandle, address: str, value: str) -> bool:
    """Store ``value`` as a ``long`` at an address expression."""
    context = handle.dispatch(commands.write_value_command(address, value))
    context.discard()
    return True
