"""Base class for MI line transports."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
import logging
import time
from typing import Any
from typing import Callable

logger = logging.getLogger(__name__)

# A parsed MI output record, in the shape produced by
# ``pygdbmi.gdbmiparser.parse_response``: type, message, payload, token.
MiRecord = dict[str, Any]
RecordListener = Callable[[MiRecord], None]


def is_terminal(record: MiRecord, token: int | None) -> bool:
    """True if ``record`` is the result record answering ``token``."""
    if record.get("type") != "result":
        return False
    return token is None or record.get("token") == token


class MiTransport(ABC):
    """Line-oriented GDB/MI transport.

    Implementations only move lines; correlation and capture are the handle's
    job.  ``await_result`` is shared by all transports and is the single
    blocking point between sending a command and harvesting its output.
    """

    name = "mi"

    @abstractmethod
    def send_line(self, line: str) -> None:
        """Write one MI command line to the debugger."""

    @abstractmethod
    def read_records(self, timeout_sec: float) -> list[MiRecord]:
        """Return the records that arrived within ``timeout_sec``; may be empty."""

    def close(self) -> None:
        """Release the transport. Subclasses owning a process override this."""

    def await_result(
        self,
        token: int | None,
        listener: RecordListener,
        timeout_sec: float,
        poll_interval_sec: float = 0.1,
    ) -> MiRecord | None:
        """Block until the result record for ``token`` arrives.

        Every other record is handed to ``listener`` in arrival order, including
        result records carrying another token and records that arrive in the
        same batch after the terminal one.

        Returns:
            The terminal result record, or None when ``timeout_sec`` elapses.
        """
        deadline = time.monotonic() + timeout_sec
        terminal: MiRecord | None = None
        while terminal is None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning("No terminal response for token %s after %.2fs", token, timeout_sec)
                return None
            for record in self.read_records(min(poll_interval_sec, remaining)):
                if terminal is None and is_terminal(record, token):
                    terminal = record
                    continue
                listener(record)
        return terminal
