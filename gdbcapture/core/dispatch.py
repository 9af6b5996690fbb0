"""Capture-correlated dispatch.

``MiHandle.dispatch`` is the single synchronization point between sending a
console command and harvesting the free text it prints:

1. A fresh ``CaptureContext`` is created for the command and becomes the
   handle's active capture.
2. The command is sent as ``<token>-interpreter-exec console "<command>"``.
3. Console stream records are appended to the active context until the result
   record carrying the same token arrives.
4. Capture is switched off on every path; the context is handed to the caller
   only on success.

At most one capture may be in flight per handle. The handle lock is held for
the whole send/wait sequence so concurrent callers are serialized; a call that
cannot get the lock in time, or that finds a capture still marked active,
fails with ``CaptureOverlapError`` instead of merging output.

A command that times out leaves its token behind as abandoned. Its console
output may still arrive during a later capture; when its result record shows
up, everything captured so far is dropped, since a command's console output
always precedes its own result record.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
import itertools
import logging
import threading
from typing import TYPE_CHECKING
from typing import Any

from gdbcapture.config import get_config
from gdbcapture.errors import CaptureOverlapError
from gdbcapture.errors import CaptureTimeoutError
from gdbcapture.errors import CommandError
from gdbcapture.errors import InvalidArgumentError
from gdbcapture.errors import TransportError
from gdbcapture.protocol.commands import interpreter_exec

if TYPE_CHECKING:
    import types

    from gdbcapture.config import CaptureConfig
    from gdbcapture.protocol.transport import MiRecord
    from gdbcapture.protocol.transport import MiTransport

logger = logging.getLogger(__name__)


@dataclass
class CaptureContext:
    """Per-request capture state.

    Attributes:
        command: Console command that was sent.
        token: MI token used to correlate the terminal response.
        fragments: Console text fragments in arrival order.
        notifications: ``=...`` async records seen while waiting.
        result: The terminal result record once it has arrived.
    """

    command: str
    token: int
    fragments: list[str] = field(default_factory=list)
    notifications: list[MiRecord] = field(default_factory=list)
    result: MiRecord | None = None

    @property
    def text(self) -> str:
        return "".join(self.fragments)

    @property
    def result_payload(self) -> dict[str, Any]:
        if self.result is None:
            return {}
        return self.result.get("payload") or {}

    def discard(self) -> None:
        self.fragments.clear()
        self.notifications.clear()


class MiHandle:
    """A debugger connection able to run console commands and capture output.

    Args:
        transport: Line transport to the debugger.
        config: Dispatch settings; the process-wide config when omitted.
    """

    def __init__(self, transport: MiTransport, config: CaptureConfig | None = None) -> None:
        self._transport = transport
        self._config = config or get_config()
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._capture: CaptureContext | None = None
        self._abandoned: set[int] = set()

    @property
    def transport(self) -> MiTransport:
        return self._transport

    @property
    def config(self) -> CaptureConfig:
        return self._config

    @property
    def capturing(self) -> bool:
        """True while a console capture is in flight."""
        return self._capture is not None

    def dispatch(self, command: str) -> CaptureContext:
        """Run a console command and return its captured output.

        Raises:
            InvalidArgumentError: ``command`` is empty.
            CaptureOverlapError: another capture is in flight on this handle.
            CaptureTimeoutError: no terminal response arrived in time.
            CommandError: the debugger answered ``^error``.
            TransportError: the transport failed.
        """
        if not command or not command.strip():
            raise InvalidArgumentError("command must be a non-empty string", argument="command")

        line = interpreter_exec(command)
        self._acquire(command)
        try:
            if self._capture is not None:
                active = self._capture.command
                logger.warning("Capture for %r still active; refusing %r", active, command)
                raise CaptureOverlapError(
                    "A console capture is already in flight on this handle",
                    command=command,
                    active_command=active,
                )
            context = CaptureContext(command=command, token=next(self._tokens))
            self._capture = context
            try:
                context.result = self._roundtrip(context.token, line, command)
            finally:
                self._capture = None
        finally:
            self._lock.release()

        if context.result is None:
            context.discard()
            raise CaptureTimeoutError(
                f"No terminal response for {command!r}",
                timeout_seconds=self._config.response_timeout_seconds,
                command=command,
            )
        self._check_result(context.result, command)
        logger.debug("Captured %d fragment(s) for %r", len(context.fragments), command)
        return context

    def execute(self, mi_command: str) -> MiRecord:
        """Send a raw MI command without console capture.

        Returns:
            The ``^done`` result record.
        """
        if not mi_command or not mi_command.strip():
            raise InvalidArgumentError("mi_command must be a non-empty string", argument="mi_command")

        self._acquire(mi_command)
        try:
            token = next(self._tokens)
            result = self._roundtrip(token, mi_command, mi_command)
        finally:
            self._lock.release()

        if result is None:
            raise CaptureTimeoutError(
                f"No terminal response for {mi_command!r}",
                timeout_seconds=self._config.response_timeout_seconds,
                command=mi_command,
            )
        self._check_result(result, mi_command)
        return result

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> MiHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.close()

    def _acquire(self, command: str) -> None:
        if self._config.serialize_dispatch:
            acquired = self._lock.acquire(timeout=self._config.lock_timeout_seconds)
        else:
            acquired = self._lock.acquire(blocking=False)
        if not acquired:
            active = self._capture.command if self._capture is not None else None
            logger.warning("Handle busy; could not dispatch %r", command)
            raise CaptureOverlapError(
                "Another command is in flight on this handle",
                command=command,
                active_command=active,
            )

    def _roundtrip(self, token: int, line: str, command: str) -> MiRecord | None:
        try:
            self._transport.send_line(f"{token}{line}")
            result = self._transport.await_result(
                token,
                self._on_record,
                self._config.response_timeout_seconds,
                self._config.poll_interval_seconds,
            )
        except TransportError:
            raise
        except (OSError, EOFError) as e:
            raise TransportError(
                f"Transport failed while running {command!r}",
                transport=self._transport.name,
                cause=e,
            ) from e
        if result is None:
            self._abandoned.add(token)
        return result

    def _on_record(self, record: MiRecord) -> None:
        capture = self._capture
        kind = record.get("type")
        if kind == "console":
            payload = record.get("payload")
            if capture is None:
                logger.debug("Dropping console text outside capture: %r", payload)
            elif payload:
                capture.fragments.append(payload)
        elif kind == "notify" and capture is not None:
            capture.notifications.append(record)
        elif kind == "result":
            self._drain_abandoned(record, capture)
        else:
            logger.debug("Unhandled record: %r", record)

    def _drain_abandoned(self, record: MiRecord, capture: CaptureContext | None) -> None:
        """Handle a result record that answers some earlier command."""
        token = record.get("token")
        if token not in self._abandoned:
            logger.debug("Ignoring stray result record: %r", record)
            return
        self._abandoned.discard(token)
        if capture is not None:
            logger.warning(
                "Late result for abandoned token %s; dropping %d fragment(s) captured for %r",
                token,
                len(capture.fragments),
                capture.command,
            )
            capture.discard()
        else:
            logger.debug("Late result for abandoned token %s", token)

    @staticmethod
    def _check_result(result: MiRecord, command: str) -> None:
        if result.get("message") == "error":
            payload = result.get("payload") or {}
            gdb_message = payload.get("msg") if isinstance(payload, dict) else None
            raise CommandError(
                f"Debugger rejected {command!r}: {gdb_message or 'unknown error'}",
                command=command,
                gdb_message=gdb_message,
            )
