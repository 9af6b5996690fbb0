"""Catchpoint operations.

Catchpoints are created with console ``[t]catch`` commands and reported back
through the breakpoint grammar, so deletion, enabling and conditions reuse the
breakpoint management commands directly.

The record's ``kind`` and ``event`` come from the request, not from the
response text: GDB's ``bkpt`` tuple for a catchpoint does not carry the event
in a stable form.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gdbcapture.core.breakpoints import delete_breakpoint
from gdbcapture.core.breakpoints import find_breakpoint
from gdbcapture.core.breakpoints import set_breakpoint_condition
from gdbcapture.core.breakpoints import set_breakpoint_enabled
from gdbcapture.core.records import Catchpoint
from gdbcapture.core.records import CatchKind
from gdbcapture.errors import ExtractionError
from gdbcapture.errors import InvalidArgumentError
from gdbcapture.protocol.commands import catch_command

if TYPE_CHECKING:
    from gdbcapture.core.dispatch import CaptureContext
    from gdbcapture.core.dispatch import MiHandle

logger = logging.getLogger(__name__)


def build_catch_command(
    kind: CatchKind | str,
    temporary: bool = False,
    event_filter: str | None = None,
) -> str:
    """Return the console command for a catchpoint request."""
    return catch_command(_coerce_kind(kind).value, temporary=temporary, event_filter=event_filter)


def _coerce_kind(kind: CatchKind | str) -> CatchKind:
    if isinstance(kind, CatchKind):
        return kind
    try:
        return CatchKind(kind)
    except ValueError:
        raise InvalidArgumentError(
            f"Unknown catchpoint kind: {kind!r}",
            argument="kind",
            details={"allowed": [k.value for k in CatchKind]},
        ) from None


def extract_catchpoint(
    context: CaptureContext,
    kind: CatchKind,
    event_filter: str | None = None,
) -> Catchpoint:
    """Turn the breakpoint record in a ``catch`` response into a catchpoint."""
    bkpt = find_breakpoint(context)
    if bkpt is None:
        raise ExtractionError(
            f"No catchpoint reported for {context.command!r}",
            record_kind="Catchpoint",
            details={"command": context.command, "output": context.text.strip()},
        )
    return Catchpoint(
        number=bkpt.number,
        kind=kind,
        enabled=bkpt.enabled,
        condition=bkpt.condition,
        hit_count=bkpt.hit_count,
        event=event_filter,
        temporary=bkpt.temporary,
    )


def set_catchpoint(
    handle: MiHandle,
    kind: CatchKind | str,
    *,
    temporary: bool = False,
    event_filter: str | None = None,
) -> Catchpoint:
    """Create a catchpoint and return its record.

    Args:
        handle: Debugger handle.
        kind: Event to catch.
        temporary: Use ``tcatch`` (deleted after the first hit).
        event_filter: Library regexp, syscall or signal; only for
            load/unload/syscall/signal.

    Raises:
        InvalidArgumentError: unknown kind or a filter on a kind without one.
        ExtractionError: the debugger did not report a breakpoint record.
    """
    catch_kind = _coerce_kind(kind)
    command = build_catch_command(catch_kind, temporary, event_filter)
    context = handle.dispatch(command)
    try:
        catchpoint = extract_catchpoint(context, catch_kind, event_filter)
    finally:
        context.discard()
    logger.debug("Catchpoint %d set for %r", catchpoint.number, command)
    return catchpoint


def catch_exception(handle: MiHandle, is_throw: bool, temporary: bool = False) -> Catchpoint:
    kind = CatchKind.THROW if is_throw else CatchKind.CATCH
    return set_catchpoint(handle, kind, temporary=temporary)


def catch_exec(handle: MiHandle, temporary: bool = False) -> Catchpoint:
    return set_catchpoint(handle, CatchKind.EXEC, temporary=temporary)


def catch_fork(handle: MiHandle, is_vfork: bool = False, temporary: bool = False) -> Catchpoint:
    kind = CatchKind.VFORK if is_vfork else CatchKind.FORK
    return set_catchpoint(handle, kind, temporary=temporary)


def catch_load(handle: MiHandle, regexp: str | None = None, temporary: bool = False) -> Catchpoint:
    return set_catchpoint(handle, CatchKind.LOAD, temporary=temporary, event_filter=regexp)


def catch_unload(handle: MiHandle, regexp: str | None = None, temporary: bool = False) -> Catchpoint:
    return set_catchpoint(handle, CatchKind.UNLOAD, temporary=temporary, event_filter=regexp)


def catch_syscall(
    handle: MiHandle, syscall_name: str | None = None, temporary: bool = False
) -> Catchpoint:
    return set_catchpoint(handle, CatchKind.SYSCALL, temporary=temporary, event_filter=syscall_name)


def catch_signal(
    handle: MiHandle, signal_name: str | None = None, temporary: bool = False
) -> Catchpoint:
    return set_catchpoint(handle, CatchKind.SIGNAL, temporary=temporary, event_filter=signal_name)


def catch_assert(handle: MiHandle, temporary: bool = False) -> Catchpoint:
    return set_catchpoint(handle, CatchKind.ASSERT, temporary=temporary)


def delete_catchpoint(handle: MiHandle, number: int) -> bool:
    return delete_breakpoint(handle, number)


def set_catchpoint_enabled(handle: MiHandle, number: int, enabled: bool) -> bool:
    return set_breakpoint_enabled(handle, number, enabled)


def set_catchpoint_condition(handle: MiHandle, number: int, condition: str | None) -> bool:
    return set_breakpoint_condition(handle, number, condition)
