"""Breakpoint records as reported by GDB/MI.

Catchpoints live in the breakpoint numbering space and are reported with the
same ``bkpt`` tuple, so this module provides the small reader and the
management commands that catchpoints reuse.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING
from typing import Any

from gdbcapture.errors import InvalidArgumentError
from gdbcapture.protocol.commands import require_positive
from gdbcapture.protocol.commands import require_text

if TYPE_CHECKING:
    from gdbcapture.core.dispatch import CaptureContext
    from gdbcapture.core.dispatch import MiHandle

logger = logging.getLogger(__name__)

DISPOSITION_DELETE = "del"


@dataclass
class BreakpointRecord:
    """The fields of an MI ``bkpt`` tuple that callers rely on."""

    number: int = 0
    type: str | None = None
    disposition: str | None = None
    enabled: bool = False
    hit_count: int = 0
    condition: str | None = None
    what: str | None = None

    @property
    def temporary(self) -> bool:
        return self.disposition == DISPOSITION_DELETE


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_breakpoint(bkpt: dict[str, Any] | None) -> BreakpointRecord | None:
    """Read a ``bkpt`` tuple; None when it has no usable number."""
    if not isinstance(bkpt, dict):
        return None
    number = _to_int(bkpt.get("number"))
    if number <= 0:
        return None
    return BreakpointRecord(
        number=number,
        type=bkpt.get("type"),
        disposition=bkpt.get("disp"),
        enabled=bkpt.get("enabled") == "y",
        hit_count=_to_int(bkpt.get("times")),
        condition=bkpt.get("cond"),
        what=bkpt.get("what"),
    )


def find_breakpoint(context: CaptureContext) -> BreakpointRecord | None:
    """Locate the breakpoint created by a captured command.

    The result record is checked first; console-issued commands usually report
    through a ``=breakpoint-created`` notification instead.
    """
    record = parse_breakpoint(context.result_payload.get("bkpt"))
    if record is not None:
        return record
    for notification in context.notifications:
        if notification.get("message") != "breakpoint-created":
            continue
        record = parse_breakpoint((notification.get("payload") or {}).get("bkpt"))
        if record is not None:
            return record
    logger.debug("No bkpt tuple in response to %r", context.command)
    return None


def delete_breakpoint(handle: MiHandle, number: int) -> bool:
    handle.execute(f"-break-delete {require_positive(number, 'number')}")
    return True


def set_breakpoint_enabled(handle: MiHandle, number: int, enabled: bool) -> bool:
    verb = "enable" if enabled else "disable"
    handle.execute(f"-break-{verb} {require_positive(number, 'number')}")
    return True


def set_breakpoint_condition(handle: MiHandle, number: int, condition: str | None) -> bool:
    """Set (or with an empty/None condition, clear) a breakpoint condition."""
    number = require_positive(number, "number")
    if condition is None or not condition.strip():
        handle.execute(f"-break-condition {number}")
        return True
    if "\n" in condition:
        raise InvalidArgumentError("condition must be a single line", argument="condition")
    handle.execute(f"-break-condition {number} {require_text(condition, 'condition')}")
    return True
