"""Source listing operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gdbcapture.core.extractors import extract_source_lines
from gdbcapture.core.symbols import run_query
from gdbcapture.errors import ExtractionError
from gdbcapture.protocol import commands

if TYPE_CHECKING:
    from gdbcapture.core.dispatch import MiHandle
    from gdbcapture.core.records import RecordChain
    from gdbcapture.core.records import SourceLine

logger = logging.getLogger(__name__)


def list_source(
    handle: MiHandle,
    file: str | None = None,
    start: int = 0,
    count: int = 0,
) -> RecordChain[SourceLine]:
    """List source lines.

    Args:
        handle: Debugger handle.
        file: Source file; the current location when omitted.
        start: First line (0 for the start of ``file``).
        count: Number of lines (0 for GDB's default).

    Returns:
        Lines in listing order; an empty chain when GDB printed none.
    """
    command = commands.list_command(file.strip() if file else None, start, count)
    return run_query(handle, command, extract_source_lines)


def list_function_source(handle: MiHandle, function: str) -> RecordChain[SourceLine]:
    return run_query(handle, commands.list_location_command(function), extract_source_lines)


def list_address_source(handle: MiHandle, address: int) -> RecordChain[SourceLine]:
    return run_query(handle, commands.list_address_command(address), extract_source_lines)


def current_source_line(handle: MiHandle) -> RecordChain[SourceLine]:
    """List the line of the selected frame and mark it current.

    The frame is resolved independently with ``-stack-info-frame`` before the
    line is listed.
    """
    result = handle.execute("-stack-info-frame")
    frame = (result.get("payload") or {}).get("frame") or {}
    file = frame.get("fullname") or frame.get("file")
    try:
        line = int(frame.get("line", 0))
    except (TypeError, ValueError):
        line = 0
    if not file or line < 1:
        raise ExtractionError(
            "Selected frame has no source location",
            record_kind="SourceLine",
            details={"frame": frame},
        )

    chain = list_source(handle, file, line, 1)
    for source_line in chain:
        if source_line.line_number == line:
            source_line.is_current = True
    if not chain:
        logger.debug("No source printed for %s:%d", file, line)
    return chain
