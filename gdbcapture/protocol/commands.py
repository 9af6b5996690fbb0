"""Literal console command builders.

Every public operation sends exactly one of the command strings built here.
Builders validate their arguments and raise ``InvalidArgumentError`` before
anything reaches the debugger.
"""

from __future__ import annotations

from gdbcapture.core.lexical import format_address
from gdbcapture.errors import InvalidArgumentError

CATCH_EVENTS = (
    "throw",
    "catch",
    "exec",
    "fork",
    "vfork",
    "load",
    "unload",
    "syscall",
    "signal",
    "assert",
)

# Events whose command accepts a trailing regexp / syscall / signal argument.
FILTERABLE_CATCH_EVENTS = frozenset({"load", "unload", "syscall", "signal"})


def require_text(value: str | None, argument: str) -> str:
    """Return ``value`` stripped, or raise if it is missing or blank."""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{argument} must be a non-empty string", argument=argument)
    return str(value).strip()


def require_positive(value: int, argument: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidArgumentError(
            f"{argument} must be a positive integer",
            argument=argument,
            details={argument: value},
        )
    return value


def mi_quote(text: str) -> str:
    """Quote ``text`` as an MI c-string."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def interpreter_exec(command: str) -> str:
    """Wrap a console command as an MI ``-interpreter-exec`` request."""
    return f"-interpreter-exec console {mi_quote(require_text(command, 'command'))}"


def catch_command(event: str, *, temporary: bool = False, event_filter: str | None = None) -> str:
    """Build ``[t]catch <event>[ <filter>]``."""
    if event not in CATCH_EVENTS:
        raise InvalidArgumentError(
            f"Unknown catchpoint event: {event!r}",
            argument="event",
            details={"allowed": list(CATCH_EVENTS)},
        )
    prefix = "t" if temporary else ""
    command = f"{prefix}catch {event}"
    if event_filter is not None:
        if event not in FILTERABLE_CATCH_EVENTS:
            raise InvalidArgumentError(
                f"catch {event} does not take a filter",
                argument="event_filter",
                details={"event": event, "event_filter": event_filter},
            )
        command += f" {require_text(event_filter, 'event_filter')}"
    return command


def list_command(file: str | None = None, start: int = 0, count: int = 0) -> str:
    """Build one of the ``list`` forms used by source listing."""
    if file and start > 0:
        if count > 0:
            return f"list {file}:{start},{start + count - 1}"
        return f"list {file}:{start}"
    if file:
        return f"list {file}:1"
    if count > 0:
        return f"list *$pc,{count}"
    return "list"


def list_location_command(location: str) -> str:
    return f"list {require_text(location, 'location')}"


def list_address_command(address: int) -> str:
    return f"list *{format_address(require_positive(address, 'address'))}"


def info_address_command(symbol: str) -> str:
    return f"info address {require_text(symbol, 'symbol')}"


def info_symbol_command(address: int) -> str:
    return f"info symbol {format_address(require_positive(address, 'address'))}"


def info_line_command(file: str, line: int) -> str:
    return f"info line {require_text(file, 'file')}:{require_positive(line, 'line')}"


def info_line_address_command(address: int) -> str:
    return f"info line *{format_address(require_positive(address, 'address'))}"


def _with_regexp(command: str, regexp: str | None) -> str:
    if regexp is None:
        return command
    return f"{command} {require_text(regexp, 'regexp')}"


def info_functions_command(regexp: str | None = None) -> str:
    return _with_regexp("info functions", regexp)


def info_variables_command(regexp: str | None = None) -> str:
    return _with_regexp("info variables", regexp)


def info_types_command(regexp: str | None = None) -> str:
    return _with_regexp("info types", regexp)


def ptype_command(type_name: str) -> str:
    return f"ptype {require_text(type_name, 'type_name')}"


def whatis_command(expression: str) -> str:
    return f"whatis {require_text(expression, 'expression')}"


def write_memory_command(address: str, data: bytes) -> str:
    """Build ``set {unsigned char[N]}(<addr>) = {0x.., ...}``."""
    address = require_text(address, "address")
    values = ", ".join(f"0x{byte:02x}" for byte in data)
    return f"set {{unsigned char[{len(data)}]}}({address}) = {{{values}}}"


def write_value_command(address: str, value: str) -> str:
    address = require_text(address, "address")
    return f"set {{long}}({address}) = {require_text(value, 'value')}"
