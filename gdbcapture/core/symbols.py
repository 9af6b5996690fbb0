"""Symbol, line, function, type and variable queries.

GDB/MI has no machine-readable form for most of these, so each query runs the
console command and hands the captured text to its extractor.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Callable
from typing import TypeVar

from gdbcapture.core import extractors
from gdbcapture.protocol import commands

if TYPE_CHECKING:
    from gdbcapture.core.dispatch import MiHandle
    from gdbcapture.core.records import Function
    from gdbcapture.core.records import LineInfo
    from gdbcapture.core.records import RecordChain
    from gdbcapture.core.records import Symbol
    from gdbcapture.core.records import TypeInfo
    from gdbcapture.core.records import Variable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_query(handle: MiHandle, command: str, extract: Callable[[str], T]) -> T:
    """Dispatch ``command`` and extract records from its captured text.

    The captured buffer is dropped once the extractor has returned or failed.
    """
    context = handle.dispatch(command)
    try:
        return extract(context.text)
    finally:
        context.discard()


def info_address(handle: MiHandle, symbol: str) -> Symbol:
    """Resolve a symbol's address (``info address <symbol>``)."""
    command = commands.info_address_command(symbol)
    name = symbol.strip()
    return run_query(handle, command, lambda text: extractors.extract_symbol_address(name, text))


def symbol_at_address(handle: MiHandle, address: int) -> Symbol:
    """Find the symbol containing ``address`` (``info symbol <address>``)."""
    command = commands.info_symbol_command(address)
    return run_query(handle, command, lambda text: extractors.extract_symbol_at(address, text))


def info_line(handle: MiHandle, file: str, line: int) -> LineInfo:
    """Get the address range of ``file:line`` (``info line <file>:<line>``)."""
    command = commands.info_line_command(file, line)
    file = file.strip()
    return run_query(handle, command, lambda text: extractors.extract_line_info(file, line, text))


def info_line_at_address(handle: MiHandle, address: int) -> LineInfo:
    command = commands.info_line_address_command(address)
    return run_query(handle, command, lambda text: extractors.extract_line_info_at(address, text))


def list_functions(handle: MiHandle, regexp: str | None = None) -> RecordChain[Function]:
    return run_query(handle, commands.info_functions_command(regexp), extractors.extract_functions)


def list_variables(handle: MiHandle, regexp: str | None = None) -> RecordChain[Variable]:
    return run_query(handle, commands.info_variables_command(regexp), extractors.extract_variables)


def list_types(handle: MiHandle, regexp: str | None = None) -> RecordChain[TypeInfo]:
    return run_query(handle, commands.info_types_command(regexp), extractors.extract_types)


def ptype(handle: MiHandle, type_name: str) -> TypeInfo:
    """Describe a type (``ptype <type_name>``); the full output is kept."""
    command = commands.ptype_command(type_name)
    name = type_name.strip()
    return run_query(handle, command, lambda text: extractors.extract_type_info(name, text))


def whatis(handle: MiHandle, expression: str) -> TypeInfo:
    command = commands.whatis_command(expression)
    name = expression.strip()
    return run_query(handle, command, lambda text: extractors.extract_type_info(name, text))
