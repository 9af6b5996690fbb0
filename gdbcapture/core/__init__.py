"""
gdbcapture.core - Capture-correlated dispatch and record extraction.

This module provides the handle that runs console commands, the record model
and the operations that turn captured console text into records.
"""

from gdbcapture.core.catchpoints import build_catch_command
from gdbcapture.core.catchpoints import catch_assert
from gdbcapture.core.catchpoints import catch_exception
from gdbcapture.core.catchpoints import catch_exec
from gdbcapture.core.catchpoints import catch_fork
from gdbcapture.core.catchpoints import catch_load
from gdbcapture.core.catchpoints import catch_signal
from gdbcapture.core.catchpoints import catch_syscall
from gdbcapture.core.catchpoints import catch_unload
from gdbcapture.core.catchpoints import delete_catchpoint
from gdbcapture.core.catchpoints import set_catchpoint
from gdbcapture.core.catchpoints import set_catchpoint_condition
from gdbcapture.core.catchpoints import set_catchpoint_enabled
from gdbcapture.core.dispatch import CaptureContext
from gdbcapture.core.dispatch import MiHandle
from gdbcapture.core.memory import write_memory
from gdbcapture.core.memory import write_value
from gdbcapture.core.records import Catchpoint
from gdbcapture.core.records import CatchKind
from gdbcapture.core.records import Function
from gdbcapture.core.records import LineInfo
from gdbcapture.core.records import RecordChain
from gdbcapture.core.records import SourceLine
from gdbcapture.core.records import Symbol
from gdbcapture.core.records import TypeInfo
from gdbcapture.core.records import Variable
from gdbcapture.core.source import current_source_line
from gdbcapture.core.source import list_address_source
from gdbcapture.core.source import list_function_source
from gdbcapture.core.source import list_source
from gdbcapture.core.symbols import info_address
from gdbcapture.core.symbols import info_line
from gdbcapture.core.symbols import info_line_at_address
from gdbcapture.core.symbols import list_functions
from gdbcapture.core.symbols import list_types
from gdbcapture.core.symbols import list_variables
from gdbcapture.core.symbols import ptype
from gdbcapture.core.symbols import symbol_at_address
from gdbcapture.core.symbols import whatis

__all__ = [
    # Dispatch
    "CaptureContext",
    "MiHandle",
    # Records
    "CatchKind",
    "Catchpoint",
    "Function",
    "LineInfo",
    "RecordChain",
    "SourceLine",
    "Symbol",
    "TypeInfo",
    "Variable",
    # Catchpoints
    "build_catch_command",
    "catch_assert",
    "catch_exception",
    "catch_exec",
    "catch_fork",
    "catch_load",
    "catch_signal",
    "catch_syscall",
    "catch_unload",
    "delete_catchpoint",
    "set_catchpoint",
    "set_catchpoint_condition",
    "set_catchpoint_enabled",
    # Symbols
    "info_address",
    "info_line",
    "info_line_at_address",
    "list_functions",
    "list_types",
    "list_variables",
    "ptype",
    "symbol_at_address",
    "whatis",
    # Source and memory
    "current_source_line",
    "list_address_source",
    "list_function_source",
    "list_source",
    "write_memory",
    "write_value",
]
