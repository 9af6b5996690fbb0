"""Tests for the console command builders."""

from __future__ import annotations

import pytest

from gdbcapture.core.catchpoints import build_catch_command
from gdbcapture.core.records import CatchKind
from gdbcapture.errors import InvalidArgumentError
from gdbcapture.protocol import commands


class TestCatchCommands:
    @pytest.mark.parametrize("kind", list(CatchKind))
    @pytest.mark.parametrize("temporary", [False, True])
    def test_every_kind(self, kind, temporary):
        expected = ("tcatch " if temporary else "catch ") + kind.value
        assert build_catch_command(kind, temporary) == expected

    @pytest.mark.parametrize(
        ("kind", "event_filter", "expected"),
        [
            (CatchKind.LOAD, "libfoo", "catch load libfoo"),
            (CatchKind.UNLOAD, "libbar.*", "catch unload libbar.*"),
            (CatchKind.SYSCALL, "write", "catch syscall write"),
            (CatchKind.SIGNAL, "SIGINT", "catch signal SIGINT"),
        ],
    )
    def test_filterable_kinds(self, kind, event_filter, expected):
        assert build_catch_command(kind, event_filter=event_filter) == expected

    def test_temporary_with_filter(self):
        assert build_catch_command(CatchKind.SYSCALL, True, " close ") == "tcatch syscall close"

    def test_kind_by_name(self):
        assert build_catch_command("vfork") == "catch vfork"

    @pytest.mark.parametrize("kind", [CatchKind.THROW, CatchKind.EXEC, CatchKind.ASSERT])
    def test_filter_rejected_for_kind_without_filter(self, kind):
        with pytest.raises(InvalidArgumentError) as exc_info:
            build_catch_command(kind, event_filter="x")
        assert exc_info.value.argument == "event_filter"

    def test_blank_filter_rejected(self):
        with pytest.raises(InvalidArgumentError):
            build_catch_command(CatchKind.LOAD, event_filter="   ")

    def test_unknown_kind(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            build_catch_command("breakfast")
        assert exc_info.value.argument == "kind"
        assert "throw" in exc_info.value.details["allowed"]


class TestInterpreterExec:
    def test_plain_command(self):
        assert commands.interpreter_exec("info line main.c:10") == (
            '-interpreter-exec console "info line main.c:10"'
        )

    def test_quotes_and_backslashes_escaped(self):
        assert commands.interpreter_exec('print "a\\b"') == (
            '-interpreter-exec console "print \\"a\\\\b\\""'
        )

    def test_blank_command_rejected(self):
        with pytest.raises(InvalidArgumentError):
            commands.interpreter_exec("  ")


class TestListCommands:
    @pytest.mark.parametrize(
        ("args", "expected"),
        [
            (("main.c", 10, 5), "list main.c:10,14"),
            (("main.c", 10, 0), "list main.c:10"),
            (("main.c", 0, 0), "list main.c:1"),
            ((None, 0, 20), "list *$pc,20"),
            ((None, 0, 0), "list"),
        ],
    )
    def test_list_forms(self, args, expected):
        assert commands.list_command(*args) == expected

    def test_location_and_address(self):
        assert commands.list_location_command("main") == "list main"
        assert commands.list_address_command(0x401136) == "list *0x401136"


class TestQueryCommands:
    def test_symbol_and_line_commands(self):
        assert commands.info_address_command(" main ") == "info address main"
        assert commands.info_symbol_command(0x401136) == "info symbol 0x401136"
        assert commands.info_line_command("main.c", 10) == "info line main.c:10"
        assert commands.info_line_address_command(0x40113D) == "info line *0x40113d"

    def test_listing_commands_with_optional_regexp(self):
        assert commands.info_functions_command() == "info functions"
        assert commands.info_functions_command("^ma") == "info functions ^ma"
        assert commands.info_variables_command("count") == "info variables count"
        assert commands.info_types_command() == "info types"

    def test_type_commands(self):
        assert commands.ptype_command("struct point") == "ptype struct point"
        assert commands.whatis_command("x + 1") == "whatis x + 1"

    @pytest.mark.parametrize("value", [0, -1, True, "10", None])
    def test_non_positive_numbers_rejected(self, value):
        with pytest.raises(InvalidArgumentError):
            commands.info_line_command("main.c", value)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_text_rejected(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.info_address_command(value)
        assert exc_info.value.details["argument"] == "symbol"


class TestWriteCommands:
    def test_write_memory(self):
        assert commands.write_memory_command("&buf", b"\x0a\x0b\xff") == (
            "set {unsigned char[3]}(&buf) = {0x0a, 0x0b, 0xff}"
        )

    def test_write_value(self):
        assert commands.write_value_command("0x404028", "42") == "set {long}(0x404028) = 42"

    def test_write_requires_address(self):
        with pytest.raises(InvalidArgumentError):
            commands.write_memory_command("", b"\x00")
