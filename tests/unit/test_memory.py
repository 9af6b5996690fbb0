"""Tests for memory write operations."""

from __future__ import annotations

import pytest

from gdbcapture.core import memory
from gdbcapture.errors import CommandError
from gdbcapture.errors import InvalidArgumentError


class TestWriteMemory:
    def test_write_bytes(self, handle, transport):
        transport.respond("^done")

        assert memory.write_memory(handle, "&buffer", b"\x0a\x0b") is True
        assert transport.console_commands == ["set {unsigned char[2]}(&buffer) = {0x0a, 0x0b}"]

    def test_accepts_bytearray(self, handle, transport):
        transport.respond("^done")

        memory.write_memory(handle, "0x404028", bytearray(b"\x00"))

        assert transport.console_commands == ["set {unsigned char[1]}(0x404028) = {0x00}"]

    def test_limit_is_inclusive(self, handle, transport):
        transport.respond("^done")
        data = b"\xff" * handle.config.max_write_bytes

        assert memory.write_memory(handle, "&buffer", data) is True

    @pytest.mark.parametrize("size", [0, 256])
    def test_size_out_of_range(self, handle, transport, size):
        with pytest.raises(InvalidArgumentError) as exc_info:
            memory.write_memory(handle, "&buffer", b"\x01" * size)

        assert exc_info.value.argument == "data"
        assert exc_info.value.details["size"] == size
        assert transport.sent == []

    def test_missing_address(self, handle, transport):
        with pytest.raises(InvalidArgumentError):
            memory.write_memory(handle, " ", b"\x01")
        assert transport.sent == []

    def test_inaccessible_memory(self, handle, transport):
        transport.respond('^error,msg="Cannot access memory at address 0x0"')

        with pytest.raises(CommandError) as exc_info:
            memory.write_memory(handle, "0x0", b"\x01")

        assert "Cannot access memory" in exc_info.value.gdb_message


class TestWriteValue:
    def test_write_long(self, handle, transport):
        transport.respond("^done")

        assert memory.write_value(handle, "&counter", "42") is True
        assert transport.console_commands == ["set {long}(&counter) = 42"]

    def test_value_required(self, handle, transport):
        with pytest.raises(InvalidArgumentError):
            memory.write_value(handle, "&counter", "")
