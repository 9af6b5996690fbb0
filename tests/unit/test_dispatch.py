"""Tests for capture-correlated dispatch on MiHandle."""

from __future__ import annotations

import threading

import pytest

from gdbcapture.config import CaptureConfig
from gdbcapture.config import update_config
from gdbcapture.core.dispatch import CaptureContext
from gdbcapture.core.dispatch import MiHandle
from gdbcapture.errors import CaptureOverlapError
from gdbcapture.errors import CaptureTimeoutError
from gdbcapture.errors import CommandError
from gdbcapture.errors import InvalidArgumentError
from gdbcapture.errors import TransportError
from tests.mocks import FakeTransport
from tests.mocks import console_line


class TestDispatch:
    def test_captures_console_text(self, handle, transport):
        transport.respond_console("Line 10 of \"main.c\" starts at address 0x401136.\n")

        context = handle.dispatch("info line main.c:10")

        assert context.command == "info line main.c:10"
        assert context.text == 'Line 10 of "main.c" starts at address 0x401136.\n'
        assert context.result["message"] == "done"
        assert transport.console_commands == ["info line main.c:10"]
        assert not handle.capturing

    def test_fragments_concatenate_in_arrival_order(self, handle, transport):
        transport.respond(
            console_line("10\tint "),
            console_line("main(void)\n"),
            console_line("11\t{\n"),
            "^done",
        )

        context = handle.dispatch("list main")

        assert context.fragments == ["10\tint ", "main(void)\n", "11\t{\n"]
        assert context.text == "10\tint main(void)\n11\t{\n"

    def test_empty_output_is_valid(self, handle, transport):
        transport.respond("^done")

        context = handle.dispatch("info functions ^zzz")

        assert context.text == ""
        assert context.fragments == []

    def test_tokens_increase_per_command(self, handle, transport):
        transport.respond("^done")
        transport.respond("^done")

        first = handle.dispatch("info types")
        second = handle.dispatch("info types")

        assert (first.token, second.token) == (1, 2)
        assert transport.sent[0].startswith("1-interpreter-exec")
        assert transport.sent[1].startswith("2-interpreter-exec")

    def test_stray_result_does_not_end_capture(self, handle, transport):
        transport.respond(console_line("first\n"), "99^done", console_line("second\n"), "^done")

        context = handle.dispatch("info line main.c:1")

        assert context.text == "first\nsecond\n"
        assert context.result["token"] == context.token

    def test_notifications_collected(self, handle, transport):
        transport.respond_console(
            "Catchpoint 1 (throw)\n",
            '=breakpoint-created,bkpt={number="1",type="catchpoint",disp="keep",enabled="y"}',
        )

        context = handle.dispatch("catch throw")

        assert len(context.notifications) == 1
        assert context.notifications[0]["message"] == "breakpoint-created"
        assert context.text == "Catchpoint 1 (throw)\n"

    def test_console_outside_capture_is_dropped(self, handle, transport):
        transport.respond(console_line("noise\n"), "^done")
        handle.execute("-break-delete 1")
        transport.respond_console("fresh\n")

        context = handle.dispatch("info symbol 0x401136")

        assert context.text == "fresh\n"

    def test_discard_clears_buffers(self, handle, transport):
        transport.respond_console("text\n", '=breakpoint-created,bkpt={number="2"}')
        context = handle.dispatch("catch fork")

        context.discard()

        assert context.text == ""
        assert context.notifications == []

    @pytest.mark.parametrize("command", ["", "   ", None])
    def test_empty_command_rejected(self, handle, transport, command):
        with pytest.raises(InvalidArgumentError):
            handle.dispatch(command)
        assert transport.sent == []


class TestDispatchFailures:
    def test_timeout_without_terminal_response(self, handle, transport):
        transport.respond(console_line("partial\n"))

        with pytest.raises(CaptureTimeoutError) as exc_info:
            handle.dispatch("info functions")

        assert exc_info.value.command == "info functions"
        assert exc_info.value.timeout_seconds == handle.config.response_timeout_seconds
        assert exc_info.value.error_code == "TimeoutError"
        assert not handle.capturing

    def test_handle_usable_after_timeout(self, handle, transport):
        transport.respond()
        with pytest.raises(CaptureTimeoutError):
            handle.dispatch("info functions")

        transport.respond_console("ok\n")
        assert handle.dispatch("info functions").text == "ok\n"

    def test_late_output_of_timed_out_command_not_merged(self, handle, transport):
        transport.respond()
        with pytest.raises(CaptureTimeoutError):
            handle.dispatch("info functions")

        transport.push(console_line("0x401000  stale_fn\n"), "1^done")
        transport.respond_console("0x402000  fresh_fn\n")

        context = handle.dispatch("info functions")

        assert "stale_fn" not in context.text
        assert context.text == "0x402000  fresh_fn\n"

    def test_abandoned_token_drained_once(self, handle, transport):
        transport.respond()
        with pytest.raises(CaptureTimeoutError):
            handle.dispatch("info types")
        transport.push("1^done")
        transport.respond_console("first\n")
        assert handle.dispatch("info types").text == "first\n"

        transport.respond(console_line("second\n"), "1^done", "^done")

        assert handle.dispatch("info types").text == "second\n"

    def test_late_result_after_execute_timeout(self, handle, transport):
        with pytest.raises(CaptureTimeoutError):
            handle.execute("-break-delete 1")

        transport.push(console_line("No breakpoint number 1.\n"), "1^done")
        transport.respond_console("kept\n")

        assert handle.dispatch("info types").text == "kept\n"

    def test_error_record_raises_command_error(self, handle, transport):
        transport.respond('^error,msg="No symbol \\"nope\\" in current context."')

        with pytest.raises(CommandError) as exc_info:
            handle.dispatch("info address nope")

        assert exc_info.value.command == "info address nope"
        assert "nope" in exc_info.value.gdb_message
        assert "in current context" in str(exc_info.value)
        assert not handle.capturing

    def test_transport_failure_wrapped(self, handle, transport):
        transport.send_error = BrokenPipeError("pipe closed")

        with pytest.raises(TransportError) as exc_info:
            handle.dispatch("info types")

        assert exc_info.value.transport == "fake"
        assert isinstance(exc_info.value.cause, BrokenPipeError)
        assert not handle.capturing

    def test_stale_capture_refuses_new_command(self, handle, transport):
        handle._capture = CaptureContext(command="info line main.c:3", token=41)

        with pytest.raises(CaptureOverlapError) as exc_info:
            handle.dispatch("info types")

        assert exc_info.value.active_command == "info line main.c:3"
        assert exc_info.value.command == "info types"
        assert transport.sent == []

    def test_reentrant_dispatch_without_serialization(self, transport, fast_config):
        fast_config.serialize_dispatch = False
        mi_handle = MiHandle(transport, fast_config)
        errors = []

        def dispatch_again(line):
            if len(transport.sent) == 1:
                try:
                    mi_handle.dispatch("info types")
                except CaptureOverlapError as e:
                    errors.append(e)

        transport.on_send = dispatch_again
        transport.respond_console("outer\n")

        context = mi_handle.dispatch("info functions")

        assert context.text == "outer\n"
        assert len(errors) == 1
        assert errors[0].command == "info types"
        assert errors[0].active_command == "info functions"
        assert len(transport.sent) == 1

    def test_lock_timeout_raises_overlap(self, transport, fast_config):
        fast_config.lock_timeout_seconds = 0.05
        mi_handle = MiHandle(transport, fast_config)
        errors = []

        def dispatch_again(line):
            if len(transport.sent) == 1:
                try:
                    mi_handle.dispatch("info types")
                except CaptureOverlapError as e:
                    errors.append(e)

        transport.on_send = dispatch_again
        transport.respond("^done")

        mi_handle.dispatch("info functions")

        assert len(errors) == 1


class TestSerializedDispatch:
    def test_concurrent_callers_do_not_mix_output(self, transport, fast_config):
        mi_handle = MiHandle(transport, fast_config)
        transport.respond_console("alpha\n", delay=0.05)
        transport.respond_console("beta\n", delay=0.05)
        results = []
        errors = []

        def worker(command):
            try:
                results.append(mi_handle.dispatch(command))
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(f"info line main.c:{n}",)) for n in (1, 2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert errors == []
        assert sorted(context.text for context in results) == ["alpha\n", "beta\n"]
        assert all(len(context.fragments) == 1 for context in results)
        assert not mi_handle.capturing


class TestExecute:
    def test_returns_result_record(self, handle, transport):
        transport.respond('^done,frame={level="0",func="main",file="main.c",line="10"}')

        result = handle.execute("-stack-info-frame")

        assert result["payload"]["frame"]["func"] == "main"
        assert transport.mi_commands == ["-stack-info-frame"]

    def test_error_raises(self, handle, transport):
        transport.respond('^error,msg="No stack."')

        with pytest.raises(CommandError) as exc_info:
            handle.execute("-stack-info-frame")

        assert exc_info.value.gdb_message == "No stack."

    def test_timeout(self, handle, transport):
        with pytest.raises(CaptureTimeoutError):
            handle.execute("-break-delete 1")

    def test_blank_command_rejected(self, handle, transport):
        with pytest.raises(InvalidArgumentError):
            handle.execute(" ")
        assert transport.sent == []


class TestHandleLifecycle:
    def test_uses_global_config_by_default(self):
        update_config(response_timeout_seconds=1.5)
        mi_handle = MiHandle(FakeTransport())
        assert mi_handle.config.response_timeout_seconds == 1.5

    def test_explicit_config(self):
        config = CaptureConfig(max_write_bytes=16)
        assert MiHandle(FakeTransport(), config).config is config

    def test_context_manager_closes_transport(self):
        transport = FakeTransport()
        with MiHandle(transport) as mi_handle:
            assert mi_handle.transport is transport
        assert transport.closed
