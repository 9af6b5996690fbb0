"""MI transport backed by a GDB subprocess managed by pygdbmi."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pygdbmi.gdbcontroller import GdbController

from gdbcapture.config import get_config
from gdbcapture.errors import TransportError
from gdbcapture.errors import handle_transport_errors
from gdbcapture.protocol.transport import MiRecord
from gdbcapture.protocol.transport import MiTransport

if TYPE_CHECKING:
    from gdbcapture.config import GdbProcessConfig

logger = logging.getLogger(__name__)


class GdbProcessTransport(MiTransport):
    """Run GDB with an MI interpreter and exchange lines over its pipes.

    pygdbmi owns the process and turns each output line into a record dict;
    this class only adapts it to the ``MiTransport`` interface.
    """

    name = "gdb-process"

    def __init__(self, config: GdbProcessConfig | None = None) -> None:
        self._config = config or get_config().process
        self._controller: GdbController | None = None
        self._start()

    @handle_transport_errors("gdb-process", "start")
    def _start(self) -> None:
        command = self._config.command_line()
        logger.debug("Starting debugger: %s", " ".join(command))
        self._controller = GdbController(
            command=command,
            time_to_check_for_additional_output_sec=self._config.additional_output_seconds,
        )

    @property
    def is_running(self) -> bool:
        controller = self._controller
        return (
            controller is not None
            and controller.gdb_process is not None
            and controller.gdb_process.poll() is None
        )

    def _require_controller(self) -> GdbController:
        if self._controller is None or not self.is_running:
            raise TransportError(
                "Debugger process is not running",
                transport=self.name,
                endpoint=self._config.gdb_path,
            )
        return self._controller

    @handle_transport_errors("gdb-process", "send_line")
    def send_line(self, line: str) -> None:
        controller = self._require_controller()
        logger.debug("-> %s", line)
        controller.write(line, read_response=False)

    @handle_transport_errors("gdb-process", "read_records")
    def read_records(self, timeout_sec: float) -> list[MiRecord]:
        controller = self._require_controller()
        records = controller.get_gdb_response(timeout_sec=timeout_sec, raise_error_on_timeout=False)
        for record in records:
            logger.debug("<- %r", record)
        return records

    def close(self) -> None:
        controller, self._controller = self._controller, None
        if controller is None:
            return
        try:
            controller.exit()
        except OSError:
            logger.debug("Debugger process already gone on close", exc_info=True)
