"""GDB/MI transport and command builders for gdbcapture."""

from gdbcapture.protocol.gdb_transport import GdbProcessTransport
from gdbcapture.protocol.transport import MiRecord
from gdbcapture.protocol.transport import MiTransport
from gdbcapture.protocol.transport import RecordListener

__all__ = [
    "GdbProcessTransport",
    "MiRecord",
    "MiTransport",
    "RecordListener",
]
