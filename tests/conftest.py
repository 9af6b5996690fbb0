from __future__ import annotations

import logging

import pytest

from gdbcapture.config import CaptureConfig
from gdbcapture.config import reset_config
from gdbcapture.core.dispatch import MiHandle
from tests.mocks import FakeGdbController
from tests.mocks import FakeTransport

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def _isolate_global_config():
    """Every test starts from, and leaves behind, the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fast_config() -> CaptureConfig:
    return CaptureConfig(
        response_timeout_seconds=0.3,
        poll_interval_seconds=0.01,
        lock_timeout_seconds=2.0,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def handle(transport, fast_config):
    with MiHandle(transport, fast_config) as mi_handle:
        yield mi_handle


@pytest.fixture
def fake_controller(monkeypatch):
    """Patch pygdbmi's controller so no debugger process is started."""
    FakeGdbController.instances.clear()
    monkeypatch.setattr("gdbcapture.protocol.gdb_transport.GdbController", FakeGdbController)
    yield FakeGdbController
    FakeGdbController.instances.clear()
