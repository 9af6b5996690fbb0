"""Configuration management for gdbcapture."""

from gdbcapture.config.capture_config import DEFAULT_CONFIG
from gdbcapture.config.capture_config import CaptureConfig
from gdbcapture.config.capture_config import GdbProcessConfig
from gdbcapture.config.config_manager import ConfigContext
from gdbcapture.config.config_manager import config_context
from gdbcapture.config.config_manager import get_config
from gdbcapture.config.config_manager import reset_config
from gdbcapture.config.config_manager import set_config
from gdbcapture.config.config_manager import update_config

__all__ = [
    "DEFAULT_CONFIG",
    "CaptureConfig",
    "ConfigContext",
    "GdbProcessConfig",
    "config_context",
    "get_config",
    "reset_config",
    "set_config",
    "update_config",
]
