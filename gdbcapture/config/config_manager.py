"""Process-wide configuration state for gdbcapture.

Handles and transports created without an explicit config read the current
value from here. Every change is validated before it becomes visible, and
all access goes through one re-entrant lock.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    import types

from gdbcapture.config.capture_config import DEFAULT_CONFIG
from gdbcapture.config.capture_config import CaptureConfig

logger = logging.getLogger(__name__)

_UPDATABLE_KEYS = frozenset(
    {
        "response_timeout_seconds",
        "poll_interval_seconds",
        "serialize_dispatch",
        "lock_timeout_seconds",
        "max_write_bytes",
    }
)


class ConfigManager:
    """Thread-safe manager for process-wide configuration state."""

    def __init__(self, default_config: CaptureConfig) -> None:
        self._lock = threading.RLock()
        self._default_config = default_config
        self._current_config = default_config

    def get_config(self) -> CaptureConfig:
        """Return the active configuration."""
        with self._lock:
            return self._current_config

    def set_config(self, config: CaptureConfig) -> None:
        """Validate and install ``config``."""
        with self._lock:
            config.validate()
            self._current_config = config

    def update_config(self, **kwargs: Any) -> None:
        """Replace whitelisted dispatch settings; unknown keys are logged and ignored."""
        with self._lock:
            unknown_keys = sorted(set(kwargs) - _UPDATABLE_KEYS)
            if unknown_keys:
                logger.warning("Ignoring unknown config key(s): %s", ", ".join(unknown_keys))

            changes = {k: v for k, v in kwargs.items() if k in _UPDATABLE_KEYS}
            updated = dataclasses.replace(self._current_config, **changes)
            updated.validate()
            self._current_config = updated

    def reset_config(self) -> None:
        """Go back to the configuration given at construction."""
        with self._lock:
            self._current_config = self._default_config

    def apply_context_changes(self, changes: dict[str, Any]) -> tuple[CaptureConfig, CaptureConfig]:
        """Apply temporary configuration changes atomically.

        Returns:
            Tuple of (original_config, new_config).
        """
        with self._lock:
            original = self._current_config
            new_config = dataclasses.replace(
                original,
                **{k: v for k, v in changes.items() if hasattr(original, k)},
            )
            new_config.validate()
            self._current_config = new_config
            return original, new_config

    def restore_config(self, config: CaptureConfig) -> None:
        """Restore a previously captured configuration."""
        with self._lock:
            self._current_config = config


_config_manager = ConfigManager(DEFAULT_CONFIG)


def get_config() -> CaptureConfig:
    """Return the process-wide configuration used by new handles and transports."""
    return _config_manager.get_config()


def set_config(config: CaptureConfig) -> None:
    """Validate ``config`` and make it the process-wide configuration.

    Raises:
        ConfigurationError: ``config`` is invalid; the current one is kept.
    """
    _config_manager.set_config(config)


def update_config(**kwargs: Any) -> None:
    """Replace individual dispatch settings, e.g. ``update_config(max_write_bytes=64)``.

    Process settings cannot be updated this way; use ``set_config``.
    """
    _config_manager.update_config(**kwargs)


def reset_config() -> None:
    _config_manager.reset_config()


class ConfigContext:
    """Apply configuration overrides for the duration of a ``with`` block.

    Handles created inside the block pick up the overridden values; handles
    given an explicit ``CaptureConfig`` are unaffected.
    """

    def __init__(self, **overrides: Any) -> None:
        self._overrides = overrides
        self._saved: CaptureConfig | None = None

    def __enter__(self) -> CaptureConfig:
        self._saved, active = _config_manager.apply_context_changes(self._overrides)
        logger.debug("Config overrides applied: %s", ", ".join(sorted(self._overrides)))
        return active

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        saved, self._saved = self._saved, None
        if saved is not None:
            _config_manager.restore_config(saved)


def config_context(**overrides: Any) -> ConfigContext:
    return ConfigContext(**overrides)
