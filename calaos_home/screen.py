"""Screen power management and its persisted settings."""

from __future__ import annotations

import sys
import threading
from typing import Any, Optional, Protocol

MS_PER_MINUTE = 60 * 1000
WRITE_DELAY = 5.0


class _Display(Protocol):
    def update_dpms(self, enable: bool, seconds: int) -> None: ...

    def wake_up_screen(self, enable: bool) -> None: ...


def _to_int(text: str) -> int:
    try:
        return int(text.strip())
    except (ValueError, AttributeError):
        return 0


class ScreenManager:
    """Turns the screen on and off and keeps the standby settings.

    ``display`` provides ``update_dpms(enable, seconds)`` and
    ``wake_up_screen(enable)``. Setting changes are written to the
    configuration ``write_delay`` seconds after the last change.
    """

    def __init__(self, config: Any, display: _Display) -> None:
        self.config = config
        self.display = display
        self.write_delay = WRITE_DELAY
        self._write_timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

        display.update_dpms(False, 0)

        self.dpms_enabled = config.get_option("dpms_enable") == "true"
        self.dpms_time = _to_int(config.get_option("dpms_standby")) * MS_PER_MINUTE
        if self.dpms_time <= 0:
            self.dpms_time = MS_PER_MINUTE

    def wakeup_screen(self) -> None:
        if sys.platform.startswith("linux"):
            # a screen can wake up black; cycling on, off, on avoids it
            self.display.wake_up_screen(True)
            self.display.wake_up_screen(False)
        self.display.wake_up_screen(True)
        self.display.update_dpms(False, 0)

    def suspend_screen(self) -> None:
        self.display.update_dpms(True, 0)
        self.display.wake_up_screen(False)

    def update_dpms_enabled(self, enabled: bool) -> None:
        self.dpms_enabled = enabled
        self._schedule_write()

    def update_dpms_time(self, minutes: int) -> None:
        """Set the standby delay in minutes; values below one become one."""
        if minutes <= 0:
            minutes = 1
        self.dpms_time = minutes * MS_PER_MINUTE
        self._schedule_write()

    def write_config(self) -> None:
        """Store the current settings in the configuration."""
        self.config.set_option("dpms_enable", "true" if self.dpms_enabled else "false")
        self.config.set_option("dpms_standby", f"{self.dpms_time / MS_PER_MINUTE:g}")

    def _schedule_write(self) -> None:
        with self._lock:
            if self._write_timer is not None:
                self._write_timer.cancel()
            self._write_timer = threading.Timer(self.write_delay, self.write_config)
            self._write_timer.daemon = True
            self._write_timer.start()