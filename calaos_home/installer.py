"""Progress reporting for the installation of the system onto a disk."""

from __future__ import annotations

import logging
from typing import Any, Callable

log = logging.getLogger(__name__)

_ESC = "\x1b"
_BACKSPACE = "\x08"

_COLORS = {
    "[0;36m": "blue",
    "[0;34m": "blue",
    "[1;34m": "blue",
    "[1;36m": "blue",
    "[0;31m": "red",
    "[1;31m": "red",
    "[0;33m": "yellow",
    "[1;33m": "yellow",
    "[0;32m": "green",
    "[1;32m": "green",
}

Dispatch = Callable[[str, dict[str, Any]], None]


def parse_log_line(line: str) -> tuple[str, str]:
    """Clean a line of installer output and extract its terminal colour.

    Non-printable characters are dropped, backspaces erase the previous
    character, and a leading colour escape becomes one of ``blue``, ``red``,
    ``yellow``, ``green`` or ``nocolor``.
    """
    chars: list[str] = []
    for ch in line:
        if ch.isprintable() or ch == _ESC:
            chars.append(ch)
        elif ch == _BACKSPACE and len(chars) > 1:
            chars.pop()
    text = "".join(chars)

    color = "nocolor"
    if text.startswith(_ESC):
        text = text.replace(_ESC, "").replace("[0m", "")
        code = text[: text.find("m") + 1]
        if code:
            text = text.replace(code, "")
        color = _COLORS.get(code, color)
    return text, color


class OSInstaller:
    """Forwards installer output and its outcome to the user interface.

    ``dispatch`` is called with an action name and its payload.
    """

    def __init__(self, dispatch: Dispatch) -> None:
        self.dispatch = dispatch
        self.is_installing = False
        self.install_finished = False
        self.install_error = False

    def _send_log(self, line: str) -> None:
        text, color = parse_log_line(line)
        self.dispatch("newLogItem", {"line": text, "color": color})

    def handle_output(self, text: str) -> None:
        """Forward every line of a piece of installer output."""
        log.debug("%s", text)
        for line in text.splitlines():
            self._send_log(line)

    def handle_result(self, success: bool) -> None:
        """Record the end of the installation."""
        if success:
            self._send_log("Installation done.")
        else:
            self._send_log("Install process exited with a non clean error code.")
            self._send_log("Error.")
            self.dispatch(
                "showNotificationMsg",
                {
                    "title": "Error",
                    "message": "Installation failed. See log...",
                    "button": "Close",
                    "timeout": 0,
                },
            )
            self.install_error = True
        self.install_finished = True