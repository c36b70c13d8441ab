"""Inputs and outputs of the home server, their state and the commands they send."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .events import Signal
from .iotypes import IOType, io_type_from_gui_type

log = logging.getLogger(__name__)


class Direction(Enum):
    """Whether an IO is an input or an output of the server."""

    INPUT = "input"
    OUTPUT = "output"


class Connection:
    """The link to the server as seen by the models.

    Outgoing messages are emitted on ``command_sent`` and ``json_sent``;
    incoming change events arrive through ``event_input_change``,
    ``event_output_change`` and ``log_event_loaded``.
    """

    def __init__(self, http_api_v2: bool = False) -> None:
        self.http_api_v2 = http_api_v2
        self.command_sent = Signal()
        self.json_sent = Signal()
        self.event_input_change = Signal()
        self.event_output_change = Signal()
        self.log_event_loaded = Signal()

    def send_command(self, io_id: str, value: str, io_kind: str, action: str) -> None:
        """Send a command for one IO."""
        self.command_sent.emit(io_id, value, io_kind, action)

    def send_json(self, message: str, data: dict[str, Any]) -> None:
        """Send a JSON message."""
        self.json_sent.emit(message, data)


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_float(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return 0.0


def _to_int(value: Any) -> int:
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        return round(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def _parse_color(text: str) -> tuple[int, int, int]:
    """Parse ``#rgb`` or ``#rrggbb``; anything else is black."""
    text = text.strip()
    if not text.startswith("#"):
        return (0, 0, 0)
    digits = text[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) != 6:
        return (0, 0, 0)
    try:
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    except ValueError:
        return (0, 0, 0)


class IOBase:
    """One input or output, with its last known state."""

    def __init__(self, connection: Connection, direction: Direction) -> None:
        self.connection = connection
        self.direction = direction
        self.data: dict[str, Any] = {}

        self.io_type = IOType.UNKNOWN
        self.hits = 0
        self.name = ""
        self.io_id = ""
        self.style = ""
        self.unit = ""
        self.rw = False
        self.room_name = ""
        self.has_warning = False
        self.rgb_color: tuple[int, int, int] = (0, 0, 0)

        self.state_shutter_bool = False
        self.state_shutter_txt = ""
        self.state_shutter_txt_action = ""

        self.state_changed = Signal()
        self.light_on = Signal()
        self.light_off = Signal()

    def __repr__(self) -> str:
        return f"IOBase(id={self.io_id!r}, name={self.name!r}, type={self.io_type.name})"

    def load(self, data: dict[str, Any]) -> None:
        """Take the IO description sent by the server."""
        self.data = dict(data)
        gui_type = _to_str(self.data.get("gui_type"))

        self.name = _to_str(self.data.get("name"))
        self.hits = _to_int(self.data.get("hits"))
        self.style = _to_str(self.data.get("io_style"))
        self.io_type = io_type_from_gui_type(gui_type)
        self.io_id = _to_str(self.data.get("id"))
        self.unit = _to_str(self.data.get("unit"))
        self.rw = _to_str(self.data.get("rw")) == "true"
        self.has_warning = _to_str(self.data.get("value_warning")) == "true"

        if gui_type == "light_rgb":
            self._update_rgb_color()

        # analog outputs share the writable presentation of integer variables
        if self.io_type is IOType.ANALOG_OUT:
            self.rw = True

        if self.direction is Direction.INPUT:
            self.connection.event_input_change.connect(self.input_changed)
        else:
            self.connection.event_output_change.connect(self.output_changed)

    def _update_rgb_color(self) -> None:
        if self.connection.http_api_v2:
            self.rgb_color = (self.state_red(), self.state_green(), self.state_blue())
        else:
            self.rgb_color = _parse_color(self.state_string())

    def clone(self) -> IOBase:
        """An independent copy sharing the same connection."""
        new_io = IOBase(self.connection, self.direction)
        new_io.load(self.data)
        new_io.room_name = self.room_name
        new_io.state_shutter_bool = self.state_shutter_bool
        new_io.state_shutter_txt = self.state_shutter_txt
        new_io.state_shutter_txt_action = self.state_shutter_txt_action
        return new_io

    def check_first_state(self) -> None:
        """Emit ``light_on`` if the freshly loaded light is lit."""
        if self.io_type is IOType.LIGHT:
            if self.state_bool():
                self.light_on.emit(self)
        elif self.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
            if self.state_int() > 0:
                self.light_on.emit(self)

    def _send(self, value: str, io_kind: Optional[str] = None) -> None:
        kind = self.direction.value if io_kind is None else io_kind
        self.connection.send_command(_to_str(self.data.get("id")), value, kind, "set_state")

    def send_true(self) -> None:
        self._send("true")

    def send_false(self) -> None:
        self._send("false")

    def send_inc(self) -> None:
        self._send("inc")

    def send_dec(self) -> None:
        self._send("dec")

    def send_down(self) -> None:
        self._send("down")

    def send_up(self) -> None:
        self._send("up")

    def send_stop(self) -> None:
        self._send("stop")

    def send_string_value(self, value: str) -> None:
        self._send(value)

    def send_int_value(self, value: float) -> None:
        self._send(f"set {value:g}")

    def send_color(self, red: int, green: int, blue: int) -> None:
        """Send an RGB colour in the format the server's API expects."""
        if self.connection.http_api_v2:
            log.debug("Send rgb value: %d, %d, %d", red, green, blue)
            packed = ((red << 16) + (green << 8) + blue) & 0xFFFFFFFF
            self._send(f"set {packed}")
        else:
            self._send(f"set #{red & 0xFF:02x}{green & 0xFF:02x}{blue & 0xFF:02x}", "")

    def state_bool(self) -> bool:
        return _to_str(self.data.get("state")) == "true"

    def state_int(self) -> float:
        return _to_float(self.data.get("state"))

    def state_string(self) -> str:
        return _to_str(self.data.get("state"))

    def state_red(self) -> int:
        if self.connection.http_api_v2:
            return _to_int(self.data.get("state")) >> 16
        return _parse_color(self.state_string())[0]

    def state_green(self) -> int:
        if self.connection.http_api_v2:
            return (_to_int(self.data.get("state")) >> 8) & 0xFF
        return _parse_color(self.state_string())[1]

    def state_blue(self) -> int:
        if self.connection.http_api_v2:
            return _to_int(self.data.get("state")) & 0xFF
        return _parse_color(self.state_string())[2]

    def shutter_position(self) -> int:
        """Closing percentage of a smart shutter; also refreshes its status texts."""
        parts = self.state_string().split(" ")
        status = parts[0]
        percent = _to_int(parts[1]) if len(parts) > 1 else 0

        self.state_shutter_bool = percent < 100

        if percent == 0:
            self.state_shutter_txt = "State: Opened."
        elif 0 < percent < 50:
            self.state_shutter_txt = f"State: {percent}% Opened."
        elif 50 <= percent < 100:
            self.state_shutter_txt = f"State: {percent}% Closed."
        elif percent == 100:
            self.state_shutter_txt = "State: Closed."

        if status in ("stop", ""):
            self.state_shutter_txt_action = "Action: stopped."
        elif status == "down":
            self.state_shutter_txt_action = "Action: Closing..."
        elif status == "up":
            self.state_shutter_txt_action = "Action: Opening..."

        return percent

    def input_changed(self, io_id: str, key: str, value: str) -> None:
        """Apply a change event for an input; events for other IOs are ignored."""
        if io_id != _to_str(self.data.get("id")):
            return
        if key == "state":
            self.data["state"] = value
            self.state_changed.emit()
        elif key == "name":
            self.data["name"] = value
            self.name = value
        elif key == "value_warning":
            self.data["value_warning"] = value
            self.has_warning = value == "true"

    def output_changed(self, io_id: str, key: str, value: str) -> None:
        """Apply a change event for an output; events for other IOs are ignored."""
        if io_id != _to_str(self.data.get("id")):
            return
        if key == "state":
            if self.io_type is IOType.LIGHT:
                if self.state_bool() != (value == "true"):
                    self.data["state"] = value
                    if value == "true":
                        self.light_on.emit(self)
                    else:
                        self.light_off.emit(self)
            elif self.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
                if self.connection.http_api_v2 or self.io_type is IOType.LIGHT_DIMMER:
                    lit = _to_float(value) > 0
                    if (self.state_int() > 0) != lit:
                        self.data["state"] = value
                        if lit:
                            self.light_on.emit(self)
                        else:
                            self.light_off.emit(self)

            self.data["state"] = value

            if self.io_type is IOType.LIGHT_RGB:
                self._update_rgb_color()
                if not self.connection.http_api_v2:
                    if any(self.rgb_color):
                        self.light_on.emit(self)
                    else:
                        self.light_off.emit(self)

            self.state_changed.emit()
        elif key == "name":
            self.data["name"] = value
            self.name = value


class IOCache:
    """Lookup of loaded inputs and outputs by id."""

    def __init__(self) -> None:
        self._inputs: dict[str, IOBase] = {}
        self._outputs: dict[str, IOBase] = {}

    def search_input(self, io_id: str) -> Optional[IOBase]:
        return self._inputs.get(io_id)

    def search_output(self, io_id: str) -> Optional[IOBase]:
        return self._outputs.get(io_id)

    def add_input(self, io: Optional[IOBase]) -> None:
        if io is not None:
            self._inputs[io.io_id] = io

    def add_output(self, io: Optional[IOBase]) -> None:
        if io is not None:
            self._outputs[io.io_id] = io

    def del_input(self, io: Optional[IOBase]) -> None:
        if io is not None:
            self._inputs.pop(io.io_id, None)

    def del_output(self, io: Optional[IOBase]) -> None:
        if io is not None:
            self._outputs.pop(io.io_id, None)

    def clear(self) -> None:
        self._inputs.clear()
        self._outputs.clear()