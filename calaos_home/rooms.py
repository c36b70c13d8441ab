"""Rooms of the home: the IOs they show and the list of scenarios."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator, Optional

from .events import Signal
from .io import Connection, Direction, IOBase, IOCache
from .iotypes import detect_old_gui_type

log = logging.getLogger(__name__)

_VISIBLE_INPUT_TYPES = frozenset({"temp", "analog_in", "scenario", "string_in"})

_VISIBLE_OUTPUT_TYPES = frozenset({
    "light",
    "light_dimmer",
    "light_rgb",
    "analog_out",
    "shutter",
    "shutter_smart",
    "var_bool",
    "var_int",
    "var_string",
    "string_out",
})

_SPECIAL_OUTPUT_TYPES = frozenset({
    "audio_output",
    "camera_output",
    "fav_all_lights",
    "audio_player",
    "camera",
})


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class LoadMode(Enum):
    """Which IOs a room shows."""

    NORMAL = 0  # only the usual inputs and outputs
    ALL = 1  # also cameras, audio players and favourite shortcuts


class ScenarioModel:
    """Every scenario of the home, whatever room it belongs to."""

    def __init__(self) -> None:
        self._items: list[IOBase] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[IOBase]:
        return iter(self._items)

    def append(self, io: IOBase) -> None:
        self._items.append(io)

    def clear(self) -> None:
        self._items.clear()

    def get_item(self, idx: int) -> Optional[IOBase]:
        """Scenario at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def sorted_items(self) -> list[IOBase]:
        """Scenarios ordered by hit count, then by name."""
        return sorted(self._items, key=lambda io: (io.hits, io.name))


class RoomModel:
    """The IOs shown in one room.

    Signals: ``light_on``/``light_off`` (the IO), ``has_temp`` (bool) and
    ``temp_changed`` (the temperature of the room's first sensor).
    """

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.name = ""
        self.type = ""
        self.hits = ""
        self._items: list[IOBase] = []
        self._temperature_io: Optional[IOBase] = None

        self.light_on = Signal()
        self.light_off = Signal()
        self.has_temp = Signal()
        self.temp_changed = Signal()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[IOBase]:
        return iter(self._items)

    @property
    def temperature_io(self) -> Optional[IOBase]:
        return self._temperature_io

    def load(
        self,
        room_data: dict[str, Any],
        scenario_model: Optional[ScenarioModel] = None,
        mode: LoadMode = LoadMode.NORMAL,
    ) -> None:
        """Build the room from the server's description of it."""
        self._items.clear()
        if self._temperature_io is not None:
            self._temperature_io.state_changed.disconnect(self._temperature_io_changed)
        self._temperature_io = None

        self.type = _text(room_data.get("type"))
        self.name = _text(room_data.get("name"))
        self.hits = _text(room_data.get("hits"))

        items = room_data.get("items")
        if isinstance(items, dict) and "inputs" in items:
            self.connection.http_api_v2 = True
            inputs = list(items.get("inputs") or [])
            outputs = list(items.get("outputs") or [])
        else:
            self.connection.http_api_v2 = False
            legacy = list(items) if isinstance(items, list) else []
            inputs = legacy
            outputs = legacy

        for entry in inputs:
            self._load_input(dict(entry), scenario_model)
        for entry in outputs:
            self._load_output(dict(entry), mode)

    @staticmethod
    def _gui_type(entry: dict[str, Any]) -> str:
        gui_type = _text(entry.get("gui_type"))
        if not gui_type:
            gui_type = detect_old_gui_type(_text(entry.get("type")))
            entry["gui_type"] = gui_type
        return gui_type

    def _load_input(self, entry: dict[str, Any], scenario_model: Optional[ScenarioModel]) -> None:
        gui_type = self._gui_type(entry)

        io = IOBase(self.connection, Direction.INPUT)
        io.load(entry)
        io.room_name = self.name
        io.check_first_state()
        self.cache.add_input(io)

        if gui_type == "scenario" and scenario_model is not None:
            scenario_model.append(io.clone())

        if _text(entry.get("visible")) != "true":
            return

        if gui_type in _VISIBLE_INPUT_TYPES:
            self._items.append(io.clone())

        if gui_type == "temp" and self._temperature_io is None:
            self._temperature_io = io
            self.temp_changed.emit(io.state_int())
            self.has_temp.emit(True)
            io.state_changed.connect(self._temperature_io_changed)

    def _load_output(self, entry: dict[str, Any], mode: LoadMode) -> None:
        gui_type = self._gui_type(entry)

        io = IOBase(self.connection, Direction.OUTPUT)
        io.light_on.connect(self.light_on.emit)
        io.light_off.connect(self.light_off.emit)
        io.load(entry)
        io.room_name = self.name
        io.check_first_state()
        self.cache.add_output(io)

        if mode is LoadMode.ALL and gui_type in _SPECIAL_OUTPUT_TYPES:
            self._items.append(io.clone())

        if _text(entry.get("visible")) != "true":
            return

        if gui_type in _VISIBLE_OUTPUT_TYPES:
            self._items.append(io.clone())

    def _temperature_io_changed(self) -> None:
        if self._temperature_io is not None:
            self.temp_changed.emit(self._temperature_io.state_int())

    def get_item(self, idx: int) -> Optional[IOBase]:
        """IO at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None