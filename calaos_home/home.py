"""The home: its rooms and the list of lights that are currently on."""

from __future__ import annotations

from typing import Any, Iterator, Optional

from .events import Signal
from .io import Connection, IOBase, IOCache
from .rooms import LoadMode, RoomModel, ScenarioModel


def _hits(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


class LightOnModel:
    """Lights that are on, each at most once; emits ``light_count_changed``."""

    def __init__(self) -> None:
        self._items: list[IOBase] = []
        self._on_cache: dict[str, IOBase] = {}
        self.light_count_changed = Signal()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[IOBase]:
        return iter(self._items)

    def add_light(self, io: IOBase) -> None:
        """Add a copy of a light unless it is already listed."""
        if io.io_id in self._on_cache:
            return
        self._items.append(io.clone())
        self._on_cache[io.io_id] = io
        self.light_count_changed.emit()

    def remove_light(self, io: IOBase) -> None:
        """Remove the light with the same id, if listed."""
        for idx, current in enumerate(self._items):
            if current.io_id == io.io_id:
                del self._items[idx]
                self._on_cache.pop(io.io_id, None)
                self.light_count_changed.emit()
                break

    def light_count(self) -> int:
        return len(self._items)

    def get_item(self, idx: int) -> Optional[IOBase]:
        """Light at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def clone_sorted(self) -> LightOnModel:
        """A detached copy with the lights grouped by room name."""
        by_room: dict[str, list[IOBase]] = {}
        for io in self._items:
            copy = io.clone()
            by_room.setdefault(copy.room_name, []).append(copy)

        model = LightOnModel()
        for lights in by_room.values():
            for io in lights:
                model.add_light(io)
        return model

    def clear(self) -> None:
        self._items.clear()
        self._on_cache.clear()


class RoomItem:
    """One room as listed in the home, with its light and temperature summary."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.name = ""
        self.type = ""
        self.hits = 0
        self.lights_on_count = 0
        self.has_temperature = False
        self.current_temperature = 0.0

        self.light_on = Signal()
        self.light_off = Signal()

        self._room = RoomModel(connection, cache)
        self._room.light_on.connect(self._on_light_on)
        self._room.light_off.connect(self._on_light_off)
        self._room.has_temp.connect(self._on_has_temp)
        self._room.temp_changed.connect(self._on_temp_changed)

    def load(
        self,
        room_data: dict[str, Any],
        scenario_model: Optional[ScenarioModel] = None,
        mode: LoadMode = LoadMode.NORMAL,
    ) -> None:
        self._room.load(room_data, scenario_model, mode)

    def room_model(self) -> RoomModel:
        return self._room

    def _on_light_on(self, io: IOBase) -> None:
        self.lights_on_count += 1
        self.light_on.emit(io)

    def _on_light_off(self, io: IOBase) -> None:
        self.lights_on_count = max(0, self.lights_on_count - 1)
        self.light_off.emit(io)

    def _on_has_temp(self, has: bool) -> None:
        self.has_temperature = has

    def _on_temp_changed(self, value: float) -> None:
        self.current_temperature = value


class HomeModel:
    """All rooms of the home and the count of lights that are on."""

    def __init__(
        self,
        connection: Connection,
        cache: IOCache,
        scenario_model: ScenarioModel,
        light_model: LightOnModel,
    ) -> None:
        self.connection = connection
        self.cache = cache
        self.scenario_model = scenario_model
        self.light_model = light_model
        self.lights_on_count = 0
        self._rooms: list[RoomItem] = []

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[RoomItem]:
        return iter(self._rooms)

    def load(self, home_data: dict[str, Any]) -> None:
        """Rebuild every room from the server's home description."""
        self._rooms.clear()
        self.scenario_model.clear()
        self.cache.clear()
        self.light_model.clear()
        self.lights_on_count = 0

        if "home" not in home_data:
            return

        for entry in home_data.get("home") or []:
            room_data = dict(entry)
            room = RoomItem(self.connection, self.cache)
            room.light_on.connect(self._on_light_on)
            room.light_off.connect(self._on_light_off)

            name = room_data.get("name")
            room.name = "" if name is None else str(name)
            room_type = room_data.get("type")
            room.type = "" if room_type is None else str(room_type)
            room.hits = _hits(room_data.get("hits"))
            room.load(room_data, self.scenario_model, LoadMode.NORMAL)
            self._rooms.append(room)

    def get_room_model(self, idx: int) -> Optional[RoomModel]:
        """Room model at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._rooms):
            return self._rooms[idx].room_model()
        return None

    def _on_light_on(self, io: IOBase) -> None:
        self.lights_on_count += 1
        self.light_model.add_light(io)

    def _on_light_off(self, io: IOBase) -> None:
        self.lights_on_count = max(0, self.lights_on_count - 1)
        self.light_model.remove_light(io)