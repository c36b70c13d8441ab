"""The user's favourite IOs and the room list offered when choosing them."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Iterator, Optional

from .home import RoomItem
from .io import Connection, IOBase, IOCache
from .rooms import LoadMode, RoomModel

log = logging.getLogger(__name__)

SPECIAL_ROOM_NAME = "Special"
SPECIAL_ROOM_TYPE = "fav"
SPECIAL_ROOM_HITS = 9999999


class FavType(IntEnum):
    """Kind of a favourite entry."""

    IO = 0


def _as_fav_type(value: Any) -> Optional[FavType]:
    try:
        return FavType(int(value))
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> int:
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


class FavoritesModel:
    """An ordered list of favourite IOs."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.loaded = False
        self._items: list[tuple[FavType, str, IOBase]] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[IOBase]:
        return (io for _fav_type, _io_id, io in self._items)

    def add_favorite(self, io_id: str, fav_type: Any) -> bool:
        """Append a copy of a known IO; returns False when it cannot be added."""
        kind = _as_fav_type(fav_type)
        if kind is not FavType.IO:
            log.debug("unsupported favourite type: %r", fav_type)
            return False

        io = self.cache.search_input(io_id) or self.cache.search_output(io_id)
        if io is None:
            return False

        self._items.append((kind, io_id, io.clone()))
        return True

    def load(self, fav_list: list[dict[str, Any]]) -> None:
        """Replace the favourites with a saved list; unknown IOs are skipped."""
        self.loaded = False
        self._items.clear()
        for entry in fav_list:
            io_id = str(entry.get("id", ""))
            if not self.add_favorite(io_id, _to_int(entry.get("type"))):
                log.debug("Failed to add IO: %s", io_id)
        self.loaded = True

    def save(self) -> list[dict[str, Any]]:
        """The favourites in the form :meth:`load` accepts."""
        saved = []
        for kind, io_id, _io in self._items:
            if kind is FavType.IO:
                saved.append({"id": io_id, "type": int(kind)})
        return saved

    def remove(self, idx: int) -> None:
        """Remove the favourite at a row; rows out of range are ignored."""
        if 0 <= idx < len(self._items):
            del self._items[idx]

    def move(self, idx: int, new_idx: int) -> None:
        """Move the favourite at ``idx`` so that it ends up at ``new_idx``."""
        if not 0 <= idx < len(self._items):
            raise IndexError(f"no favourite at row {idx}")
        if not 0 <= new_idx < len(self._items):
            raise IndexError(f"cannot move favourite to row {new_idx}")
        entry = self._items.pop(idx)
        self._items.insert(new_idx, entry)

    def get_item(self, idx: int) -> Optional[IOBase]:
        """IO at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._items):
            return self._items[idx][2]
        return None


class HomeFavModel:
    """Every room with all its IOs, led by a room of special shortcuts."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self._rooms: list[RoomItem] = []

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[RoomItem]:
        return iter(self._rooms)

    def _special_room_data(self) -> dict[str, Any]:
        shortcuts = [
            {
                "name": "All lights On",
                "type": "fav_all_lights",
                "gui_type": "fav_all_lights",
                "id": "fav_all_lights",
            }
        ]
        items: Any
        if self.connection.http_api_v2:
            items = {"inputs": [], "outputs": shortcuts}
        else:
            items = shortcuts
        return {
            "items": items,
            "name": SPECIAL_ROOM_NAME,
            "type": SPECIAL_ROOM_TYPE,
            "hits": SPECIAL_ROOM_HITS,
        }

    def _add_room(self, room_data: dict[str, Any]) -> None:
        room = RoomItem(self.connection, self.cache)
        name = room_data.get("name")
        room.name = "" if name is None else str(name)
        room_type = room_data.get("type")
        room.type = "" if room_type is None else str(room_type)
        room.hits = _to_int(room_data.get("hits"))
        room.load(room_data, None, LoadMode.ALL)
        self._rooms.append(room)

    def load(self, home_data: dict[str, Any]) -> None:
        """Rebuild the room list from the server's home description."""
        self._rooms.clear()
        if "home" not in home_data:
            log.debug("no home entry")
            return

        self._add_room(self._special_room_data())
        for entry in home_data.get("home") or []:
            self._add_room(dict(entry))

    def get_room_model(self, idx: int) -> Optional[RoomModel]:
        """Room model at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._rooms):
            return self._rooms[idx].room_model()
        return None