"""The server's event log: a paged list of events and single events by uuid."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterator, Optional

from .io import Connection, IOBase, IOCache
from .iotypes import IOType

log = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 50
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SWITCH_STYLES = {
    IOType.LIGHT: "light",
    IOType.PUMP: "pump",
    IOType.OUTLET: "outlet",
    IOType.BOILER: "boiler",
    IOType.HEATER: "heater",
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _number(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return 0.0


class EventType(Enum):
    """Kind of a logged event, keyed by the server's event code."""

    UNKNOWN = ""
    IO_CHANGED = "3"
    PUSH = "22"


class EventLogItem:
    """One event of the log, ready for display."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.title = ""
        self.date = ""
        self.time = ""
        self.event_type = EventType.UNKNOWN
        self.icon_source = ""
        self.room_name = ""
        self.notif_text = ""
        self.has_picture = False
        self.picture_url = ""
        self.action_text = ""
        self.loading = False

    def _picture_url(self, pic_uid: str) -> str:
        builder = getattr(self.connection, "notif_picture_url", None)
        return builder(pic_uid) if callable(builder) else pic_uid

    def load_data(self, data: dict[str, Any], today: Optional[date] = None) -> None:
        """Fill the item from an event record sent by the server."""
        code = _text(data.get("event_type"))
        if code == EventType.IO_CHANGED.value:
            self.event_type = EventType.IO_CHANGED
            self.title = "Appliance change"
        elif code == EventType.PUSH.value:
            self.event_type = EventType.PUSH
            self.title = "Push Notification"
            self.icon_source = "icon_notif"

            raw = data.get("event_raw")
            raw = raw if isinstance(raw, dict) else {}
            self.notif_text = _text(raw.get("message"))
            pic_uid = _text(raw.get("pic_uid"))
            if pic_uid:
                self.picture_url = self._picture_url(pic_uid)
                self.has_picture = True
            else:
                self.picture_url = ""
                self.has_picture = False
        else:
            self.event_type = EventType.UNKNOWN
            self.title = "Unknown event!"

        self._load_timestamp(_text(data.get("created_at")), today or date.today())

        io_id = _text(data.get("io_id"))
        io = self.cache.search_input(io_id) or self.cache.search_output(io_id)
        if io is not None:
            self._load_io(io, data.get("io_state"))

    def _load_timestamp(self, created_at: str, today: date) -> None:
        try:
            utc = datetime.strptime(created_at, _DATE_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            self.date = ""
            self.time = ""
            return
        local = utc.astimezone()
        if local.date() == today:
            self.date = "Today"
        else:
            self.date = local.strftime("%x")
        self.time = local.strftime("%H:%M:%S")

    def _load_io(self, io: IOBase, io_state: Any) -> None:
        self.title = io.name
        self.room_name = io.room_name
        state = _text(io_state)

        if io.io_type in _SWITCH_STYLES:
            style = _SWITCH_STYLES[io.io_type]
            if state == "true":
                self.icon_source = f"icon_{style}_on"
                self.action_text = "On"
            else:
                self.icon_source = f"icon_{style}_off"
                self.action_text = "Off"
        elif io.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
            if _number(io_state) > 0:
                self.icon_source = "icon_light_on"
                self.action_text = "On"
            else:
                self.icon_source = "icon_light_off"
                self.action_text = "Off"
        elif io.io_type is IOType.TEMP:
            self.icon_source = "icon_temp"
            self.action_text = "Temp changed"
        elif io.io_type in (IOType.SHUTTER, IOType.SHUTTER_SMART):
            if state == "true":
                self.icon_source = "icon_shutter_on"
                self.action_text = "Open"
            else:
                self.icon_source = "icon_shutter_off"
                self.action_text = "Closed"
        elif io.io_type is IOType.SCENARIO:
            self.icon_source = "icon_scenario"
            self.action_text = "Started"
        else:
            self.icon_source = ""
            self.action_text = ""

    def load_uuid(self, uuid: str) -> None:
        """Ask the server for a single event; the reply fills the item."""
        self.loading = True
        self.connection.send_json("eventlog", {"uuid": uuid})
        self.connection.log_event_loaded.connect(self.on_log_event)

    def on_log_event(self, data: dict[str, Any]) -> None:
        """Handle the reply to :meth:`load_uuid`; page replies are ignored."""
        if "events" in data:
            return
        self.connection.log_event_loaded.disconnect(self.on_log_event)
        self.loading = False
        self.load_data(data)


class EventLogModel:
    """Pages of the event log, appended as the server sends them."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.loading = False
        self._need_clear = False
        self._items: list[EventLogItem] = []
        connection.log_event_loaded.connect(self.on_log_event)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[EventLogItem]:
        return iter(self._items)

    def load(self, page: int = 0, per_page: int = DEFAULT_PER_PAGE) -> None:
        """Request a page of events unless a request is already pending."""
        if self.loading:
            return
        self.loading = True
        self.connection.send_json("eventlog", {"page": page, "per_page": per_page})

    def load_more(self) -> None:
        """Request the page that follows the events already loaded."""
        log.debug("Load more... rowCount: %d", len(self._items))
        if self.loading:
            return
        self.load(len(self._items) // DEFAULT_PER_PAGE, DEFAULT_PER_PAGE)

    def refresh(self) -> None:
        """Reload the first page, replacing the current events when it arrives."""
        if self.loading:
            return
        self._need_clear = True
        self.load()

    def on_log_event(self, data: dict[str, Any]) -> None:
        """Append the events of a page reply; other replies are ignored."""
        if "events" not in data:
            return
        if self._need_clear:
            self._items.clear()
        self._need_clear = False

        for event in data.get("events") or []:
            item = EventLogItem(self.connection, self.cache)
            item.load_data(dict(event))
            self._items.append(item)

        self.loading = False

    def load_event(self, uuid: str) -> EventLogItem:
        """A new item that loads the single event with this uuid."""
        item = EventLogItem(self.connection, self.cache)
        item.load_uuid(uuid)
        return item

    def get_item(self, idx: int) -> Optional[EventLogItem]:
        """Event at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None