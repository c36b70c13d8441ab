"""Splits a room's IOs between a left and a right column, and filters them."""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional

from .io import IOBase
from .iotypes import IOType
from .rooms import RoomModel

_SHUTTERS = frozenset({IOType.SHUTTER, IOType.SHUTTER_SMART})
_LIGHTS = frozenset({IOType.LIGHT, IOType.LIGHT_DIMMER, IOType.LIGHT_RGB})
_TEMPS = frozenset({IOType.TEMP, IOType.ANALOG_IN, IOType.VAR_INT})


class FilterType(Enum):
    """Which IOs of the room a filter lets through."""

    ALL = 0
    LEFT = 1
    RIGHT = 2
    SCENARIO = 3


def _sort_category(io: IOBase) -> int:
    """Scenarios, then shutters, temperatures, lights and everything else."""
    if io.io_type is IOType.SCENARIO:
        return 0
    if io.io_type in _SHUTTERS:
        return 1
    if io.io_type in _TEMPS:
        return 2
    if io.io_type in _LIGHTS:
        return 3
    return 4


class RoomFilterModel:
    """A sorted, filtered view of a :class:`RoomModel`.

    Shutters are grouped on the left, temperatures on the right, and lights
    and other IOs balance the two columns.
    """

    def __init__(
        self,
        source: Optional[RoomModel] = None,
        filter_type: FilterType = FilterType.ALL,
        scenario_visible: bool = True,
    ) -> None:
        self._source = source
        self._filter_type = filter_type
        self._scenario_visible = scenario_visible
        self._left: dict[str, IOBase] = {}
        self._right: dict[str, IOBase] = {}
        self.reset_cache()

    @property
    def source(self) -> Optional[RoomModel]:
        return self._source

    @source.setter
    def source(self, value: Optional[RoomModel]) -> None:
        self._source = value
        self.reset_cache()

    @property
    def filter_type(self) -> FilterType:
        return self._filter_type

    @filter_type.setter
    def filter_type(self, value: FilterType) -> None:
        self._filter_type = value
        self.reset_cache()

    @property
    def scenario_visible(self) -> bool:
        """Whether scenarios are shown in the left and right columns."""
        return self._scenario_visible

    @scenario_visible.setter
    def scenario_visible(self, value: bool) -> None:
        self._scenario_visible = value
        self.reset_cache()

    @property
    def left_ids(self) -> frozenset[str]:
        return frozenset(self._left)

    @property
    def right_ids(self) -> frozenset[str]:
        return frozenset(self._right)

    def reset_cache(self) -> None:
        """Recompute which IOs go to the left column and which to the right."""
        self._left.clear()
        self._right.clear()
        if self._source is None:
            return

        shutters: list[IOBase] = []
        lights: list[IOBase] = []
        temps: list[IOBase] = []
        other: list[IOBase] = []
        total = 0

        for io in self._source:
            if io.io_type in _SHUTTERS:
                shutters.append(io)
            elif io.io_type in _LIGHTS:
                lights.append(io)
            elif io.io_type in _TEMPS:
                temps.append(io)
            else:
                other.append(io)

            if io.io_type is IOType.SHUTTER_SMART:
                total += 3
            elif io.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
                total += 2
            elif self._scenario_visible or io.io_type is not IOType.SCENARIO:
                total += 1

        left_count = 0
        for io in shutters:
            self._left[io.io_id] = io
            left_count += 1 if io.io_type is IOType.SHUTTER else 3

        for io in temps:
            self._right[io.io_id] = io

        half = total // 2

        for io in lights:
            weight = 1 if io.io_type is IOType.LIGHT else 2
            if left_count < half:
                self._left[io.io_id] = io
                left_count += weight
            else:
                self._right[io.io_id] = io

        for io in other:
            if left_count <= half:
                self._left[io.io_id] = io
                left_count += 1
            else:
                self._right[io.io_id] = io

    def accepts(self, io: IOBase) -> bool:
        """Whether an IO of the source passes the current filter."""
        if self._filter_type is FilterType.ALL:
            return True

        hidden_scenario = not self._scenario_visible and io.io_type is IOType.SCENARIO

        if self._filter_type is FilterType.LEFT and io.io_id in self._left:
            return not hidden_scenario
        if self._filter_type is FilterType.RIGHT and io.io_id in self._right:
            return not hidden_scenario
        if self._filter_type is FilterType.SCENARIO and io.io_type is IOType.SCENARIO:
            return True
        return False

    def rows(self) -> list[IOBase]:
        """The accepted IOs of the source, in display order."""
        if self._source is None:
            return []
        self.reset_cache()
        accepted = [io for io in self._source if self.accepts(io)]
        return sorted(accepted, key=lambda io: (_sort_category(io), io.name, io.io_id))

    def get_item(self, idx: int) -> Optional[IOBase]:
        """IO at a row of the view, or None when the row does not exist."""
        items = self.rows()
        if 0 <= idx < len(items):
            return items[idx]
        return None

    def __len__(self) -> int:
        return len(self.rows())

    def __iter__(self) -> Iterator[IOBase]:
        return iter(self.rows())