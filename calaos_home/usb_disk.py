"""Removable disks offered as installation targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from .events import Signal

HEADER_TEXT = "Removable disks"

_UNITS = ("KB", "MB", "GB", "TB")


def size_human(size: int) -> str:
    """Byte count as text with two decimals, e.g. ``1.50 GB``."""
    num = float(size)
    unit = "bytes"
    units = iter(_UNITS)
    while num >= 1024.0:
        next_unit = next(units, None)
        if next_unit is None:
            break
        unit = next_unit
        num /= 1024.0
    return f"{num:.2f} {unit}"


@dataclass
class UsbDisk:
    """One storage device."""

    name: str = ""
    volumes: list[str] = field(default_factory=list)
    size: int = 0
    size_human: str = ""
    sector_size: int = 0
    physical_device: str = ""
    is_removable: bool = False
    is_system: bool = False
    is_usb: bool = False
    is_sd: bool = False


class UsbDiskModel:
    """The storage devices found on the machine; emits ``model_reset`` on change."""

    def __init__(self) -> None:
        self._items: list[UsbDisk] = []
        self.model_reset = Signal()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[UsbDisk]:
        return iter(self._items)

    def load(self, devices: Iterable[dict[str, Any]]) -> None:
        """Replace the disks with a device listing; devices of size 0 are skipped."""
        disks = []
        for dev in devices:
            size = int(dev.get("size") or 0)
            if size == 0:
                continue
            disks.append(
                UsbDisk(
                    name=str(dev.get("description", "")),
                    volumes=[str(m) for m in dev.get("mountpoints") or []],
                    size=size,
                    size_human=size_human(size),
                    physical_device=str(dev.get("device", "")),
                    is_removable=bool(dev.get("isRemovable", False)),
                    is_system=bool(dev.get("isSystem", False)),
                    is_usb=bool(dev.get("isUSB", False)),
                    is_sd=bool(dev.get("isCard", False)),
                )
            )
        self._items = disks
        self.model_reset.emit()

    def item_at(self, idx: int) -> Optional[UsbDisk]:
        """Disk at a row, or None when the row does not exist."""
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def display_text(self, idx: int) -> Optional[str]:
        """``volumes - name`` for a row, or None when the row does not exist."""
        disk = self.item_at(idx)
        if disk is None:
            return None
        return f"{', '.join(disk.volumes)} - {disk.name}"

    def clear(self) -> None:
        self._items = []
        self.model_reset.emit()