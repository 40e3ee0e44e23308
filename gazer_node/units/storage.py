"""Disk space of the machine's drives."""

import os
import string
import sys
from typing import List

import psutil

from gazer_node.units.base import ItemValue, Unit

_MB = 1024 * 1024
_DRIVE_LETTERS = string.ascii_uppercase


def bits_to_drives(bitmap: int) -> List[str]:
    """Drive letters whose bits are set, bit 0 being drive A."""
    return [letter for position, letter in enumerate(_DRIVE_LETTERS) if (bitmap >> position) & 1]


def _percent_text(part: int, whole: int, digits: int) -> str:
    if whole == 0:
        if part == 0:
            return "NaN"
        return "+Inf" if part > 0 else "-Inf"
    return f"{100 * part / whole:.{digits}f}"


def disk_items(disk: str, total: int, free: int) -> List[ItemValue]:
    """Values for one drive given its total and free bytes."""
    used = total - free
    return [
        ItemValue(f"/{disk}/Total", f"Total {disk}", str(total // _MB), "MB"),
        ItemValue(f"/{disk}/Free", f"Free {disk}", str(free // _MB), "MB"),
        ItemValue(f"/{disk}/Used", f"Used {disk}", str(used // _MB), "MB"),
        ItemValue(f"/{disk}/Utilization", f"Utilization {disk}", _percent_text(used, total, 2), "%"),
    ]


def _logical_drives() -> List[str]:
    return [letter for letter in _DRIVE_LETTERS if os.path.exists(f"{letter}:\\")]


class StorageUnit(Unit):
    """Publishes size and usage of every drive on Windows; other systems report nothing."""

    def __init__(self):
        super().__init__("unit103storage")
        self.disk = ""
        self.config.set_parameter_string("0000_00_name_str", "Storage")

    def tick(self) -> None:
        for item in self._collect():
            self.set_value(item.key, item.name, item.value, item.uom)

    def _collect(self) -> List[ItemValue]:
        if sys.platform != "win32":
            return []
        items: List[ItemValue] = []
        total_space = 0
        used_space = 0
        for disk in _logical_drives():
            try:
                usage = psutil.disk_usage(f"{disk}:\\")
            except OSError as err:
                items.append(ItemValue("/error", "Status", str(err), "error"))
                continue
            items.append(ItemValue("/", "Status", "", ""))
            items.extend(disk_items(disk, usage.total, usage.free))
            total_space += usage.total
            used_space += usage.total - usage.free
        items.append(ItemValue("/", "Used Percents", _percent_text(used_space, total_space, 1), "%"))
        return items