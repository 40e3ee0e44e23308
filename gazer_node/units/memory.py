"""Physical memory usage of the machine."""

import math
from typing import List

import psutil

from gazer_node.units.base import ItemValue, Unit

_MB = 1048576


def _percent_text(part: int, whole: int) -> str:
    if whole == 0:
        if part == 0:
            return "NaN"
        return "+Inf" if part > 0 else "-Inf"
    percents = part / whole * 100.0
    if math.isnan(percents):
        return "NaN"
    return f"{percents:.2f}"


def memory_items(total: int, used: int, free: int) -> List[ItemValue]:
    """Values for memory sizes given in bytes: used percentage and sizes in megabytes."""
    return [
        ItemValue("/", "Mem Used Percent", _percent_text(used, total), "%"),
        ItemValue("/total", "Mem Total", str(total // _MB), "MB"),
        ItemValue("/used", "Mem Used", str(used // _MB), "MB"),
        ItemValue("/free", "Mem Free", str(free // _MB), "MB"),
    ]


class MemoryUnit(Unit):
    """Publishes total, used and free memory."""

    def __init__(self):
        super().__init__("unit104memory")
        self.counter = 0
        self.config.set_parameter_string("0000_00_name_str", "Memory")

    def tick(self) -> None:
        memory = psutil.virtual_memory()
        for item in memory_items(memory.total, memory.used, memory.free):
            self.set_value(item.key, item.name, item.value, item.uom)
        self.counter += 1