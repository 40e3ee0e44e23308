"""A synthetic signal made of three sine waves and some noise."""

import math
import random
import time

from gazer_node.units.base import Unit


def demo_signal_value(timestamp: int, offset: float, noise: float) -> str:
    """The signal at ``timestamp`` (seconds), shifted by ``offset`` and ``noise``, to one decimal."""
    value = math.sin((timestamp % 60) / 60.0 * 2.0 * math.pi) * 100 + 100
    value += math.sin((timestamp % 300) / 300.0 * 2.0 * math.pi) * 50 + 50
    value += math.sin((timestamp % 10) / 10.0 * 2.0 * math.pi) * 20 + 20
    value += noise
    value += offset
    return f"{value:.1f}"


class DemoSignalUnit(Unit):
    """Publishes a demo signal that changes over time."""

    def __init__(self):
        super().__init__("unit001demosignal")
        self.counter = 0
        self.config.set_parameter_string("0000_00_name_str", "Demo Signal")
        self.config.set_parameter_float("0100_00_offset_num", 0.0)

    def tick(self) -> None:
        offset = self.config.get_parameter_float("0100_00_offset_num", 0.0)
        noise = (random.random() - 0.5) * 10
        value = demo_signal_value(int(time.time()), offset, noise)
        self.set_value("/", "Demo Signal", value, "units")
        self.counter += 1