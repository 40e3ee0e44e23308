"""Traffic speed of the machine's network interfaces."""

import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import psutil

from gazer_node.units.base import ItemValue, Unit

_COUNTER_MODULUS = 2**64
_MIN_INTERVAL = 0.001


@dataclass(frozen=True)
class LastCounters:
    """Counters of one interface as seen at the previous reading."""

    dt: float
    total_in: int
    total_out: int
    total_in_bytes: int
    total_out_bytes: int


def _speed(current: int, previous: int, seconds: float) -> float:
    """Kilobytes per second between two readings of a wrapping 64-bit counter."""
    return ((current - previous) % _COUNTER_MODULUS) / seconds / 1024.0


class NetworkAdaptersUnit(Unit):
    """Publishes incoming, outgoing and total speed of every network interface."""

    def __init__(self):
        super().__init__("unit101networkadapters")
        self.last_counters: Dict[str, LastCounters] = {}
        self.addresses_of_interfaces: Dict[str, str] = {}
        self.config.set_parameter_string("0000_00_name_str", "Network Adapters")

    def tick(self) -> None:
        for item in self._collect():
            self.set_value(item.key, item.name, item.value, item.uom)

    def _collect(self) -> List[ItemValue]:
        if sys.platform == "darwin":
            return []
        windows = sys.platform == "win32"
        try:
            io_counters = psutil.net_io_counters(pernic=True)
            stats = psutil.net_if_stats() if windows else {}
        except OSError as err:
            return [ItemValue("/", "Status", str(err), "error")]

        if not windows:
            counters: Dict[str, Optional[Any]] = dict(io_counters)
        else:
            self._update_addresses()
            counters = {}
            for name, counter in io_counters.items():
                if name.lower().startswith("loopback"):
                    continue
                stat = stats.get(name)
                counters[name] = counter if stat is not None and stat.isup else None
        return self.process_counters(counters, time.time())

    def _update_addresses(self) -> None:
        try:
            all_addresses = psutil.net_if_addrs()
        except OSError:
            return
        for name, addresses in all_addresses.items():
            text = " ".join(address.address for address in addresses)
            if self.addresses_of_interfaces.get(name) != text:
                self.addresses_of_interfaces[name] = text

    def process_counters(self, counters: Mapping[str, Optional[Any]], now: float) -> List[ItemValue]:
        """Turn one reading of interface counters into published values.

        ``counters`` maps interface names to objects carrying ``bytes_recv``,
        ``bytes_sent``, ``packets_recv`` and ``packets_sent``; ``None`` marks an
        interface that is not up. ``now`` is the reading time in seconds.
        """
        items: List[ItemValue] = []
        total_in_speed = 0.0
        total_out_speed = 0.0

        for name, counter in counters.items():
            if counter is None:
                self.last_counters.pop(name, None)
                items.append(ItemValue(f"/{name}/InSpeed", f"In Speed {name}", "0", "KB/sec"))
                items.append(ItemValue(f"/{name}/OutSpeed", f"Out Speed {name}", "0", "KB/sec"))
                continue

            in_bytes = int(counter.bytes_recv)
            out_bytes = int(counter.bytes_sent)
            previous = self.last_counters.get(name)
            if previous is not None:
                seconds = now - previous.dt
                if seconds > _MIN_INTERVAL:
                    in_speed = _speed(in_bytes, previous.total_in_bytes, seconds)
                    out_speed = _speed(out_bytes, previous.total_out_bytes, seconds)
                    items.append(ItemValue(f"/{name}/InSpeed", f"In Speed {name}", f"{in_speed:.2f}", "KB/sec"))
                    items.append(ItemValue(f"/{name}/OutSpeed", f"Out Speed {name}", f"{out_speed:.2f}", "KB/sec"))
                    total_in_speed += in_speed
                    total_out_speed += out_speed

            self.last_counters[name] = LastCounters(
                dt=now,
                total_in=int(counter.packets_recv),
                total_out=int(counter.packets_sent),
                total_in_bytes=in_bytes,
                total_out_bytes=out_bytes,
            )

        total_speed = total_in_speed + total_out_speed
        items.append(ItemValue("/TotalInSpeed", "Total In Speed", f"{total_in_speed:.2f}", "KB/sec"))
        items.append(ItemValue("/TotalOutSpeed", "Total Out Speed", f"{total_out_speed:.2f}", "KB/sec"))
        items.append(ItemValue("/TotalSpeed", "Total Speed", f"{total_speed:.2f}", "KB/sec"))
        items.append(ItemValue("/", "Total Speed", f"{total_speed:.2f}", "KB/sec"))
        return items