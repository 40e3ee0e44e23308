"""Common machinery of a unit: identity, configuration, values and a work thread."""

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from gazer_node.config import ConfigUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemValue:
    """One published value of a unit."""

    key: str = ""
    name: str = ""
    value: str = ""
    uom: str = ""


class Unit:
    """A data source that refreshes its values by calling ``tick`` periodically."""

    tick_interval = 0.5
    stop_timeout = 1.0

    def __init__(self, unit_type: str):
        self.id = ""
        self.key: Optional[Any] = None
        self.type = unit_type
        self._lock = threading.Lock()
        self._values: Dict[str, ItemValue] = {}
        self._config = ConfigUnit(type=unit_type)
        self._thread: Optional[threading.Thread] = None
        self._stopping = threading.Event()

    @property
    def config(self) -> ConfigUnit:
        """The live configuration object of the unit."""
        with self._lock:
            return self._config

    def get_config(self) -> ConfigUnit:
        """A copy of the configuration."""
        with self._lock:
            return dataclasses.replace(self._config, parameters=dict(self._config.parameters))

    def set_config(self, config: ConfigUnit) -> None:
        """Replace the configuration with a copy of ``config``."""
        copy = dataclasses.replace(config, parameters=dict(config.parameters))
        with self._lock:
            self._config = copy

    def get_value(self, key: str) -> ItemValue:
        """The value stored under ``key``, or an empty item if there is none."""
        with self._lock:
            return self._values.get(key, ItemValue())

    def values(self) -> Dict[str, ItemValue]:
        """A snapshot of all values by key."""
        with self._lock:
            return dict(self._values)

    def set_value(self, key: str, name: str, value: str, uom: str) -> None:
        item = ItemValue(key=key, name=name, value=value, uom=uom)
        with self._lock:
            self._values[key] = item

    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the work thread unless it is already running."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stopping = threading.Event()
            self._thread = threading.Thread(
                target=self._work, args=(self._stopping,), name=f"unit-{self.type}", daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        """Ask the work thread to finish and wait for it a limited time."""
        with self._lock:
            thread = self._thread
            if thread is None or not thread.is_alive():
                return
            self._stopping.set()
        thread.join(self.stop_timeout)
        if thread.is_alive():
            logger.warning("Unit stop timeout exceeded, force stopping")

    def _work(self, stopping: threading.Event) -> None:
        while not stopping.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Unit %s tick failed", self.type)
            stopping.wait(self.tick_interval)

    def tick(self) -> None:
        """Refresh the unit's values; the base unit has nothing to do."""