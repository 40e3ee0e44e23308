"""The running node: configured units, their state and publishing of their values."""

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from gazer_node.client import ItemToSet, U00Client
from gazer_node.config import ConfigStore, ConfigUnit
from gazer_node.registry import UnitsRegistry, default_registry
from gazer_node.units.base import Unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """Something that happened in the system, for the user interface to react to."""

    name: str
    parameter: str = ""


@dataclass(frozen=True)
class UnitStateDataItem:
    key: str
    name: str
    value: str
    uom: str


@dataclass
class UnitState:
    id: str
    unit_type: str
    unit_type_display_name: str
    config: ConfigUnit
    values: List[UnitStateDataItem] = field(default_factory=list)


@dataclass
class State:
    units: List[UnitState] = field(default_factory=list)


class System:
    """Owns the units built from the configuration and publishes their values."""

    send_interval = 0.5

    def __init__(self, config_store: ConfigStore, registry: Optional[UnitsRegistry] = None, client=None):
        self.config_store = config_store
        self.registry = registry if registry is not None else default_registry()
        self.client = client if client is not None else U00Client()
        self._lock = threading.Lock()
        self._units: List[Unit] = []
        self._events: List[Event] = []
        self._sender: Optional[threading.Thread] = None
        self._stopping = threading.Event()

    def _snapshot(self) -> List[Unit]:
        with self._lock:
            return list(self._units)

    def _find(self, unit_id: str) -> Optional[Unit]:
        return next((unit for unit in self._snapshot() if unit.id == unit_id), None)

    @staticmethod
    def _attach(unit: Unit, unit_config: ConfigUnit) -> None:
        unit.id = unit_config.id
        unit.key = unit_config.private_key or None
        unit.set_config(unit_config)

    def start(self) -> None:
        """Load the configuration, create and start its units and begin publishing."""
        try:
            self.config_store.load()
        except (OSError, ValueError) as err:
            logger.warning("Cannot load config: %s", err)

        for unit_config in self.config_store.units():
            unit = self.registry.create_unit(unit_config.type)
            if unit is None:
                logger.warning("Cannot create unit of type %s", unit_config.type)
                continue
            self._attach(unit, unit_config)
            with self._lock:
                self._units.append(unit)

        for unit in self._snapshot():
            unit.start()

        self._stopping = threading.Event()
        self._sender = threading.Thread(target=self._work, args=(self._stopping,), name="sender", daemon=True)
        self._sender.start()

    def stop(self) -> None:
        """Stop publishing and stop every unit."""
        self._stopping.set()
        if self._sender is not None:
            self._sender.join(self.send_interval + 5)
            self._sender = None
        for unit in self._snapshot():
            unit.stop()

    def _work(self, stopping: threading.Event) -> None:
        while not stopping.is_set():
            try:
                self.send_values()
            except Exception:
                logger.exception("Sending values failed")
            stopping.wait(self.send_interval)

    def start_unit(self, unit_id: str) -> None:
        """Reload the unit's configuration from the store and start it."""
        unit = self._find(unit_id)
        if unit is None:
            return
        unit_config = self.config_store.unit_by_id(unit_id)
        if unit_config is None:
            return
        unit.set_config(unit_config)
        unit.start()

    def stop_unit(self, unit_id: str) -> None:
        unit = self._find(unit_id)
        if unit is not None:
            unit.stop()

    def set_unit_translate(self, unit_id: str, translate: bool) -> None:
        """Turn publishing of a unit's values on or off, save it and restart the unit."""
        unit_config = self.config_store.unit_by_id(unit_id)
        if unit_config is None:
            return
        unit_config.translate = translate
        self.config_store.save()
        self.emit_event("config_changed", "")
        self.stop_unit(unit_id)
        self.start_unit(unit_id)

    def emit_event(self, name: str, parameter: str = "") -> None:
        with self._lock:
            self._events.append(Event(name, parameter))

    def get_and_clear_events(self) -> List[Event]:
        with self._lock:
            events, self._events = self._events, []
        return events

    def send_values(self) -> None:
        """Publish every value of every unit that has translation on and a key."""
        for unit in self._snapshot():
            if not unit.get_config().translate:
                continue
            for value in unit.values().values():
                key = unit.key
                if key is None:
                    continue
                item = ItemToSet(path=value.key, name=value.name, value=value.value, uom=value.uom)
                try:
                    self.client.write(key, [item])
                except OSError:
                    pass

    def get_state(self) -> State:
        """A snapshot of every unit with its values sorted by key."""
        state = State()
        for unit in self._snapshot():
            record = self.registry.unit_types.get(unit.type)
            values = sorted(
                (UnitStateDataItem(v.key, v.name, v.value, v.uom) for v in unit.values().values()),
                key=lambda item: item.key,
            )
            state.units.append(
                UnitState(
                    id=unit.id,
                    unit_type=unit.type,
                    unit_type_display_name=record.type_display_name if record else "",
                    config=unit.get_config(),
                    values=values,
                )
            )
        return state

    def add_unit(self, unit_config: ConfigUnit) -> str:
        """Store a new unit in the configuration, create and start it; returns its id."""
        unit_id = self.config_store.add_unit(unit_config)
        unit = self.registry.create_unit(unit_config.type)
        if unit is None:
            logger.warning("Cannot create unit of type %s", unit_config.type)
            return unit_id
        self._attach(unit, unit_config)
        with self._lock:
            self._units.append(unit)
        unit.start()
        self.emit_event("config_changed", "")
        self.emit_event("unit_added", unit_id)
        return unit_id

    def remove_unit(self, unit_id: str) -> None:
        self.config_store.remove_unit(unit_id)
        unit = self._find(unit_id)
        if unit is None:
            return
        unit.stop()
        with self._lock:
            self._units.remove(unit)
        self.emit_event("config_changed", "")

    def get_unit_default_item_value(self, unit_id: str) -> str:
        """The value the unit publishes at its root path, or an empty string."""
        unit = self._find(unit_id)
        if unit is None:
            return ""
        return unit.get_value("/").value