"""The catalogue of unit types that can be created, grouped into categories."""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from gazer_node.units.base import Unit

UnitConstructor = Callable[[], Unit]


@dataclass(frozen=True)
class UnitCategory:
    """A named group of unit types."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class UnitTypeRecord:
    """A registered unit type and the callable that builds a fresh unit of it."""

    type_name: str
    type_display_name: str
    categories: Tuple[str, ...]
    constructor: UnitConstructor


class UnitsRegistry:
    """Unit types by name, plus the sorted list of categories they belong to."""

    def __init__(self):
        self.unit_types: Dict[str, UnitTypeRecord] = {}
        self.unit_categories: List[UnitCategory] = []

    def register_unit_type(self, unit_type: str, display_name: str, constructor: UnitConstructor, *args: str) -> None:
        """Register a unit type; the extra arguments are the names of its categories."""
        self.unit_types[unit_type] = UnitTypeRecord(
            type_name=unit_type,
            type_display_name=display_name,
            categories=tuple(args),
            constructor=constructor,
        )

    def update_unit_categories(self) -> None:
        """Rebuild the category list from the registered types, sorted by name."""
        names = {category for record in self.unit_types.values() for category in record.categories}
        self.unit_categories = [UnitCategory(name=name) for name in sorted(names)]

    def create_unit(self, unit_type: str) -> Optional[Unit]:
        """A new unit of the given type, or None if the type is not registered."""
        record = self.unit_types.get(unit_type)
        if record is None:
            return None
        return record.constructor()

    def get_unit_type_default_parameters(self, unit_type: str) -> Dict[str, str]:
        """The parameters a fresh unit of the type starts with; empty for an unknown type."""
        unit = self.create_unit(unit_type)
        if unit is None:
            return {}
        return dict(unit.get_config().parameters)


def default_registry() -> UnitsRegistry:
    """A registry holding every unit type the node provides."""
    from gazer_node.units.demosignal import DemoSignalUnit
    from gazer_node.units.memory import MemoryUnit
    from gazer_node.units.network import NetworkAdaptersUnit
    from gazer_node.units.process import ProcessUnit
    from gazer_node.units.serialkeyvalue import SerialPortKeyValueUnit
    from gazer_node.units.storage import StorageUnit

    registry = UnitsRegistry()
    registry.register_unit_type("unit001demosignal", "Demo Signal", DemoSignalUnit, "General")
    registry.register_unit_type("unit101networkadapters", "Network Adapters", NetworkAdaptersUnit, "Computer")
    registry.register_unit_type("unit102process", "Process", ProcessUnit, "Computer")
    registry.register_unit_type("unit103storage", "Storage", StorageUnit, "Computer")
    registry.register_unit_type("unit104memory", "Memory", MemoryUnit, "Computer")
    registry.register_unit_type(
        "unit301serialportkeyvalue", "Serial Port Key=Value", SerialPortKeyValueUnit, "SerialPort"
    )
    registry.update_unit_categories()
    return registry