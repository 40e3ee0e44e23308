"""Unit configuration: parameters, persistence and display names of properties."""

import json
import math
import re
import secrets
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

PROPERTY_NAMES = {
    "0000_00_name_str": "Unit Name",
    "0100_00_offset_num": "Offset",
    "0102_00_process_name_str": "Process Name",
    "0102_01_process_id_int": "Process ID",
}


def prop_name(prop_code: str) -> str:
    """Human-readable name of a property code, or the code itself if unknown."""
    return PROPERTY_NAMES.get(prop_code, prop_code)


def generate_id() -> str:
    """A random 128-bit identifier as 32 hex characters."""
    return secrets.token_hex(16)


_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean: {text!r}")


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    unsigned = text.lstrip("+-")
    if len(text) - len(unsigned) <= 1:
        lowered = unsigned.lower()
        if lowered in ("inf", "infinity"):
            return -math.inf if text.startswith("-") else math.inf
        if lowered == "nan" and unsigned == text:
            return math.nan
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"invalid number: {text!r}")
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range: {text!r}")
    return value


def _format_float(value: float) -> str:
    """Shortest text for a float, in exponent form when the exponent is below -4 or above 5."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digits, exponent = Decimal(repr(value)).as_tuple()
    point = len(digits) + exponent
    text = "".join(map(str, digits)).rstrip("0")
    count = len(text)
    prefix = "-" if sign else ""
    exp = point - 1
    if exp < -4 or exp >= 6:
        mantissa = text[0] + ("." + text[1:] if count > 1 else "")
        return f"{prefix}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{text}"
    if point >= count:
        return f"{prefix}{text}{'0' * (point - count)}"
    return f"{prefix}{text[:point]}.{text[point:]}"


@dataclass
class ConfigUnit:
    """Configuration of one unit: identity, keys, string parameters and translation flag."""

    id: str = ""
    type: str = ""
    private_key: str = ""
    public_key: str = ""
    parameters: Dict[str, str] = field(default_factory=dict)
    translate: bool = True

    def get_parameter_string(self, key: str, default: str) -> str:
        return self.parameters.get(key, default)

    def get_parameter_bool(self, key: str, default: bool) -> bool:
        try:
            return _parse_bool(self.get_parameter_string(key, "true" if default else "false"))
        except ValueError:
            return default

    def get_parameter_int(self, key: str, default: int) -> int:
        try:
            return _parse_int(self.get_parameter_string(key, str(default)))
        except ValueError:
            return default

    def get_parameter_float(self, key: str, default: float) -> float:
        try:
            return _parse_float(self.get_parameter_string(key, _format_float(default)))
        except ValueError:
            return default

    def set_parameter_string(self, key: str, value: str) -> None:
        self.parameters[key] = value

    def set_parameter_bool(self, key: str, value: bool) -> None:
        self.set_parameter_string(key, "true" if value else "false")

    def set_parameter_int(self, key: str, value: int) -> None:
        self.set_parameter_string(key, str(int(value)))

    def set_parameter_float(self, key: str, value: float) -> None:
        self.set_parameter_string(key, _format_float(float(value)))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "private_key": self.private_key,
            "public_key": self.public_key,
            "parameters": dict(sorted(self.parameters.items())),
            "translate": self.translate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ConfigUnit":
        """Build a unit from stored JSON data; absent fields take their zero values."""
        return cls(
            id=str(data.get("id") or ""),
            type=str(data.get("type") or ""),
            private_key=str(data.get("private_key") or ""),
            public_key=str(data.get("public_key") or ""),
            parameters={str(k): str(v) for k, v in (data.get("parameters") or {}).items()},
            translate=bool(data.get("translate", False)),
        )


KeyFactory = Callable[[], Tuple[str, str]]


class ConfigStore:
    """The list of configured units, kept in ``config.json`` inside a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self._units: List[ConfigUnit] = []
        # Returns (private_key, public_key) for a new unit; when unset the
        # unit keeps whatever keys it already carries.
        self.key_factory: Optional[KeyFactory] = None

    @property
    def path(self) -> Path:
        return self.directory / "config.json"

    def add_unit(self, unit_config: ConfigUnit) -> str:
        """Give the unit a fresh id (and keys, if a key factory is set), store it and save."""
        if self.key_factory is not None:
            unit_config.private_key, unit_config.public_key = self.key_factory()
        unit_config.id = generate_id()
        self._units.append(unit_config)
        self.save()
        return unit_config.id

    def remove_unit(self, unit_id: str) -> None:
        for unit in self._units:
            if unit.id == unit_id:
                self._units.remove(unit)
                self.save()
                return

    def save(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        document = {"units": [unit.to_dict() for unit in self._units]}
        self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")

    def load(self) -> None:
        """Read the stored units; raises OSError or ValueError if the file cannot be used."""
        document = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError("configuration must be a JSON object")
        self._units = [ConfigUnit.from_dict(item) for item in document.get("units") or []]

    def units(self) -> List[ConfigUnit]:
        return list(self._units)

    def unit_by_id(self, unit_id: str) -> Optional[ConfigUnit]:
        return next((unit for unit in self._units if unit.id == unit_id), None)