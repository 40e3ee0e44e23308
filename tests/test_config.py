import json
import math

import pytest

from gazer_node.config import ConfigStore, ConfigUnit, generate_id, prop_name


def test_prop_name_known_and_unknown():
    assert prop_name("0000_00_name_str") == "Unit Name"
    assert prop_name("0102_01_process_id_int") == "Process ID"
    assert prop_name("zzz_custom") == "zzz_custom"


def test_generate_id_is_hex_and_unique():
    first = generate_id()
    assert len(first) == 32
    int(first, 16)
    assert first != generate_id()


def test_new_unit_defaults():
    unit = ConfigUnit()
    assert unit.translate is True
    assert unit.parameters == {}


def test_string_parameter_default_and_set():
    unit = ConfigUnit()
    assert unit.get_parameter_string("k", "dflt") == "dflt"
    unit.set_parameter_string("k", "v")
    assert unit.get_parameter_string("k", "dflt") == "v"


@pytest.mark.parametrize("value", [True, False])
def test_bool_round_trip(value):
    unit = ConfigUnit()
    unit.set_parameter_bool("b", value)
    assert unit.get_parameter_bool("b", not value) is value


@pytest.mark.parametrize("text, expected", [("1", True), ("T", True), ("FALSE", False), ("f", False)])
def test_bool_accepted_spellings(text, expected):
    unit = ConfigUnit(parameters={"b": text})
    assert unit.get_parameter_bool("b", not expected) is expected


def test_bool_invalid_gives_default():
    unit = ConfigUnit(parameters={"b": "yes"})
    assert unit.get_parameter_bool("b", True) is True
    assert unit.get_parameter_bool("b", False) is False


@pytest.mark.parametrize("value", [0, -5, 42, 2**63 - 1, -(2**63)])
def test_int_round_trip(value):
    unit = ConfigUnit()
    unit.set_parameter_int("i", value)
    assert unit.get_parameter_int("i", 7) == value


@pytest.mark.parametrize("text", ["abc", "1.5", "1_000", " 3", str(2**63), ""])
def test_int_invalid_gives_default(text):
    unit = ConfigUnit(parameters={"i": text})
    assert unit.get_parameter_int("i", 9) == 9


def test_int_missing_gives_default():
    assert ConfigUnit().get_parameter_int("i", 11) == 11


@pytest.mark.parametrize("value", [0.0, 1.5, -2.25, 123456.0, 1e8, 1e-7, 0.1, 3.141592653589793, 1e300])
def test_float_round_trip(value):
    unit = ConfigUnit()
    unit.set_parameter_float("x", value)
    assert unit.get_parameter_float("x", -1.0) == value


def test_float_formatting():
    unit = ConfigUnit()
    unit.set_parameter_float("x", 0.0)
    assert unit.parameters["x"] == "0"
    unit.set_parameter_float("x", 1e8)
    assert unit.parameters["x"] == "1e+08"
    unit.set_parameter_float("x", 1.5)
    assert unit.parameters["x"] == "1.5"


def test_float_special_values():
    unit = ConfigUnit(parameters={"a": "+Inf", "b": "NaN"})
    assert unit.get_parameter_float("a", 0.0) == math.inf
    assert math.isnan(unit.get_parameter_float("b", 0.0))


@pytest.mark.parametrize("text", ["abc", "1e400", "1,5", "", " 1"])
def test_float_invalid_gives_default(text):
    unit = ConfigUnit(parameters={"x": text})
    assert unit.get_parameter_float("x", 2.5) == 2.5


def test_dict_round_trip():
    unit = ConfigUnit(id="abc", type="t", private_key="secret", public_key="pub",
                      parameters={"b": "2", "a": "1"}, translate=False)
    data = unit.to_dict()
    assert set(data) == {"id", "type", "private_key", "public_key", "parameters", "translate"}
    assert list(data["parameters"]) == ["a", "b"]
    assert ConfigUnit.from_dict(data) == unit


def test_from_dict_missing_fields():
    unit = ConfigUnit.from_dict({"id": "x"})
    assert unit.id == "x"
    assert unit.parameters == {}
    assert unit.translate is False


def test_store_add_save_load(tmp_path):
    store = ConfigStore(tmp_path / "cfg")
    unit = ConfigUnit(type="unit001demosignal", parameters={"0000_00_name_str": "Demo Signal"})
    unit_id = store.add_unit(unit)
    assert unit.id == unit_id
    assert store.path.is_file()

    other = ConfigStore(tmp_path / "cfg")
    other.load()
    loaded = other.unit_by_id(unit_id)
    assert loaded == unit
    assert [u.id for u in other.units()] == [unit_id]


def test_store_key_factory(tmp_path):
    store = ConfigStore(tmp_path)
    store.key_factory = lambda: ("secret", "public-side")
    unit = ConfigUnit(type="t")
    store.add_unit(unit)
    assert (unit.private_key, unit.public_key) == ("secret", "public-side")


def test_store_file_layout(tmp_path):
    store = ConfigStore(tmp_path)
    store.add_unit(ConfigUnit(type="t"))
    document = json.loads(store.path.read_text())
    assert list(document) == ["units"]
    assert document["units"][0]["type"] == "t"


def test_store_remove_unit(tmp_path):
    store = ConfigStore(tmp_path)
    first = store.add_unit(ConfigUnit(type="a"))
    second = store.add_unit(ConfigUnit(type="b"))
    store.remove_unit(first)
    assert [u.id for u in store.units()] == [second]
    assert store.unit_by_id(first) is None
    store.remove_unit("missing")
    reloaded = ConfigStore(tmp_path)
    reloaded.load()
    assert [u.id for u in reloaded.units()] == [second]


def test_store_load_missing_file(tmp_path):
    store = ConfigStore(tmp_path / "nowhere")
    with pytest.raises(FileNotFoundError):
        store.load()


def test_store_load_invalid_json(tmp_path):
    (tmp_path / "config.json").write_text("{not json")
    with pytest.raises(ValueError):
        ConfigStore(tmp_path).load()


def test_store_units_is_a_copy(tmp_path):
    store = ConfigStore(tmp_path)
    store.add_unit(ConfigUnit(type="a"))
    listed = store.units()
    listed.clear()
    assert len(store.units()) == 1