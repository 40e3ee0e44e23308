from collections import namedtuple
from unittest import mock

from gazer_node.units.network import LastCounters, NetworkAdaptersUnit

Counters = namedtuple("Counters", "bytes_recv bytes_sent packets_recv packets_sent")


def _by_key(items):
    return {item.key: item for item in items}


def test_default_name_parameter():
    unit = NetworkAdaptersUnit()
    assert unit.config.get_parameter_string("0000_00_name_str", "") == "Network Adapters"


def test_first_reading_reports_only_totals():
    unit = NetworkAdaptersUnit()
    items = unit.process_counters({"eth0": Counters(1000, 2000, 10, 20)}, 100.0)
    keys = [item.key for item in items]
    assert keys == ["/TotalInSpeed", "/TotalOutSpeed", "/TotalSpeed", "/"]
    assert all(item.value == "0.00" for item in items)
    assert all(item.uom == "KB/sec" for item in items)


def test_first_reading_remembers_counters():
    unit = NetworkAdaptersUnit()
    unit.process_counters({"eth0": Counters(1000, 2000, 10, 20)}, 100.0)
    assert unit.last_counters["eth0"] == LastCounters(100.0, 10, 20, 1000, 2000)


def test_second_reading_reports_speeds():
    unit = NetworkAdaptersUnit()
    unit.process_counters({"eth0": Counters(0, 0, 0, 0)}, 100.0)
    items = _by_key(unit.process_counters({"eth0": Counters(2048, 1024, 5, 6)}, 101.0))
    assert items["/eth0/InSpeed"].value == "2.00"
    assert items["/eth0/InSpeed"].name == "In Speed eth0"
    assert items["/eth0/OutSpeed"].value == "1.00"
    assert items["/TotalSpeed"].value == "3.00"
    assert items["/"].value == items["/TotalSpeed"].value
    assert items["/"].name == "Total Speed"


def test_totals_sum_interfaces():
    unit = NetworkAdaptersUnit()
    unit.process_counters({"a": Counters(0, 0, 0, 0), "b": Counters(0, 0, 0, 0)}, 10.0)
    items = _by_key(
        unit.process_counters({"a": Counters(1024, 0, 0, 0), "b": Counters(3072, 0, 0, 0)}, 11.0)
    )
    total = float(items["/a/InSpeed"].value) + float(items["/b/InSpeed"].value)
    assert float(items["/TotalInSpeed"].value) == total
    assert items["/TotalOutSpeed"].value == "0.00"


def test_too_short_interval_reports_no_interface_speed():
    unit = NetworkAdaptersUnit()
    unit.process_counters({"eth0": Counters(0, 0, 0, 0)}, 100.0)
    items = _by_key(unit.process_counters({"eth0": Counters(4096, 0, 0, 0)}, 100.0005))
    assert "/eth0/InSpeed" not in items
    assert items["/TotalInSpeed"].value == "0.00"
    assert unit.last_counters["eth0"].dt == 100.0005


def test_down_interface_reports_zero_and_forgets_counters():
    unit = NetworkAdaptersUnit()
    unit.process_counters({"eth0": Counters(0, 0, 0, 0)}, 100.0)
    items = _by_key(unit.process_counters({"eth0": None}, 101.0))
    assert items["/eth0/InSpeed"].value == "0"
    assert items["/eth0/OutSpeed"].value == "0"
    assert "eth0" not in unit.last_counters


def test_speed_is_never_negative_on_wrap():
    unit = NetworkAdaptersUnit()
    unit.process_counters({"eth0": Counters(5000, 0, 0, 0)}, 100.0)
    items = _by_key(unit.process_counters({"eth0": Counters(10, 0, 0, 0)}, 101.0))
    assert float(items["/eth0/InSpeed"].value) > 0


def test_tick_publishes_values_on_linux():
    unit = NetworkAdaptersUnit()
    readings = iter([{"eth0": Counters(0, 0, 0, 0)}, {"eth0": Counters(1024, 0, 0, 0)}])
    times = iter([50.0, 51.0])
    with mock.patch("gazer_node.units.network.sys.platform", "linux"), mock.patch(
        "gazer_node.units.network.psutil.net_io_counters", side_effect=lambda pernic: next(readings)
    ), mock.patch("gazer_node.units.network.time.time", side_effect=lambda: next(times)):
        unit.tick()
        unit.tick()
    assert unit.get_value("/eth0/InSpeed").value == "1.00"
    assert unit.get_value("/").name == "Total Speed"


def test_tick_reports_error_status():
    unit = NetworkAdaptersUnit()
    with mock.patch("gazer_node.units.network.sys.platform", "linux"), mock.patch(
        "gazer_node.units.network.psutil.net_io_counters", side_effect=OSError("boom")
    ):
        unit.tick()
    value = unit.get_value("/")
    assert value.value == "boom"
    assert value.uom == "error"


def test_tick_on_darwin_publishes_nothing():
    unit = NetworkAdaptersUnit()
    with mock.patch("gazer_node.units.network.sys.platform", "darwin"):
        unit.tick()
    assert unit.values() == {}