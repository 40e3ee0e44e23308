# gazer_node

`gazer_node` is a small monitoring node. It runs a set of *units*. Each unit
samples something on the local machine every half second. The node posts the
collected values as form data to `https://gazer.cloud/set/<key>`, where
`<key>` is the unit's private key.

## Units

| Type                         | Display name            | Category   | Class                    |
|------------------------------|-------------------------|------------|--------------------------|
| `unit001demosignal`          | Demo Signal             | General    | `DemoSignalUnit`         |
| `unit101networkadapters`     | Network Adapters        | Computer   | `NetworkAdaptersUnit`    |
| `unit102process`             | Process                 | Computer   | `ProcessUnit`            |
| `unit103storage`             | Storage                 | Computer   | `StorageUnit`            |
| `unit104memory`              | Memory                  | Computer   | `MemoryUnit`             |
| `unit301serialportkeyvalue`  | Serial Port Key=Value   | SerialPort | `SerialPortKeyValueUnit` |

All of these classes live in `gazer_node.units` and derive from
`gazer_node.units.base.Unit`.

* **Demo Signal** (`gazer_node.units.demosignal`) produces a waveform built
  from three sine waves plus a little random noise. The
  `0100_00_offset_num` parameter shifts it.
* **Network Adapters** (`gazer_node.units.network`) reports the in, out and
  total speed of each interface and of all interfaces together, in KB/sec.
  On macOS it reports nothing.
* **Process** (`gazer_node.units.process`) watches one process, chosen by the
  `0102_00_process_name_str` parameter (default `explorer.exe`), the
  `0102_01_process_id_int` parameter (default `0`, meaning any id), or both.
  * On Linux and other POSIX systems a name matches when the configured text
    appears anywhere in the process name. The unit reports CPU usage,
    resident and virtual memory, status and the number of open file
    descriptors.
  * On Windows the whole name must match, ignoring case. The unit reports
    memory, threads, handles, CPU times and usage, and I/O counters.
  * On macOS it reports nothing.
* **Storage** (`gazer_node.units.storage`) reports total, free and used space
  and the utilization of every drive letter. It does this only on Windows; on
  other systems it reports nothing.
* **Memory** (`gazer_node.units.memory`) reports the used percentage, and the
  total, used and free memory in MB.
* **Serial Port Key=Value** (`gazer_node.units.serialkeyvalue`) reads lines of
  the form `key=value` from a serial port (default `COM3` at 9600 baud, 8N1).
  It publishes each key under `/<key>`, and also under `/`.

Every unit has a name parameter, `0000_00_name_str`.
`gazer_node.config.prop_name` turns parameter codes into readable labels.

## Running

```
gazer-node [--home DIR] [--list] [--add TYPE ...] [--duration SECONDS]
```

* `--home DIR` sets the directory that holds the storage directory. The
  default is the user's home directory.
* `--list` prints the configured units as `id`, `type` and `name`, separated
  by tabs, and exits.
* `--add TYPE` adds a unit of the given type with that type's default
  parameters and starts it. It can be given more than once.
* `--duration SECONDS` stops the node after that many seconds. Without it
  the node runs until interrupted.

### Where the node keeps its files

The node keeps its state in a hidden directory, `.gazer_node`, inside the
home directory. It writes log messages to `logs/gazer_node.log` in that
directory.

Unit configuration is stored as `config.json` in the same directory. Each
unit there has:

* an id,
* a type,
* a private key and a public key,
* its string parameters,
* a `translate` flag.

### Which units are published

A unit whose `translate` flag is off keeps sampling, but its values are not
published. A unit without a private key is not published either.

## Using the library

```python
from gazer_node.base58 import base58_to_bytes, bytes_to_base58
from gazer_node.config import prop_name
from gazer_node.registry import default_registry

encoded = bytes_to_base58(b"\x00\x01\x02")
assert base58_to_bytes(encoded) == b"\x00\x01\x02"

print(prop_name("0100_00_offset_num"))   # Offset

registry = default_registry()
print(registry.get_unit_type_default_parameters("unit001demosignal"))
```

### Configuration store

A configuration store can be kept in any directory. Give it a `key_factory`
that returns a `(private_key, public_key)` pair, and every unit added through
`add_unit` receives keys from it:

```python
from gazer_node.config import ConfigStore, ConfigUnit

store = ConfigStore("/tmp/gazer-demo")
store.key_factory = lambda: ("placeholder", "placeholder")
unit_id = store.add_unit(ConfigUnit(type="unit104memory"))
store.load()
print([unit.id for unit in store.units()] == [unit_id])
```

### Running units in your own code

`gazer_node.system.System` ties a store, a registry and a client
(`gazer_node.client.U00Client`) together:

* `start()` loads the configuration, starts the units and publishes their
  values in a background thread.
* `get_state()` returns a snapshot of every unit and its values.
* `add_unit`, `remove_unit`, `start_unit`, `stop_unit` and
  `set_unit_translate` manage the units.
* `get_and_clear_events()` returns the events the system has emitted, such as
  `config_changed` and `unit_added`.

`gazer_node.open_url.open_url` opens a URL with the platform's default
handler.

## What this package does not do

* It has no window or other graphical interface. The node is driven through
  the `gazer-node` command or the library.
* It does not generate key pairs. `ConfigStore` sets keys only when a
  `key_factory` is supplied. The `gazer-node` command supplies none, so units
  added with `--add` have no private key and are not published until keys are
  written into `config.json`.
* The serial port of the Serial Port Key=Value unit cannot be set through the
  unit's parameters. It is chosen only when the class is constructed.