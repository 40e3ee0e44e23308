"""Command line entry point that runs the node without a window."""

import argparse
import logging
import threading
from pathlib import Path
from typing import List, Optional

from gazer_node.config import ConfigStore, ConfigUnit
from gazer_node.localstorage import LocalStorage
from gazer_node.registry import default_registry
from gazer_node.system import System

PROGRAM_NAME = "gazer_node"
NAME_KEY = "0000_00_name_str"


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gazer-node", description="Collect unit values and publish them.")
    parser.add_argument("--home", help="directory that holds the program's storage directory")
    parser.add_argument("--list", action="store_true", help="list the configured units and exit")
    parser.add_argument("--add", metavar="TYPE", action="append", default=[], help="add a unit of this type")
    parser.add_argument("--duration", type=float, help="seconds to run before stopping (default: until interrupted)")
    return parser


def _setup_logging(directory: Path) -> logging.Handler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(directory / f"{PROGRAM_NAME}.log", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    package_logger = logging.getLogger(PROGRAM_NAME)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.INFO)
    return handler


def _wait(duration: Optional[float]) -> None:
    try:
        threading.Event().wait(duration)
    except KeyboardInterrupt:
        pass


def main(argv: Optional[List[str]] = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    registry = default_registry()
    for unit_type in args.add:
        if unit_type not in registry.unit_types:
            parser.error(f"unknown unit type: {unit_type}")

    storage = LocalStorage(PROGRAM_NAME, args.home)
    store = ConfigStore(storage.path)

    if args.list:
        try:
            store.load()
        except (OSError, ValueError):
            pass
        for unit in store.units():
            print(f"{unit.id}\t{unit.type}\t{unit.get_parameter_string(NAME_KEY, unit.type)}")
        return 0

    handler = _setup_logging(storage.path / "logs")
    system = System(store, registry)
    try:
        system.start()
        for unit_type in args.add:
            parameters = registry.get_unit_type_default_parameters(unit_type)
            unit_id = system.add_unit(ConfigUnit(type=unit_type, parameters=parameters))
            print(f"added {unit_type} {unit_id}")
        _wait(args.duration)
    finally:
        system.stop()
        logging.getLogger(PROGRAM_NAME).removeHandler(handler)
        handler.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())