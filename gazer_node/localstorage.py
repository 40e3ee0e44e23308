"""Per-user storage directory for the program's files."""

import os
import sys
import threading
from pathlib import Path
from typing import Optional, Union


def home_directory() -> str:
    """Return the user's home directory, with a platform fallback."""
    if sys.platform == "win32":
        return os.environ.get("USERPROFILE") or "C:\\Users\\Default"
    home = os.environ.get("HOME")
    if home:
        return home
    return "/" if sys.platform == "darwin" else "/home/default"


class LocalStorage:
    """A hidden directory named after the program inside the home directory."""

    def __init__(self, program_name: str, home: Optional[Union[str, Path]] = None):
        base = Path(home) if home is not None else Path(home_directory())
        self._lock = threading.Lock()
        self._path = base / f".{program_name}"
        self._path.mkdir(mode=0o700, parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, file_name: str, data: bytes) -> None:
        """Write ``data`` to a file in the storage directory, replacing it."""
        with self._lock:
            fd = os.open(self._path / file_name, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)

    def read(self, file_name: str) -> bytes:
        """Read a file from the storage directory; raises OSError if it cannot."""
        with self._lock:
            return (self._path / file_name).read_bytes()

    def exists(self, file_name: str) -> bool:
        """Whether a file of that name is present (errors other than absence count as present)."""
        with self._lock:
            try:
                os.stat(self._path / file_name)
            except FileNotFoundError:
                return False
            except OSError:
                return True
            return True