"""Client that publishes unit values to the cloud service."""

import logging
import threading
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_SERVERS = ("https://gazer.cloud",)
DEFAULT_TIMEOUT = 3.0


@dataclass(frozen=True)
class ItemToSet:
    """One value to publish under a path."""

    path: str
    name: str
    value: str
    uom: str


def build_form(items: Iterable[ItemToSet]) -> Dict[str, str]:
    """Form fields for the items: the value, its name and its unit of measure per path."""
    form: Dict[str, str] = {}
    for item in items:
        if item.path == "/":
            form["/_name"] = item.name
            form["/"] = item.value
            form["/_uom"] = item.uom
        else:
            form[item.path + "/_name"] = item.name
            form[item.path] = item.value
            form[item.path + "/_uom"] = item.uom
    return form


class ServerRotation:
    """Hands out server URLs in turn, starting over after the last one."""

    def __init__(self, servers: Sequence[str]):
        if not servers:
            raise ValueError("at least one server is required")
        self._servers: List[str] = list(servers)
        self._index = 0
        self._lock = threading.Lock()

    def next_url(self) -> str:
        with self._lock:
            url = self._servers[self._index]
            self._index = (self._index + 1) % len(self._servers)
            return url


class U00Client:
    """Posts values to ``<server>/set/<api key>`` as form data."""

    def __init__(self, servers: Optional[Sequence[str]] = None, timeout: float = DEFAULT_TIMEOUT):
        self.rotation = ServerRotation(servers if servers is not None else DEFAULT_SERVERS)
        self.timeout = timeout

    def write(self, api_key: str, items: Iterable[ItemToSet]) -> None:
        """Send the items; raises OSError if the server cannot be reached.

        Any HTTP response, whatever its status, counts as delivered.
        """
        body = urllib.parse.urlencode(sorted(build_form(items).items())).encode("ascii")
        url = self.rotation.next_url() + "/set/" + api_key
        request = urllib.request.Request(
            url,
            data=body,
            method="POST",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                response.read()
        except urllib.error.HTTPError as err:
            err.close()
        except OSError as err:
            logger.warning("Error sending data: %s", err)
            raise