"""Open a URL in the desktop's default handler."""

import subprocess
import sys


class UnsupportedPlatformError(OSError):
    """Raised when there is no known way to open a URL on this platform."""


def open_url(url: str) -> None:
    """Start the platform's URL handler for ``url`` without waiting for it."""
    platform = sys.platform
    if platform == "win32":
        command = ["rundll32", "url.dll,FileProtocolHandler", url]
    elif platform == "darwin":
        command = ["open", url]
    elif platform.startswith("linux"):
        command = ["xdg-open", url]
    else:
        raise UnsupportedPlatformError("unsupported platform")
    subprocess.Popen(command)