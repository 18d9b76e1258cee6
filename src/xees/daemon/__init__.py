"""D-Bus daemon package suppressing the screensaver on request."""

from .client import XeesClient
from .server import XeesDaemon

__all__ = ["XeesClient", "XeesDaemon"]
