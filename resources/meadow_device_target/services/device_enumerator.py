"""
Device enumeration for Meadow Device Target.

Enumerators report the identifiers of currently connected devices. The
selection service only depends on the DeviceEnumerator protocol; the serial
port enumerator here is the default used by the CLI and GUI hosts.
"""

import glob
import logging
from typing import Callable, Iterable, List, Optional, Protocol

from meadow_device_target.utils.platform_utils import is_windows
from meadow_device_target.utils.windows_compat import list_windows_serial_ports


class EnumerationUnavailableError(RuntimeError):
    """Raised when the list of devices cannot be obtained."""
    pass


class DeviceEnumerator(Protocol):
    """Anything that can list connected device identifiers."""

    def list_devices(self) -> List[str]:
        ...


class SerialPortEnumerator:
    """
    Lists serial ports that a Meadow board may be attached to.

    Windows ports come from the SERIALCOMM registry map; on other platforms
    device nodes are matched against the configured glob patterns.
    """

    def __init__(self, port_patterns: Optional[Iterable[str]] = None,
                 windows_lister: Callable[[], List[str]] = list_windows_serial_ports):
        """
        Initialize the enumerator.

        Args:
            port_patterns: Glob patterns for Unix device nodes
            windows_lister: Function listing COM ports on Windows
        """
        self.port_patterns = list(port_patterns or [])
        self._windows_lister = windows_lister
        self._logger = logging.getLogger(__name__)

    def list_devices(self) -> List[str]:
        """
        List connected serial ports, sorted for stable display.

        Raises:
            EnumerationUnavailableError: If the platform query fails
        """
        try:
            if is_windows():
                ports = self._windows_lister()
            else:
                ports = []
                for pattern in self.port_patterns:
                    ports.extend(glob.glob(pattern))
        except OSError as e:
            raise EnumerationUnavailableError(f"Could not enumerate serial ports: {e}") from e

        ports = sorted(set(ports))
        self._logger.debug(f"Found {len(ports)} serial port(s): {ports}")
        return ports


class CallableEnumerator:
    """Adapts a plain "list devices" function supplied by a host."""

    def __init__(self, list_func: Callable[[], Iterable[str]]):
        self._list_func = list_func

    def list_devices(self) -> List[str]:
        return list(self._list_func())
