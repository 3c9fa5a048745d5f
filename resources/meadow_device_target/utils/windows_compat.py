"""
Windows compatibility utilities for Meadow Device Target.

This module provides Windows-specific functionality for operations that differ
between Windows and Unix-like systems, such as discovering serial ports.
"""

import logging
import os
from typing import List

from meadow_device_target.utils.platform_utils import is_windows

# Windows-specific imports
if os.name == 'nt':
    try:
        import winreg
        WINDOWS_MODULES_AVAILABLE = True
    except ImportError:
        WINDOWS_MODULES_AVAILABLE = False
        winreg = None
else:
    WINDOWS_MODULES_AVAILABLE = False
    winreg = None

SERIALCOMM_KEY = r"HARDWARE\DEVICEMAP\SERIALCOMM"

_logger = logging.getLogger(__name__)


def list_windows_serial_ports() -> List[str]:
    """
    List COM port names registered under the SERIALCOMM device map.

    Returns:
        Port names such as "COM3", in registry order. Empty when not on
        Windows or when no serial device is attached.

    Raises:
        OSError: If the registry cannot be read for another reason
    """
    if not is_windows() or not WINDOWS_MODULES_AVAILABLE:
        return []

    ports = []
    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, SERIALCOMM_KEY) as key:
            index = 0
            while True:
                try:
                    _, value, _ = winreg.EnumValue(key, index)
                except OSError:
                    # No more values
                    break
                ports.append(str(value))
                index += 1
    except FileNotFoundError:
        # The key only exists while at least one serial device is present
        _logger.debug("SERIALCOMM registry key not present")
        return []

    return ports
