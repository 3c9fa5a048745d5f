"""
Service modules for Meadow Device Target.

This module provides the device selection service, the host command handlers,
device enumeration, and the background dependency installer.
"""

from .selection_service import DeviceSelectionService, InvalidSelectionError
from .command_handlers import ComboCommandEvent, DeviceListComboHandler, ProtocolViolationError
from .device_enumerator import EnumerationUnavailableError, SerialPortEnumerator
from .dependency_installer import DependencyInstaller
from .process_runner import CancellationToken, ProcessRunner

__all__ = [
    "DeviceSelectionService",
    "InvalidSelectionError",
    "ComboCommandEvent",
    "DeviceListComboHandler",
    "ProtocolViolationError",
    "EnumerationUnavailableError",
    "SerialPortEnumerator",
    "DependencyInstaller",
    "CancellationToken",
    "ProcessRunner",
]
