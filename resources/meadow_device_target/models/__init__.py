"""
Data models for Meadow Device Target.

This module contains the device identifier helpers, the operation guard and
the dependency installation outcome used throughout the application.
"""

from .device import NO_DEVICES_FOUND, identifiers_match, is_value_in_device_list
from .install_outcome import InstallOutcome, InstallResult, InstallerState
from .operation_guard import OperationGuard, get_operation_guard

__all__ = [
    "NO_DEVICES_FOUND",
    "identifiers_match",
    "is_value_in_device_list",
    "InstallOutcome",
    "InstallResult",
    "InstallerState",
    "OperationGuard",
    "get_operation_guard",
]
