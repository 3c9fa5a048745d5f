"""
Device target selection service for Meadow Device Target.

This module keeps the persisted device target consistent with the devices
that are actually connected. Hosts query the current value and the list of
choices, and push new choices, through the DeviceTargetProtocol methods.
"""

import logging
from typing import List, Optional, Protocol

from meadow_device_target.config.device_settings import DeviceSettings
from meadow_device_target.models.device import (
    NO_DEVICES_FOUND, display_list, is_sentinel, is_value_in_device_list
)
from meadow_device_target.models.operation_guard import OperationGuard
from meadow_device_target.services.device_enumerator import DeviceEnumerator
from meadow_device_target.utils.validators import Validator, get_validator


class InvalidSelectionError(ValueError):
    """Raised when a proposed device is not currently connected."""

    def __init__(self, candidate: str, devices: List[str]):
        self.candidate = candidate
        self.devices = list(devices)
        super().__init__(f"Invalid Device Selected: {candidate!r}")


class DeviceTargetProtocol(Protocol):
    """Query/command surface used by host widgets."""

    def current_value(self) -> Optional[str]:
        ...

    def list_values(self) -> Optional[List[str]]:
        ...

    def set_value(self, candidate: str) -> None:
        ...


class DeviceSelectionService:
    """
    Reconciles the saved device target with the live device list.

    Every operation enumerates devices afresh, since boards come and go.
    While the operation guard is set (a build or deploy is running) every
    operation returns None without enumerating or touching the settings.
    """

    def __init__(self, enumerator: DeviceEnumerator,
                 settings: DeviceSettings,
                 guard: OperationGuard,
                 validator: Optional[Validator] = None):
        """
        Initialize the selection service.

        Args:
            enumerator: Source of connected device identifiers
            settings: Store holding the selected device target
            guard: Flag suppressing activity during build/deploy
            validator: Validator used to drop malformed device entries
        """
        self.enumerator = enumerator
        self.settings = settings
        self.guard = guard
        self.validator = validator or get_validator()
        self._logger = logging.getLogger(__name__)

    def _get_devices(self) -> List[str]:
        # Enumerator failures propagate to the caller unchanged
        return self.validator.sanitize_device_list(self.enumerator.list_devices())

    def _is_suspended(self, operation: str) -> bool:
        if self.guard.is_set():
            self._logger.debug(f"Skipping {operation}: build or deploy in progress")
            return True
        return False

    def current_value(self) -> Optional[str]:
        """
        Get the device target to display.

        Returns:
            The saved target (in its saved casing) if still connected, an
            empty string if it is not, NO_DEVICES_FOUND if nothing is
            connected, or None while the guard is set.
        """
        if self._is_suspended("current value query"):
            return None

        devices = self._get_devices()
        if not devices:
            return NO_DEVICES_FOUND

        saved_target = self.settings.device_target
        if saved_target and is_value_in_device_list(devices, saved_target):
            return saved_target

        return ""

    def list_values(self) -> Optional[List[str]]:
        """
        Get the choices to display.

        Returns:
            The connected devices, [NO_DEVICES_FOUND] if there are none, or
            None while the guard is set.
        """
        if self._is_suspended("device list query"):
            return None

        return display_list(self._get_devices())

    def set_value(self, candidate: str) -> None:
        """
        Select a new device target.

        A connected device is saved as given. The NO_DEVICES_FOUND
        placeholder is accepted and ignored.

        Raises:
            InvalidSelectionError: If the candidate is neither connected nor
                the placeholder
        """
        if self._is_suspended("device selection"):
            return

        devices = self._get_devices()

        if is_value_in_device_list(devices, candidate):
            self.settings.device_target = candidate
            self.settings.save()
            self._logger.info(f"Device target set to {candidate}")
            return

        if is_sentinel(candidate):
            self._logger.debug("No devices to select")
            return

        self._logger.warning(f"Rejected device selection {candidate!r}; connected: {devices}")
        raise InvalidSelectionError(candidate, devices)
