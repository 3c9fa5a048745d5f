"""
Host command handlers for the device target combo box.

A host combo box issues two commands: one that either asks for the current
value or supplies a new one, and one that asks for the list of choices. This
module translates those command events into DeviceTargetProtocol calls.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from meadow_device_target.models.operation_guard import OperationGuard
from meadow_device_target.services.selection_service import DeviceTargetProtocol


class ProtocolViolationError(ValueError):
    """Raised when a host command event has the wrong shape."""
    pass


@dataclass
class ComboCommandEvent:
    """
    A combo box command issued by the host.

    Attributes:
        in_value: Payload supplied by the host (the newly chosen value)
        wants_output: True when the host expects a value back
    """
    in_value: Any = None
    wants_output: bool = False


class DeviceListComboHandler:
    """Dispatches combo box commands to a device target provider."""

    def __init__(self, provider: DeviceTargetProtocol, guard: Optional[OperationGuard] = None):
        self.provider = provider
        self.guard = guard
        self._logger = logging.getLogger(__name__)

    def _is_suspended(self) -> bool:
        return self.guard is not None and self.guard.is_set()

    def on_device_list_combo(self, event: Optional[ComboCommandEvent]) -> Optional[str]:
        """
        Handle the "current value" / "set value" command.

        Returns:
            The current value when the host asks for output, else None

        Raises:
            ProtocolViolationError: If no event is supplied, or a set request
                carries no string value
            InvalidSelectionError: If the chosen value is not connected
        """
        if self._is_suspended():
            return None

        if not isinstance(event, ComboCommandEvent):
            raise ProtocolViolationError("EventArgs Required")

        if event.wants_output:
            return self.provider.current_value()

        if not isinstance(event.in_value, str):
            raise ProtocolViolationError("InValue Required")

        self.provider.set_value(event.in_value)
        return None

    def on_device_list_combo_get_list(self, event: Optional[ComboCommandEvent]) -> Optional[List[str]]:
        """
        Handle the "list choices" command.

        Raises:
            ProtocolViolationError: If the event is missing, carries a
                payload, or does not ask for output
        """
        if self._is_suspended():
            return None

        if not isinstance(event, ComboCommandEvent):
            raise ProtocolViolationError("EventArgs Required")

        if event.in_value is not None:
            raise ProtocolViolationError("InParam Invalid")

        if not event.wants_output:
            raise ProtocolViolationError("OutParam Required")

        return self.provider.list_values()

    def dispatch(self, command: str, event: Optional[ComboCommandEvent]) -> Union[str, List[str], None]:
        """Route a command by name ("combo" or "get_list")."""
        if command == "combo":
            return self.on_device_list_combo(event)
        if command == "get_list":
            return self.on_device_list_combo_get_list(event)
        raise ProtocolViolationError(f"Unknown command: {command}")
