"""
Tests for the combo box command handlers.
"""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add the resources directory to Python path
sys.path.insert(0, str(Path(__file__).parent / "resources"))

from meadow_device_target.models.device import NO_DEVICES_FOUND
from meadow_device_target.models.operation_guard import OperationGuard
from meadow_device_target.services.command_handlers import (
    ComboCommandEvent, DeviceListComboHandler, ProtocolViolationError
)
from meadow_device_target.services.selection_service import InvalidSelectionError


@pytest.fixture
def provider():
    provider = Mock()
    provider.current_value.return_value = "COM3"
    provider.list_values.return_value = ["COM3", "COM5"]
    return provider


def test_combo_output_request_returns_current_value(provider):
    handler = DeviceListComboHandler(provider)

    assert handler.on_device_list_combo(ComboCommandEvent(wants_output=True)) == "COM3"
    provider.set_value.assert_not_called()


def test_combo_input_sets_value(provider):
    handler = DeviceListComboHandler(provider)

    assert handler.on_device_list_combo(ComboCommandEvent(in_value="COM5")) is None
    provider.set_value.assert_called_once_with("COM5")


def test_combo_passes_placeholder_verbatim(provider):
    provider.current_value.return_value = NO_DEVICES_FOUND
    handler = DeviceListComboHandler(provider)

    assert handler.on_device_list_combo(ComboCommandEvent(wants_output=True)) == NO_DEVICES_FOUND


def test_combo_invalid_selection_propagates(provider):
    provider.set_value.side_effect = InvalidSelectionError("COM9", ["COM3"])
    handler = DeviceListComboHandler(provider)

    with pytest.raises(InvalidSelectionError):
        handler.on_device_list_combo(ComboCommandEvent(in_value="COM9"))


def test_combo_without_event_is_protocol_violation(provider):
    handler = DeviceListComboHandler(provider)

    with pytest.raises(ProtocolViolationError, match="EventArgs Required"):
        handler.on_device_list_combo(None)


@pytest.mark.parametrize("event", [
    ComboCommandEvent(),
    ComboCommandEvent(in_value=42),
])
def test_combo_set_without_string_value_is_protocol_violation(provider, event):
    handler = DeviceListComboHandler(provider)

    with pytest.raises(ProtocolViolationError, match="InValue Required"):
        handler.on_device_list_combo(event)
    assert provider.mock_calls == []


def test_get_list_returns_choices(provider):
    handler = DeviceListComboHandler(provider)

    assert handler.on_device_list_combo_get_list(ComboCommandEvent(wants_output=True)) == ["COM3", "COM5"]


def test_get_list_rejects_payload(provider):
    handler = DeviceListComboHandler(provider)

    with pytest.raises(ProtocolViolationError, match="InParam Invalid"):
        handler.on_device_list_combo_get_list(ComboCommandEvent(in_value="COM3", wants_output=True))
    provider.list_values.assert_not_called()


def test_get_list_requires_output_slot(provider):
    handler = DeviceListComboHandler(provider)

    with pytest.raises(ProtocolViolationError, match="OutParam Required"):
        handler.on_device_list_combo_get_list(ComboCommandEvent())


def test_guard_short_circuits_before_shape_checks(provider):
    guard = OperationGuard(active=True)
    handler = DeviceListComboHandler(provider, guard)

    assert handler.on_device_list_combo(None) is None
    assert handler.on_device_list_combo_get_list(ComboCommandEvent()) is None
    assert provider.mock_calls == []


def test_dispatch_routes_by_command_name(provider):
    handler = DeviceListComboHandler(provider)

    assert handler.dispatch("get_list", ComboCommandEvent(wants_output=True)) == ["COM3", "COM5"]
    assert handler.dispatch("combo", ComboCommandEvent(wants_output=True)) == "COM3"
    with pytest.raises(ProtocolViolationError):
        handler.dispatch("unknown", ComboCommandEvent())
