"""
Tests for serial port enumeration.
"""

import sys
from pathlib import Path

import pytest

# Add the resources directory to Python path
sys.path.insert(0, str(Path(__file__).parent / "resources"))

from meadow_device_target.services import device_enumerator
from meadow_device_target.utils import platform_utils, windows_compat
from meadow_device_target.services.device_enumerator import (
    CallableEnumerator, EnumerationUnavailableError, SerialPortEnumerator
)


@pytest.fixture
def unix(monkeypatch):
    monkeypatch.setattr(device_enumerator, "is_windows", lambda: False)


@pytest.fixture
def windows(monkeypatch):
    monkeypatch.setattr(device_enumerator, "is_windows", lambda: True)


def test_globs_device_nodes(tmp_path, unix):
    for name in ("ttyACM1", "ttyACM0", "ttyUSB0", "ttyS0"):
        (tmp_path / name).touch()

    enumerator = SerialPortEnumerator([str(tmp_path / "ttyACM*"), str(tmp_path / "ttyUSB*")])

    assert enumerator.list_devices() == [
        str(tmp_path / "ttyACM0"),
        str(tmp_path / "ttyACM1"),
        str(tmp_path / "ttyUSB0"),
    ]


def test_overlapping_patterns_report_each_port_once(tmp_path, unix):
    (tmp_path / "ttyACM0").touch()

    enumerator = SerialPortEnumerator([str(tmp_path / "ttyACM*"), str(tmp_path / "tty*")])

    assert enumerator.list_devices() == [str(tmp_path / "ttyACM0")]


def test_no_matches_is_empty(tmp_path, unix):
    assert SerialPortEnumerator([str(tmp_path / "ttyACM*")]).list_devices() == []


def test_windows_uses_registry_lister(windows):
    enumerator = SerialPortEnumerator(["/dev/ttyACM*"], windows_lister=lambda: ["COM5", "COM3"])

    assert enumerator.list_devices() == ["COM3", "COM5"]


def test_platform_failure_is_enumeration_unavailable(windows):
    def broken_lister():
        raise PermissionError("access denied")

    enumerator = SerialPortEnumerator(windows_lister=broken_lister)

    with pytest.raises(EnumerationUnavailableError, match="access denied"):
        enumerator.list_devices()


def test_callable_enumerator_wraps_host_function():
    enumerator = CallableEnumerator(lambda: iter(["COM3"]))

    assert enumerator.list_devices() == ["COM3"]


def test_windows_port_listing_is_empty_off_windows(monkeypatch):
    monkeypatch.setattr(windows_compat, "is_windows", lambda: False)

    assert windows_compat.list_windows_serial_ports() == []


def test_platform_check_has_a_single_definition():
    assert windows_compat.is_windows is platform_utils.is_windows
    assert device_enumerator.is_windows is platform_utils.is_windows
