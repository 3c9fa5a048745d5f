"""
Device model and helpers for Meadow Device Target.

Device identifiers are opaque strings (serial port names such as "COM3" or
"/dev/ttyACM0") compared character by character without regard to case.
"""

from typing import Iterable, List, Optional


# Placeholder shown in place of a device when none are connected
NO_DEVICES_FOUND = "No Devices Found"


def _ordinal_upper(value: str) -> str:
    # Characters whose uppercase form is longer (e.g. German sharp s) stay as is
    chars = []
    for ch in value:
        upper = ch.upper()
        chars.append(upper if len(upper) == 1 else ch)
    return "".join(chars)


def identifiers_match(left: str, right: str) -> bool:
    """Compare two device identifiers ordinally, ignoring case."""
    return _ordinal_upper(left) == _ordinal_upper(right)


def find_device(devices: Iterable[str], candidate: str) -> Optional[str]:
    """
    Find the first device matching a candidate identifier.

    Only whole identifiers match; "COM" does not match "COM3".

    Returns:
        The device as reported by the enumerator, or None
    """
    for device in devices:
        if identifiers_match(device, candidate):
            return device
    return None


def is_value_in_device_list(devices: Iterable[str], candidate: str) -> bool:
    """Check whether a candidate names one of the listed devices."""
    return find_device(devices, candidate) is not None


def is_sentinel(value: str) -> bool:
    """Check whether a value is the no-devices placeholder (exact match)."""
    return value == NO_DEVICES_FOUND


def display_list(devices: List[str]) -> List[str]:
    """Get the list to show to the user, substituting the placeholder when empty."""
    if devices:
        return list(devices)
    return [NO_DEVICES_FOUND]
