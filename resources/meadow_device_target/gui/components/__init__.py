"""
GUI components package for Meadow Device Target.

Components:
    - device_target_panel: Device target selection combo box
"""

from .device_target_panel import DeviceTargetPanel

__all__ = ['DeviceTargetPanel']
