"""
Configuration module for Meadow Device Target.

This module handles application settings, the persisted device selection,
and configuration file management with proper validation and error handling.
"""

from .settings import AppConfig
from .device_settings import DeviceSettings, SettingsError

__all__ = ["AppConfig", "DeviceSettings", "SettingsError"]
