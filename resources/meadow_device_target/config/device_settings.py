"""
Persisted device selection for Meadow Device Target.

This module stores the last chosen device target in a small per-user JSON
file. The value is loaded lazily on first access and written back in full on
every save.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union


class SettingsError(IOError):
    """Raised when the settings file cannot be written."""
    pass


class DeviceSettings:
    """
    Settings store holding the selected device target.

    Read failures degrade to an empty selection; write failures raise
    SettingsError.
    """

    DEVICE_TARGET_KEY = "device_target"

    def __init__(self, file_path: Union[str, Path]):
        """
        Initialize the settings store.

        Args:
            file_path: Location of the settings JSON file
        """
        self.file_path = Path(file_path)
        self._device_target = ""
        self._loaded = False
        self._logger = logging.getLogger(__name__)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def device_target(self) -> str:
        """The last valid device target, or an empty string."""
        self.ensure_loaded()
        return self._device_target

    @device_target.setter
    def device_target(self, value: str) -> None:
        self.ensure_loaded()
        self._device_target = value

    def ensure_loaded(self) -> None:
        """Load the settings file once per instance."""
        if not self._loaded:
            self.load()

    def load(self) -> None:
        """Read the device target from disk, defaulting to an empty string."""
        self._device_target = self._read_device_target()
        self._loaded = True
        self._logger.debug(f"Loaded device target {self._device_target!r} from {self.file_path}")

    def _read_device_target(self) -> str:
        if not self.file_path.exists():
            return ""

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self._logger.warning(f"Could not read settings from {self.file_path}: {e}")
            return ""

        if not isinstance(data, dict):
            self._logger.warning(f"Settings file {self.file_path} does not contain an object")
            return ""

        value = data.get(self.DEVICE_TARGET_KEY, "")
        if not isinstance(value, str):
            self._logger.warning(f"Ignoring non-string device target in {self.file_path}")
            return ""

        return value

    def save(self) -> None:
        """
        Write the current device target to disk.

        Raises:
            SettingsError: If the file cannot be written
        """
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.file_path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise SettingsError(f"Failed to save settings to {self.file_path}: {e}")

        self._logger.info(f"Device target saved: {self._device_target}")

    def to_dict(self) -> Dict[str, Any]:
        return {self.DEVICE_TARGET_KEY: self._device_target}
