"""
Meadow Device Target

Keeps the selected Meadow device target in sync with the boards that are
actually connected, and installs the Meadow project templates in the
background.
"""

from .config.settings import _get_version_from_file

__version__ = _get_version_from_file()
__author__ = "Wilderness Labs"
__description__ = "Device target selection and template bootstrap for Meadow development"

# Package-level imports for convenience
from .config.settings import AppConfig
from .config.device_settings import DeviceSettings
from .models.device import NO_DEVICES_FOUND
from .models.operation_guard import OperationGuard, get_operation_guard
from .services.selection_service import DeviceSelectionService, InvalidSelectionError
from .services.dependency_installer import DependencyInstaller
from .utils.logger import get_logger

__all__ = [
    "AppConfig",
    "DeviceSettings",
    "NO_DEVICES_FOUND",
    "OperationGuard",
    "get_operation_guard",
    "DeviceSelectionService",
    "InvalidSelectionError",
    "DependencyInstaller",
    "get_logger",
]
