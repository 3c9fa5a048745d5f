"""
Input validation utilities for Meadow Device Target.

This module provides validation for device identifiers reported by enumerators
and for the package names and executables used by the dependency installer.
"""

import logging
import re
import shutil
from typing import Any, Dict, Iterable, List, Optional


class ValidationResult:
    """Result of a validation operation."""

    def __init__(self, is_valid: bool, message: str = "", details: Optional[Dict[str, Any]] = None):
        self.is_valid = is_valid
        self.message = message
        self.details = details or {}

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        return f"ValidationResult(valid={self.is_valid}, message='{self.message}')"


class Validator:
    """
    Validator for device identifiers and installer inputs.
    """

    def __init__(self):
        self._logger = logging.getLogger(__name__)

        # NuGet package ids: dotted segments of letters, digits, '-' and '_'
        self.package_pattern = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_\-]*(\.[A-Za-z0-9_\-]+)*$')

    def validate_device_identifier(self, identifier: Any) -> ValidationResult:
        """
        Validate a single device identifier.

        Identifiers are opaque, so only the shape is checked: a non-blank
        string without control characters.
        """
        if not isinstance(identifier, str):
            return ValidationResult(False, f"Device identifier must be a string, got {type(identifier).__name__}")

        if not identifier.strip():
            return ValidationResult(False, "Device identifier cannot be empty")

        if any(ord(ch) < 32 for ch in identifier):
            return ValidationResult(False, "Device identifier contains control characters")

        return ValidationResult(True, "Valid device identifier")

    def sanitize_device_list(self, identifiers: Iterable[Any]) -> List[str]:
        """
        Keep the valid identifiers from an enumerator result, preserving order.

        Duplicates are kept; matching treats them as equivalent.
        """
        devices = []
        for identifier in identifiers:
            result = self.validate_device_identifier(identifier)
            if result:
                devices.append(identifier)
            else:
                self._logger.debug(f"Dropping device entry {identifier!r}: {result.message}")
        return devices

    def validate_package_name(self, package_name: str) -> ValidationResult:
        """Validate a template package id."""
        if not package_name or not isinstance(package_name, str):
            return ValidationResult(False, "Package name cannot be empty")

        if not self.package_pattern.match(package_name):
            return ValidationResult(False, f"Invalid package name: {package_name}")

        return ValidationResult(True, "Valid package name")

    def check_executable_available(self, executable: str) -> ValidationResult:
        """Check whether an executable can be found on PATH."""
        resolved = shutil.which(executable)
        if resolved is None:
            return ValidationResult(False, f"{executable} not found on PATH")
        return ValidationResult(True, f"{executable} found", {"path": resolved})


# Global validator instance
_global_validator: Optional[Validator] = None


def get_validator() -> Validator:
    """Get the global validator instance."""
    global _global_validator
    if _global_validator is None:
        _global_validator = Validator()
    return _global_validator
