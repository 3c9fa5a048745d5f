"""
Utility modules for Meadow Device Target.

This module provides common utilities including logging, validation,
and platform helpers used throughout the application.
"""

from .logger import get_logger, setup_logging
from .validators import Validator

__all__ = ["get_logger", "setup_logging", "Validator"]
