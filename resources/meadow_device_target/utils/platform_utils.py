"""
Platform-specific utilities for Meadow Device Target.

This module provides cross-platform functions for determining OS-specific paths
for settings, and the process creation flags used when launching
external tools.
"""

import os
import subprocess
import sys
from pathlib import Path


def is_windows() -> bool:
    """Check if the current operating system is Windows."""
    return os.name == 'nt'


def get_platform_config_dir(app_name: str) -> Path:
    """
    Get the platform-appropriate configuration directory for the application.

    Args:
        app_name: The name of the application.

    Returns:
        A Path object pointing to the configuration directory.
    """
    if is_windows():
        # Windows: %APPDATA%\app_name
        config_dir = Path(os.getenv('APPDATA', '')) / app_name
    elif sys.platform == 'darwin':  # macOS
        # macOS: ~/Library/Application Support/app_name
        config_dir = Path.home() / 'Library' / 'Application Support' / app_name
    else:  # Linux and other Unix-like
        # Linux: ~/.config/app_name
        config_dir = Path.home() / '.config' / app_name

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_hidden_window_flags() -> int:
    """Get Popen creation flags that keep a console window from appearing."""
    if is_windows():
        return getattr(subprocess, 'CREATE_NO_WINDOW', 0x08000000)
    return 0
