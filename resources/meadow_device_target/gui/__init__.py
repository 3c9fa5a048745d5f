"""
GUI package for Meadow Device Target.

This package provides a CustomTkinter-based graphical host for the device
target combo box.

Components:
    - main_window: Main application window with install status bar
    - device_target_panel: Device target combo box and refresh handling
"""

from .main_window import MainWindow

__all__ = ['MainWindow']
