"""
Main application window for Meadow Device Target.

This module provides the window hosting the device target panel and a status
bar showing the progress of the background template install.
"""

from concurrent.futures import Future
from typing import Optional

import customtkinter as ctk

from meadow_device_target.config.settings import AppConfig
from meadow_device_target.models.install_outcome import InstallOutcome, InstallResult
from meadow_device_target.services.command_handlers import DeviceListComboHandler
from meadow_device_target.services.dependency_installer import DependencyInstaller
from meadow_device_target.services.process_runner import CancellationToken
from meadow_device_target.utils.logger import get_logger

from .components.device_target_panel import DeviceTargetPanel


class MainWindow:
    """
    Main application window for Meadow Device Target.
    """

    INSTALL_POLL_MS = 500

    def __init__(self, config: AppConfig, handler: DeviceListComboHandler,
                 installer: Optional[DependencyInstaller] = None,
                 cancel_token: Optional[CancellationToken] = None):
        """Initialize the main application window."""
        self.config = config
        self.handler = handler
        self.installer = installer
        self.cancel_token = cancel_token or CancellationToken()
        self.logger = get_logger()

        self._install_future: Optional[Future] = None

        self.root = ctk.CTk()
        self.root.title(self.config.ui.window_title)
        self.root.geometry("480x200")
        self.root.minsize(400, 180)

        self.device_panel: Optional[DeviceTargetPanel] = None

        self._setup_theme()
        self._setup_layout()
        self._setup_status_bar()
        self.root.protocol("WM_DELETE_WINDOW", self._on_window_close)

        self.logger.info("Main window initialized successfully")

    def _setup_theme(self) -> None:
        """Setup CustomTkinter theme and appearance."""
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

    def _setup_layout(self) -> None:
        """Setup main window layout and grid configuration."""
        self.root.grid_columnconfigure(0, weight=1)
        self.root.grid_rowconfigure(0, weight=1)

        self.device_panel = DeviceTargetPanel(
            self.root,
            handler=self.handler,
            refresh_interval_ms=self.config.ui.refresh_interval_ms,
        )
        self.device_panel.grid(row=0, column=0, padx=10, pady=10, sticky="nsew")

    def _setup_status_bar(self) -> None:
        """Setup the status bar at the bottom of the window."""
        self.status_label = ctk.CTkLabel(self.root, text="Ready", anchor="w", text_color="gray")
        self.status_label.grid(row=1, column=0, padx=10, pady=(0, 10), sticky="ew")

    def _update_status(self, message: str) -> None:
        self.status_label.configure(text=message)

    def start_dependency_install(self) -> None:
        """Kick off the template install without blocking the window."""
        if not self.installer:
            return

        self._update_status("Checking Meadow templates...")
        self._install_future = self.installer.start_background(self.cancel_token)
        self.root.after(self.INSTALL_POLL_MS, self._check_install_finished)

    def _check_install_finished(self) -> None:
        if self._install_future is None:
            return
        if not self._install_future.done():
            self.root.after(self.INSTALL_POLL_MS, self._check_install_finished)
            return

        result: InstallResult = self._install_future.result()
        messages = {
            InstallOutcome.SKIPPED: "Offline, template install skipped",
            InstallOutcome.SUCCEEDED: "Meadow templates are up to date",
            InstallOutcome.FAILED: "Meadow template install failed (see log)",
            InstallOutcome.CANCELLED: "Template install cancelled",
        }
        self._update_status(messages[result.outcome])

    def _on_window_close(self) -> None:
        """Handle window close event."""
        self.cancel_token.cancel()
        if self.installer:
            self.installer.cleanup(wait=False)

        self.logger.info("Application shutting down")
        self.root.quit()
        self.root.destroy()

    def run(self) -> None:
        """Start the GUI application main loop."""
        self.logger.info("Starting GUI application")
        self.start_dependency_install()
        self.root.mainloop()
