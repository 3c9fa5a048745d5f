"""
Device target panel for Meadow Device Target.

This module provides the device selection combo box. The panel acts as the
host for the combo box commands: it pulls the choices and the current value
through DeviceListComboHandler and pushes the user's choice back through it.
"""

from typing import Callable, Optional

import customtkinter as ctk

from meadow_device_target.config.device_settings import SettingsError
from meadow_device_target.models.device import is_sentinel
from meadow_device_target.services.command_handlers import ComboCommandEvent, DeviceListComboHandler
from meadow_device_target.services.device_enumerator import EnumerationUnavailableError
from meadow_device_target.services.selection_service import InvalidSelectionError
from meadow_device_target.utils.logger import get_logger


class DeviceTargetPanel(ctk.CTkFrame):
    """
    Device target selection panel.

    Provides:
    - Combo box listing connected devices
    - Periodic refresh of the device list
    - Status line for rejected selections and enumeration problems
    """

    def __init__(self, parent, handler: DeviceListComboHandler,
                 refresh_interval_ms: int = 2000,
                 selection_callback: Optional[Callable[[str], None]] = None,
                 **kwargs):
        """
        Initialize device target panel.

        Args:
            parent: Parent widget
            handler: Combo command handler backing the combo box
            refresh_interval_ms: Interval between device list refreshes
            selection_callback: Called with each accepted selection
            **kwargs: Additional CTkFrame arguments
        """
        super().__init__(parent, **kwargs)

        self.handler = handler
        self.refresh_interval_ms = refresh_interval_ms
        self.selection_callback = selection_callback
        self.logger = get_logger()

        self._refresh_job: Optional[str] = None

        self._setup_ui()
        self.refresh()

    def _setup_ui(self) -> None:
        """Setup the panel user interface."""
        self.grid_columnconfigure(1, weight=1)

        title_label = ctk.CTkLabel(
            self,
            text="Meadow Device",
            font=ctk.CTkFont(size=16, weight="bold")
        )
        title_label.grid(row=0, column=0, columnspan=3, pady=(10, 15), padx=10, sticky="w")

        device_label = ctk.CTkLabel(self, text="Device Target:")
        device_label.grid(row=1, column=0, padx=(10, 5), pady=5, sticky="w")

        self.device_combo = ctk.CTkComboBox(
            self,
            values=[],
            command=self._on_device_selected,
            width=220
        )
        self.device_combo.grid(row=1, column=1, padx=5, pady=5, sticky="ew")

        self.refresh_button = ctk.CTkButton(
            self,
            text="Refresh",
            command=self.refresh,
            width=80
        )
        self.refresh_button.grid(row=1, column=2, padx=(5, 10), pady=5)

        self.status_label = ctk.CTkLabel(self, text="", text_color="gray")
        self.status_label.grid(row=2, column=0, columnspan=3, padx=10, pady=(5, 10), sticky="w")

    def refresh(self) -> None:
        """Reload the device list and current value, then schedule the next refresh."""
        try:
            values = self.handler.on_device_list_combo_get_list(ComboCommandEvent(wants_output=True))
            current = self.handler.on_device_list_combo(ComboCommandEvent(wants_output=True))
        except EnumerationUnavailableError as e:
            self.logger.error(f"Device enumeration failed: {e}")
            self._set_status(str(e), "red")
        else:
            # None means a build or deploy holds the guard; keep what is shown
            if values is not None and current is not None:
                self.device_combo.configure(values=values)
                self.device_combo.set(current)

        self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        if self._refresh_job is not None:
            self.after_cancel(self._refresh_job)
        self._refresh_job = self.after(self.refresh_interval_ms, self.refresh)

    def _on_device_selected(self, choice: str) -> None:
        """Push the user's choice through the combo handler."""
        if is_sentinel(choice):
            # Placeholder entry, nothing was selected
            return

        try:
            self.handler.on_device_list_combo(ComboCommandEvent(in_value=choice))
        except InvalidSelectionError as e:
            self.logger.warning(str(e))
            self._set_status(f"{choice} is no longer connected", "red")
            self.refresh()
            return
        except SettingsError as e:
            self.logger.error(str(e))
            self._set_status("Could not save the device target (see log)", "red")
            return
        except EnumerationUnavailableError as e:
            self.logger.error(f"Device enumeration failed: {e}")
            self._set_status(str(e), "red")
            return

        self._set_status(f"Selected {choice}", "green")
        if self.selection_callback:
            self.selection_callback(choice)

    def _set_status(self, text: str, color: str = "gray") -> None:
        self.status_label.configure(text=text, text_color=color)

    def destroy(self) -> None:
        if self._refresh_job is not None:
            self.after_cancel(self._refresh_job)
            self._refresh_job = None
        super().destroy()
