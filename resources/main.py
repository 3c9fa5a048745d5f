"""
Meadow Device Target - Main Application Entry Point

Select the Meadow board used for deployment and keep the Meadow project
templates installed. Provides GUI and CLI interfaces.
"""

import sys
import argparse
import traceback
from typing import Optional

from meadow_device_target.config.settings import init_config, AppConfig
from meadow_device_target.config.device_settings import DeviceSettings, SettingsError
from meadow_device_target.models.install_outcome import InstallOutcome
from meadow_device_target.models.operation_guard import get_operation_guard
from meadow_device_target.services.command_handlers import DeviceListComboHandler
from meadow_device_target.services.dependency_installer import init_dependency_installer, get_dependency_installer
from meadow_device_target.services.device_enumerator import SerialPortEnumerator, EnumerationUnavailableError
from meadow_device_target.services.process_runner import CancellationToken
from meadow_device_target.services.selection_service import DeviceSelectionService, InvalidSelectionError
from meadow_device_target.utils.logger import setup_logging, LogLevel, MeadowLogger
from meadow_device_target.utils.validators import get_validator


class MeadowDeviceTargetApp:
    """Main application class for Meadow Device Target."""

    def __init__(self):
        self.config: Optional[AppConfig] = None
        self.logger: Optional[MeadowLogger] = None
        self.selection_service: Optional[DeviceSelectionService] = None
        self.cancel_token = CancellationToken()

    def initialize(self, config_file: Optional[str] = None,
                   debug: bool = False, colored: bool = True) -> None:
        """Initialize the application with configuration and services."""
        try:
            self.config = init_config(config_file)

            if debug:
                self.config.debug_mode = True
            level = LogLevel.DEBUG if self.config.debug_mode else LogLevel.from_name(self.config.log_level.value)

            self.logger = setup_logging(
                colored=colored and self.config.ui.colored_output,
                log_file=self.config.get_log_file_path(),
                level=level
            )

            self.logger.highlight(f"Starting {self.config.app_name} v{self.config.version}")

            settings = DeviceSettings(self.config.get_settings_file_path())
            enumerator = SerialPortEnumerator(self.config.enumerator.port_patterns)
            self.selection_service = DeviceSelectionService(
                enumerator=enumerator,
                settings=settings,
                guard=get_operation_guard()
            )

            init_dependency_installer(config=self.config.installer)

            self.logger.debug("Application initialization completed")

        except (OSError, ValueError) as e:
            print(f"Failed to initialize application: {e}")
            if self.logger:
                self.logger.error(f"Initialization failed: {e}")
                self.logger.debug(traceback.format_exc())
            sys.exit(1)

    def run_list(self) -> bool:
        """Print the available device targets."""
        devices = self.selection_service.list_values()
        if devices is None:
            self.logger.warning("A build or deploy is in progress")
            return False
        for device in devices:
            print(device)
        return True

    def run_current(self) -> bool:
        """Print the current device target."""
        current = self.selection_service.current_value()
        if current is None:
            self.logger.warning("A build or deploy is in progress")
            return False
        if current:
            print(current)
        else:
            self.logger.info("No device target selected")
        return True

    def run_select(self, device: str) -> bool:
        """Select a new device target."""
        try:
            self.selection_service.set_value(device)
        except InvalidSelectionError as e:
            self.logger.error(f"{e}. Connected devices: {', '.join(e.devices) or 'none'}")
            return False
        except SettingsError as e:
            self.logger.error(str(e))
            return False
        return True

    def run_install_dependencies(self) -> bool:
        """Install the Meadow templates in the foreground."""
        dotnet = self.config.installer.dotnet_executable
        if not get_validator().check_executable_available(dotnet):
            self.logger.error(f"{dotnet} not found on PATH; install the .NET SDK first")
            return False

        result = get_dependency_installer().install(self.cancel_token)
        if result.outcome == InstallOutcome.SKIPPED:
            self.logger.warning("No network connection, templates not installed")
            return True
        if not result.success:
            self.logger.error(f"Template install {result.outcome.value}")
            if result.output:
                self.logger.info(result.output)
            return False
        self.logger.highlight("Meadow templates installed")
        return True

    def run_gui_mode(self) -> bool:
        """Run the application in GUI mode."""
        try:
            from meadow_device_target.gui.main_window import MainWindow

            self.logger.info("Starting GUI mode")

            installer = get_dependency_installer() if self.config.installer.install_on_startup else None
            app = MainWindow(
                config=self.config,
                handler=DeviceListComboHandler(self.selection_service, get_operation_guard()),
                installer=installer,
                cancel_token=self.cancel_token
            )

            app.run()
            return True

        except ImportError as e:
            self.logger.error(f"GUI dependencies not available: {e}")
            self.logger.info("Please install GUI dependencies: pip install customtkinter")
            return False

    def cleanup(self) -> None:
        """Cancel background work and release services."""
        self.cancel_token.cancel()
        try:
            get_dependency_installer().cleanup(wait=False)
        except RuntimeError:
            # Never initialized
            pass

        if self.logger:
            self.logger.info("Application shutdown completed")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Meadow Device Target - choose the Meadow board to deploy to",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                      # Start GUI mode
  %(prog)s --list               # List connected devices
  %(prog)s --current            # Show the selected device
  %(prog)s --select COM3        # Select a device
  %(prog)s --install-deps       # Install the Meadow project templates
        """)

    action_group = parser.add_argument_group('Actions')
    action = action_group.add_mutually_exclusive_group()
    action.add_argument('--gui', action='store_true',
                        help='Start GUI mode (default if no other action specified)')
    action.add_argument('--list', action='store_true',
                        help='List connected devices')
    action.add_argument('--current', action='store_true',
                        help='Show the selected device target')
    action.add_argument('--select', metavar='DEVICE',
                        help='Select the device target')
    action.add_argument('--install-deps', action='store_true',
                        help='Install the Meadow project templates and wait for completion')

    config_group = parser.add_argument_group('Configuration')
    config_group.add_argument('--config', metavar='CONFIG_FILE',
                              help='Path to configuration file')
    config_group.add_argument('--debug', action='store_true',
                              help='Enable debug logging')
    config_group.add_argument('--no-color', action='store_true',
                              help='Disable colored output')

    return parser


def main() -> int:
    """Main application entry point."""
    app = MeadowDeviceTargetApp()
    exit_code = 0

    try:
        parser = create_argument_parser()
        args = parser.parse_args()

        app.initialize(args.config, debug=args.debug, colored=not args.no_color)

        if args.list:
            success = app.run_list()
        elif args.current:
            success = app.run_current()
        elif args.select is not None:
            success = app.run_select(args.select)
        elif args.install_deps:
            success = app.run_install_dependencies()
        else:
            success = app.run_gui_mode()

        exit_code = 0 if success else 1

    except KeyboardInterrupt:
        if app.logger:
            app.logger.info("Interrupted by user")
        else:
            print("\nInterrupted by user")
        exit_code = 130

    except EnumerationUnavailableError as e:
        if app.logger:
            app.logger.error(str(e))
        else:
            print(str(e))
        exit_code = 1

    except Exception as e:
        if app.logger:
            app.logger.error(f"Unexpected error: {e}")
            app.logger.debug(traceback.format_exc())
        else:
            print(f"Unexpected error: {e}")
        exit_code = 1

    finally:
        app.cleanup()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
