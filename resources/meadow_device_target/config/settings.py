"""
Configuration management system for Meadow Device Target.

This module handles application settings, default values, environment
overrides and configuration file loading/saving with proper error handling.
"""

import os
import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, asdict, field
from enum import Enum


APP_DIR_NAME = "meadow-device-target"


def _get_version_from_file() -> str:
    """Read version from VERSION file in the package directory."""
    try:
        version_file = Path(__file__).parent.parent / "VERSION"
        if version_file.exists():
            return version_file.read_text().strip()
    except OSError:
        pass
    # Fallback to hardcoded version if file doesn't exist
    return "1.0.0"


def _env_flag(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


class LogLevel(Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class InstallerConfig:
    """Dependency installer configuration."""
    dotnet_executable: str = "dotnet"
    install_command: str = "new install"
    list_command: str = "new list"
    template_package: str = "WildernessLabs.Meadow.Template"
    template_name: str = "Meadow"

    # Reachability check against the package feed
    connectivity_url: str = "https://api.nuget.org/v3/index.json"
    connectivity_timeout: int = 5

    install_on_startup: bool = True
    skip_if_installed: bool = False
    poll_interval: float = 0.1
    terminate_timeout: float = 5.0


@dataclass
class EnumeratorConfig:
    """Serial port enumeration configuration."""
    # Unix device node patterns for USB serial adapters and CDC devices
    port_patterns: List[str] = field(default_factory=lambda: [
        "/dev/ttyACM*",
        "/dev/ttyUSB*",
        "/dev/tty.usbmodem*",
        "/dev/tty.usbserial*",
    ])


@dataclass
class UIConfig:
    """User interface configuration."""
    colored_output: bool = True
    window_title: str = "Meadow Device Target"
    refresh_interval_ms: int = 2000


@dataclass
class AppConfig:
    """Main application configuration container."""

    installer: InstallerConfig = field(default_factory=InstallerConfig)
    enumerator: EnumeratorConfig = field(default_factory=EnumeratorConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Application metadata
    version: str = field(default_factory=_get_version_from_file)
    app_name: str = "Meadow Device Target"
    config_version: str = "1.0"

    # Runtime settings
    debug_mode: bool = False
    log_level: LogLevel = LogLevel.INFO
    config_dir: Optional[str] = None

    def __post_init__(self):
        """Post-initialization processing."""
        self._load_environment_variables()
        self._validate_config()

    def _load_environment_variables(self) -> None:
        """Load configuration from environment variables."""
        if env_dotnet := os.getenv("MEADOW_DOTNET_PATH"):
            self.installer.dotnet_executable = env_dotnet

        if env_package := os.getenv("MEADOW_TEMPLATE_PACKAGE"):
            self.installer.template_package = env_package

        if env_skip := os.getenv("MEADOW_SKIP_DEPENDENCY_INSTALL"):
            self.installer.install_on_startup = not _env_flag(env_skip)

        if env_config_dir := os.getenv("MEADOW_CONFIG_DIR"):
            self.config_dir = env_config_dir

        if env_debug := os.getenv("MEADOW_DEBUG"):
            self.debug_mode = _env_flag(env_debug)

        if env_log_level := os.getenv("MEADOW_LOG_LEVEL"):
            try:
                self.log_level = LogLevel(env_log_level.upper())
            except ValueError:
                logging.warning(f"Invalid log level in environment: {env_log_level}")

    def _validate_config(self) -> None:
        """Validate configuration values."""
        if not self.installer.dotnet_executable:
            raise ValueError("dotnet executable cannot be empty")

        if not self.installer.template_package:
            raise ValueError("Template package cannot be empty")

        if self.installer.connectivity_timeout <= 0:
            raise ValueError("Connectivity timeout must be positive")

        if self.installer.poll_interval <= 0:
            raise ValueError("Poll interval must be positive")

        if self.ui.refresh_interval_ms <= 0:
            raise ValueError("Refresh interval must be positive")

    def get_config_dir(self) -> Path:
        """Get the application configuration directory."""
        if self.config_dir:
            path = Path(self.config_dir)
            path.mkdir(parents=True, exist_ok=True)
            return path
        from ..utils.platform_utils import get_platform_config_dir
        return get_platform_config_dir(APP_DIR_NAME)

    def get_config_file_path(self) -> Path:
        """Get the path to the configuration file."""
        return self.get_config_dir() / 'config.json'

    def get_settings_file_path(self) -> Path:
        """Get the path to the persisted device selection."""
        return self.get_config_dir() / 'settings.json'

    def get_log_file_path(self) -> Path:
        """Get the path to the application log file."""
        return self.get_config_dir() / 'meadow.log'

    def save_to_file(self, file_path: Optional[Union[str, Path]] = None) -> None:
        """
        Save configuration to a JSON file.

        Args:
            file_path: Path to save the config file. If None, uses default location.

        Raises:
            IOError: If the file cannot be written
        """
        if file_path is None:
            file_path = self.get_config_file_path()
        else:
            file_path = Path(file_path)

        try:
            config_dict = self._to_serializable_dict()

            file_path.parent.mkdir(parents=True, exist_ok=True)

            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)

            logging.info(f"Configuration saved to {file_path}")

        except (OSError, TypeError) as e:
            raise IOError(f"Failed to save configuration to {file_path}: {e}")

    def _to_serializable_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-serializable dictionary."""
        config_dict = asdict(self)
        config_dict['log_level'] = self.log_level.value
        return config_dict

    @classmethod
    def load_from_file(cls, file_path: Optional[Union[str, Path]] = None) -> 'AppConfig':
        """
        Load configuration from a JSON file.

        Args:
            file_path: Path to load the config file from. If None, uses default location.

        Returns:
            AppConfig instance loaded from file

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the config file is invalid
        """
        if file_path is None:
            file_path = cls().get_config_file_path()
        else:
            file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)

            return cls._from_dict(config_dict)

        except (OSError, TypeError, ValueError) as e:
            raise ValueError(f"Failed to load configuration from {file_path}: {e}")

    @classmethod
    def _from_dict(cls, config_dict: Dict[str, Any]) -> 'AppConfig':
        """Create AppConfig instance from dictionary."""
        log_level = LogLevel.INFO
        if log_level_str := config_dict.get('log_level'):
            try:
                log_level = LogLevel(log_level_str)
            except ValueError:
                logging.warning(f"Invalid log level in config: {log_level_str}")

        return cls(
            installer=InstallerConfig(**config_dict.get('installer', {})),
            enumerator=EnumeratorConfig(**config_dict.get('enumerator', {})),
            ui=UIConfig(**config_dict.get('ui', {})),
            version=config_dict.get('version', _get_version_from_file()),
            app_name=config_dict.get('app_name', 'Meadow Device Target'),
            config_version=config_dict.get('config_version', '1.0'),
            debug_mode=config_dict.get('debug_mode', False),
            log_level=log_level,
            config_dir=config_dict.get('config_dir'),
        )


# Global configuration instance
_global_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Raises:
        RuntimeError: If configuration hasn't been initialized
    """
    if _global_config is None:
        raise RuntimeError("Configuration not initialized. Call init_config() first.")
    return _global_config


def init_config(config_file: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Initialize the global configuration.

    Args:
        config_file: Optional path to config file. If None, uses default or creates new.

    Returns:
        Initialized AppConfig instance
    """
    global _global_config

    try:
        if config_file:
            _global_config = AppConfig.load_from_file(config_file)
        else:
            try:
                _global_config = AppConfig.load_from_file()
            except FileNotFoundError:
                _global_config = AppConfig()
                logging.info("Created new configuration with default values")
    except (ValueError, OSError) as e:
        logging.warning(f"Failed to load configuration: {e}. Using defaults.")
        _global_config = AppConfig()

    return _global_config
