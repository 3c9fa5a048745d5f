"""
Tests for application configuration, the operation guard and validators.
"""

import sys
import threading
from pathlib import Path

import pytest

# Add the resources directory to Python path
sys.path.insert(0, str(Path(__file__).parent / "resources"))

from meadow_device_target.config.settings import AppConfig, InstallerConfig, LogLevel, UIConfig
from meadow_device_target.models.operation_guard import OperationGuard
from meadow_device_target.utils.validators import Validator


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("MEADOW_DOTNET_PATH", "MEADOW_TEMPLATE_PACKAGE", "MEADOW_SKIP_DEPENDENCY_INSTALL",
                 "MEADOW_CONFIG_DIR", "MEADOW_DEBUG", "MEADOW_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestAppConfig:
    """Configuration defaults, overrides and persistence."""

    def test_defaults(self):
        config = AppConfig()

        assert config.installer.dotnet_executable == "dotnet"
        assert config.installer.template_package == "WildernessLabs.Meadow.Template"
        assert config.installer.install_on_startup
        assert config.log_level == LogLevel.INFO
        assert not config.debug_mode

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MEADOW_DOTNET_PATH", "/opt/dotnet/dotnet")
        monkeypatch.setenv("MEADOW_TEMPLATE_PACKAGE", "Custom.Templates")
        monkeypatch.setenv("MEADOW_SKIP_DEPENDENCY_INSTALL", "yes")
        monkeypatch.setenv("MEADOW_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("MEADOW_DEBUG", "1")
        monkeypatch.setenv("MEADOW_LOG_LEVEL", "debug")

        config = AppConfig()

        assert config.installer.dotnet_executable == "/opt/dotnet/dotnet"
        assert config.installer.template_package == "Custom.Templates"
        assert not config.installer.install_on_startup
        assert config.get_settings_file_path() == tmp_path / "settings.json"
        assert config.debug_mode
        assert config.log_level == LogLevel.DEBUG

    def test_invalid_log_level_in_environment_is_ignored(self, monkeypatch):
        monkeypatch.setenv("MEADOW_LOG_LEVEL", "chatty")

        assert AppConfig().log_level == LogLevel.INFO

    @pytest.mark.parametrize("kwargs", [
        {"installer": InstallerConfig(dotnet_executable="")},
        {"installer": InstallerConfig(template_package="")},
        {"installer": InstallerConfig(connectivity_timeout=0)},
        {"installer": InstallerConfig(poll_interval=0)},
        {"ui": UIConfig(refresh_interval_ms=-1)},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            AppConfig(**kwargs)

    def test_save_and_load_round_trip(self, tmp_path):
        config = AppConfig(installer=InstallerConfig(skip_if_installed=True), log_level=LogLevel.WARNING)
        path = tmp_path / "config.json"

        config.save_to_file(path)
        loaded = AppConfig.load_from_file(path)

        assert loaded.installer.skip_if_installed
        assert loaded.log_level == LogLevel.WARNING
        assert loaded.enumerator.port_patterns == config.enumerator.port_patterns

    def test_load_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_file(tmp_path / "nope.json")

    def test_load_corrupt_file_raises_value_error(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError):
            AppConfig.load_from_file(path)


class TestOperationGuard:
    """Build/deploy in-progress flag."""

    def test_starts_clear(self):
        guard = OperationGuard()
        assert not guard.is_set()
        assert not guard

    def test_active_context_sets_and_clears(self):
        guard = OperationGuard()

        with guard.active():
            assert guard.is_set()

        assert not guard.is_set()

    def test_active_context_clears_on_error(self):
        guard = OperationGuard()

        with pytest.raises(RuntimeError):
            with guard.active():
                raise RuntimeError("deploy failed")

        assert not guard.is_set()

    def test_visible_across_threads(self):
        guard = OperationGuard()
        seen = []

        worker = threading.Thread(target=lambda: seen.append(guard.is_set()))
        guard.set()
        worker.start()
        worker.join()

        assert seen == [True]


class TestValidator:
    """Device identifier and package name validation."""

    @pytest.mark.parametrize("identifier", ["COM3", "/dev/ttyACM0", "Meadow F7 (SN 1234)"])
    def test_valid_identifiers(self, identifier):
        assert Validator().validate_device_identifier(identifier)

    @pytest.mark.parametrize("identifier", ["", "   ", None, 3, "COM3\n"])
    def test_invalid_identifiers(self, identifier):
        assert not Validator().validate_device_identifier(identifier)

    def test_sanitize_keeps_order_and_duplicates(self):
        assert Validator().sanitize_device_list(["COM5", "", "COM3", "com5"]) == ["COM5", "COM3", "com5"]

    @pytest.mark.parametrize("name,valid", [
        ("WildernessLabs.Meadow.Template", True),
        ("Meadow-Templates_2", True),
        ("", False),
        ("Meadow Template", False),
        ("Meadow..Template", False),
        ("--force", False),
    ])
    def test_package_names(self, name, valid):
        assert bool(Validator().validate_package_name(name)) is valid
