"""
Tests for the background dependency installer.
"""

import sys
import threading
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

# Add the resources directory to Python path
sys.path.insert(0, str(Path(__file__).parent / "resources"))

from meadow_device_target.config.settings import InstallerConfig
from meadow_device_target.models.install_outcome import InstallOutcome, InstallerState
from meadow_device_target.services.dependency_installer import DependencyInstaller
from meadow_device_target.services.process_runner import CancellationToken, ProcessResult


def process_result(exit_code=0, cancelled=False, stdout="", stderr=""):
    return ProcessResult(argv=["dotnet"], exit_code=exit_code, stdout=stdout,
                         stderr=stderr, cancelled=cancelled)


@pytest.fixture
def runner():
    runner = Mock()
    runner.run.return_value = process_result(0)
    return runner


def make_installer(runner, online=True, **config_overrides):
    config = InstallerConfig(**config_overrides)
    return DependencyInstaller(config=config, runner=runner, network_check=lambda: online)


def test_offline_skips_without_launching(runner):
    installer = make_installer(runner, online=False)

    result = installer.install()

    assert result.outcome == InstallOutcome.SKIPPED
    assert installer.state == InstallerState.DONE
    runner.run.assert_not_called()


def test_runs_dotnet_new_install_with_package(runner):
    installer = make_installer(runner)
    token = CancellationToken()

    result = installer.install(token)

    assert result.outcome == InstallOutcome.SUCCEEDED
    runner.run.assert_called_once_with("dotnet", "new install", ["WildernessLabs.Meadow.Template"],
                                       cancel_token=token)


def test_nonzero_exit_is_failed(runner):
    runner.run.return_value = process_result(1, stderr="No such package")
    installer = make_installer(runner)

    result = installer.install()

    assert result.outcome == InstallOutcome.FAILED
    assert result.exit_code == 1
    assert "No such package" in result.output
    assert installer.last_result is result


def test_cancelled_run_is_reported(runner):
    runner.run.return_value = process_result(None, cancelled=True)
    installer = make_installer(runner)

    assert installer.install().outcome == InstallOutcome.CANCELLED


def test_launch_failure_is_failed(runner):
    runner.run.side_effect = FileNotFoundError("dotnet")
    installer = make_installer(runner)

    result = installer.install()

    assert result.outcome == InstallOutcome.FAILED
    assert "dotnet" in result.error
    assert installer.state == InstallerState.DONE


def test_invalid_package_name_fails_without_launching(runner):
    installer = make_installer(runner, template_package="bad package; rm -rf")

    assert installer.install().outcome == InstallOutcome.FAILED
    runner.run.assert_not_called()


def test_skip_if_installed_checks_template_list(runner):
    installer = make_installer(runner, skip_if_installed=True)

    result = installer.install()

    assert result.outcome == InstallOutcome.SUCCEEDED
    runner.run.assert_called_once()
    assert runner.run.call_args[0][:3] == ("dotnet", "new list", ["Meadow"])


def test_is_template_installed_uses_exit_code(runner):
    installer = make_installer(runner)
    assert installer.is_template_installed()

    runner.run.return_value = process_result(103)
    assert not installer.is_template_installed()

    runner.run.side_effect = OSError("missing")
    assert not installer.is_template_installed()


def test_background_install_does_not_block_caller(runner):
    release = threading.Event()

    def slow_run(*args, **kwargs):
        release.wait(5)
        return process_result(0)

    runner.run.side_effect = slow_run
    installer = make_installer(runner)

    future = installer.start_background()
    assert not future.done()

    release.set()
    assert future.result(timeout=5).outcome == InstallOutcome.SUCCEEDED
    installer.cleanup(wait=True)


def test_background_install_contains_unexpected_errors(runner):
    def broken_check():
        raise RuntimeError("adapter exploded")

    installer = DependencyInstaller(config=InstallerConfig(), runner=runner, network_check=broken_check)

    result = installer.start_background().result(timeout=5)

    assert result.outcome == InstallOutcome.FAILED
    assert "adapter exploded" in result.error
    assert installer.state == InstallerState.DONE
    installer.cleanup(wait=True)


def test_default_network_check_contacts_feed(runner):
    installer = DependencyInstaller(config=InstallerConfig(), runner=runner)

    with patch("meadow_device_target.services.dependency_installer.requests.head") as head:
        head.return_value.status_code = 200
        assert installer.network_check()
        head.assert_called_once()
        assert head.call_args[0][0] == InstallerConfig().connectivity_url

        head.side_effect = requests.exceptions.ConnectionError("offline")
        assert not installer.network_check()
