"""
Dependency installer service for Meadow Device Target.

This module makes sure the Meadow project templates are available to the
dotnet CLI. The install runs in the background at startup, is skipped when
there is no network, and never raises into the caller that started it.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

import requests

from meadow_device_target.config.settings import InstallerConfig
from meadow_device_target.models.install_outcome import InstallOutcome, InstallResult, InstallerState
from meadow_device_target.services.process_runner import CancellationToken, ProcessRunner
from meadow_device_target.utils.validators import get_validator


class DependencyInstaller:
    """
    Installs the Meadow template package with "dotnet new install".

    No retries: a failed attempt is logged and left for the next startup.
    """

    def __init__(self, config: Optional[InstallerConfig] = None,
                 runner: Optional[ProcessRunner] = None,
                 network_check: Optional[Callable[[], bool]] = None):
        """
        Initialize the dependency installer.

        Args:
            config: Installer configuration (executable, package, connectivity URL)
            runner: Process runner used to invoke dotnet
            network_check: Reachability check; defaults to an HTTP HEAD request to
                the package feed
        """
        self.config = config or InstallerConfig()
        self.runner = runner or ProcessRunner(
            poll_interval=self.config.poll_interval,
            terminate_timeout=self.config.terminate_timeout,
        )
        self.network_check = network_check or self._check_internet_connectivity

        self.state = InstallerState.IDLE
        self.last_result: Optional[InstallResult] = None

        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="meadow-deps")
        self._state_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _set_state(self, state: InstallerState) -> None:
        with self._state_lock:
            self.state = state

    def _check_internet_connectivity(self) -> bool:
        """
        Check if the package feed is reachable.

        Returns:
            True if internet connection appears to be working
        """
        try:
            response = requests.head(
                self.config.connectivity_url,
                timeout=self.config.connectivity_timeout,
                allow_redirects=True,
            )
            return response.status_code < 500
        except requests.exceptions.RequestException:
            return False

    def install(self, cancel_token: Optional[CancellationToken] = None) -> InstallResult:
        """
        Install (or update) the template package.

        Args:
            cancel_token: Token tied to host shutdown

        Returns:
            InstallResult classifying the attempt
        """
        package_name = self.config.template_package
        self._set_state(InstallerState.INSTALLING)
        try:
            result = self._install(package_name, cancel_token)
        finally:
            self._set_state(InstallerState.DONE)

        self.last_result = result
        return result

    def _install(self, package_name: str, cancel_token: Optional[CancellationToken]) -> InstallResult:
        if not self.network_check():
            self._logger.info(f"No network connection, skipping install of {package_name}")
            return InstallResult(outcome=InstallOutcome.SKIPPED, package_name=package_name)

        validation = get_validator().validate_package_name(package_name)
        if not validation:
            self._logger.error(validation.message)
            return InstallResult(outcome=InstallOutcome.FAILED, package_name=package_name,
                                 error=validation.message)

        if self.config.skip_if_installed and self.is_template_installed(cancel_token=cancel_token):
            self._logger.info(f"{self.config.template_name} templates already installed")
            return InstallResult(outcome=InstallOutcome.SUCCEEDED, package_name=package_name, exit_code=0)

        self._logger.info(f"Installing {package_name}...")
        start_time = time.time()
        try:
            process_result = self.runner.run(
                self.config.dotnet_executable,
                self.config.install_command,
                [package_name],
                cancel_token=cancel_token,
            )
        except OSError as e:
            self._logger.warning(f"Could not start {self.config.dotnet_executable}: {e}")
            return InstallResult(outcome=InstallOutcome.FAILED, package_name=package_name,
                                 execution_time=time.time() - start_time, error=str(e))

        if process_result.cancelled:
            outcome = InstallOutcome.CANCELLED
        elif process_result.success:
            outcome = InstallOutcome.SUCCEEDED
        else:
            outcome = InstallOutcome.FAILED

        result = InstallResult(
            outcome=outcome,
            package_name=package_name,
            exit_code=process_result.exit_code,
            stdout=process_result.stdout,
            stderr=process_result.stderr,
            execution_time=process_result.execution_time,
        )

        if outcome == InstallOutcome.SUCCEEDED:
            self._logger.info(f"{package_name} installed")
        elif outcome == InstallOutcome.FAILED:
            self._logger.warning(f"Installing {package_name} failed: {result}")

        return result

    def is_template_installed(self, template_name: Optional[str] = None,
                              cancel_token: Optional[CancellationToken] = None) -> bool:
        """
        Check whether "dotnet new list" knows a template.

        Returns:
            True if the listing command exits with code 0
        """
        template_name = template_name or self.config.template_name
        try:
            result = self.runner.run(
                self.config.dotnet_executable,
                self.config.list_command,
                [template_name],
                cancel_token=cancel_token,
            )
        except OSError as e:
            self._logger.debug(f"Template check failed: {e}")
            return False
        return result.success

    def start_background(self, cancel_token: Optional[CancellationToken] = None) -> Future:
        """
        Run install() on a worker thread and return immediately.

        The returned future always resolves to an InstallResult; errors are
        caught and logged here so they never reach the caller.
        """
        def background_install() -> InstallResult:
            try:
                return self.install(cancel_token)
            except Exception as e:
                self._logger.error(f"Dependency install encountered error: {e}")
                self._set_state(InstallerState.DONE)
                result = InstallResult(outcome=InstallOutcome.FAILED,
                                       package_name=self.config.template_package,
                                       error=str(e))
                self.last_result = result
                return result

        self._logger.debug("Submitting dependency install to background thread")
        return self.executor.submit(background_install)

    def cleanup(self, wait: bool = False) -> None:
        """Release the worker thread."""
        self.executor.shutdown(wait=wait)


# Global service instance
_global_dependency_installer: Optional[DependencyInstaller] = None


def get_dependency_installer() -> DependencyInstaller:
    """
    Get the global dependency installer instance.

    Raises:
        RuntimeError: If service hasn't been initialized
    """
    if _global_dependency_installer is None:
        raise RuntimeError("Dependency installer not initialized. Call init_dependency_installer() first.")
    return _global_dependency_installer


def init_dependency_installer(**kwargs) -> DependencyInstaller:
    """Initialize the global dependency installer."""
    global _global_dependency_installer
    _global_dependency_installer = DependencyInstaller(**kwargs)
    return _global_dependency_installer
