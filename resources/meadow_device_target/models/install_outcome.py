"""
Dependency installation outcome for Meadow Device Target.

This module holds the installer's state machine values and the result record
produced by a single bootstrap attempt.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InstallerState(Enum):
    """Dependency installer lifecycle."""
    IDLE = "idle"
    INSTALLING = "installing"
    DONE = "done"


class InstallOutcome(Enum):
    """Classification of a bootstrap attempt."""
    SKIPPED = "skipped"        # No network, nothing launched
    SUCCEEDED = "succeeded"
    FAILED = "failed"          # Non-zero exit or launch failure
    CANCELLED = "cancelled"    # Host shut down while waiting


@dataclass
class InstallResult:
    """Result of a dependency installation attempt."""
    outcome: InstallOutcome
    package_name: str
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    execution_time: float = 0.0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if the package was installed."""
        return self.outcome == InstallOutcome.SUCCEEDED

    @property
    def output(self) -> str:
        """Get combined stdout/stderr output."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __str__(self) -> str:
        return f"{self.package_name}: {self.outcome.value} (exit code {self.exit_code})"
