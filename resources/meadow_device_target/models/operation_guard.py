"""
Operation guard for Meadow Device Target.

While a build or deploy is running the device list must stay still, so the
selection service checks this flag before every operation.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional


class OperationGuard:
    """Thread-safe "operation in progress" flag."""

    def __init__(self, active: bool = False):
        self._lock = threading.Lock()
        self._active = active

    def is_set(self) -> bool:
        """Check if an operation is in progress."""
        with self._lock:
            return self._active

    def set(self, active: bool = True) -> None:
        """Mark an operation as started (True) or finished (False)."""
        with self._lock:
            self._active = active

    def clear(self) -> None:
        self.set(False)

    @contextmanager
    def active(self) -> Iterator['OperationGuard']:
        """Hold the flag for the duration of a with block."""
        self.set(True)
        try:
            yield self
        finally:
            self.clear()

    def __bool__(self) -> bool:
        return self.is_set()


# Process-wide guard shared by hosts and build/deploy tooling
_global_guard: Optional[OperationGuard] = None


def get_operation_guard() -> OperationGuard:
    """Get the process-wide operation guard."""
    global _global_guard
    if _global_guard is None:
        _global_guard = OperationGuard()
    return _global_guard
