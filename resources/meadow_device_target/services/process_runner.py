"""
External process runner for Meadow Device Target.

This module launches command line tools with captured output, waits for them
without blocking on a single call, and honours cancellation requests from the
host.
"""

import logging
import os
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import IO, Callable, List, Optional, Sequence

from meadow_device_target.utils.platform_utils import get_hidden_window_flags, is_windows


class CancellationToken:
    """Cancellation signal shared between a host and background work."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or the timeout expires; returns is_cancelled."""
        return self._event.wait(timeout)


@dataclass
class ProcessResult:
    """Result of an external process run."""
    argv: List[str]
    exit_code: Optional[int]
    stdout: str
    stderr: str
    execution_time: float = 0.0
    cancelled: bool = False

    @property
    def success(self) -> bool:
        """Check if the process exited with code 0."""
        return not self.cancelled and self.exit_code == 0

    @property
    def output(self) -> str:
        """Get combined stdout/stderr output."""
        return f"{self.stdout}\n{self.stderr}".strip()


class ProcessRunner:
    """
    Runs external commands with streamed output capture.

    stdout and stderr are drained by reader threads as data arrives so a
    chatty child cannot fill a pipe and stall. The wait loop polls the child
    and the cancellation token. On cancellation the child and its process
    group are terminated, then killed if they do not exit within a few poll
    intervals. Output readers are abandoned rather than joined once
    cancellation is requested, so descendants holding the pipes cannot
    delay the return.
    """

    TERMINATE_GRACE_POLLS = 3

    def __init__(self, poll_interval: float = 0.1,
                 terminate_timeout: float = 5.0,
                 output_callback: Optional[Callable[[str], None]] = None):
        """
        Initialize the process runner.

        Args:
            poll_interval: Seconds between exit/cancellation checks
            terminate_timeout: Upper bound on the wait after terminating before
                the process group is killed
            output_callback: Called with every captured output line
        """
        self.poll_interval = poll_interval
        self.terminate_timeout = terminate_timeout
        self.output_callback = output_callback
        self._logger = logging.getLogger(__name__)

    def run(self, executable: str, command: str = "", arguments: Sequence[str] = (),
            cancel_token: Optional[CancellationToken] = None) -> ProcessResult:
        """
        Run an executable and wait for it to finish.

        Args:
            executable: Program to launch, e.g. "dotnet"
            command: Space separated sub-command, e.g. "new install"
            arguments: Additional arguments
            cancel_token: Token aborting the wait when cancelled

        Returns:
            ProcessResult with the exit code and captured output

        Raises:
            OSError: If the process cannot be started
        """
        argv = [executable, *command.split(), *arguments]

        if cancel_token is not None and cancel_token.is_cancelled:
            self._logger.info(f"Not starting {' '.join(argv)}: already cancelled")
            return ProcessResult(argv=argv, exit_code=None, stdout="", stderr="", cancelled=True)

        self._logger.info(f"CMD {' '.join(argv)}")

        start_time = time.time()
        process = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1,
            creationflags=get_hidden_window_flags(),
            # Own process group so cancellation reaches tools the child spawns
            start_new_session=not is_windows(),
        )

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []
        readers = [
            self._start_reader(process.stdout, stdout_lines),
            self._start_reader(process.stderr, stderr_lines),
        ]

        try:
            cancelled = self._wait_for_exit(process, cancel_token)
            if not cancelled:
                # Descendants may still hold the pipes open after the child exits
                cancelled = self._wait_for_readers(readers, cancel_token)
        except KeyboardInterrupt:
            # The child runs in its own session and misses the terminal's Ctrl-C
            self._stop_process(process)
            raise
        if cancelled:
            self._stop_process(process)

        execution_time = time.time() - start_time
        exit_code = None if cancelled else process.returncode

        result = ProcessResult(
            argv=argv,
            exit_code=exit_code,
            stdout="\n".join(list(stdout_lines)),
            stderr="\n".join(list(stderr_lines)),
            execution_time=execution_time,
            cancelled=cancelled,
        )

        if cancelled:
            self._logger.info(f"Command cancelled after {execution_time:.1f}s")
        elif result.success:
            self._logger.info(f"Command completed successfully in {execution_time:.1f}s")
        else:
            self._logger.warning(f"Command failed with code {exit_code}")

        if result.stdout:
            self._logger.debug(f"STDOUT {result.stdout.strip()}")
        if result.stderr:
            self._logger.debug(f"STDERR {result.stderr.strip()}")

        return result

    def _start_reader(self, stream: IO[str], sink: List[str]) -> threading.Thread:
        reader = threading.Thread(target=self._read_stream, args=(stream, sink), daemon=True)
        reader.start()
        return reader

    def _read_stream(self, stream: IO[str], sink: List[str]) -> None:
        try:
            for line in iter(stream.readline, ''):
                line = line.rstrip('\r\n')
                sink.append(line)
                if self.output_callback:
                    self.output_callback(line)
        except (OSError, ValueError):
            # Stream closed underneath us after cancellation
            pass
        finally:
            stream.close()

    def _wait_for_exit(self, process: subprocess.Popen,
                       cancel_token: Optional[CancellationToken]) -> bool:
        """Poll until the child exits; returns True if cancelled first."""
        while process.poll() is None:
            if cancel_token is None:
                time.sleep(self.poll_interval)
            elif cancel_token.wait(self.poll_interval):
                return True
        return False

    def _wait_for_readers(self, readers: List[threading.Thread],
                          cancel_token: Optional[CancellationToken]) -> bool:
        """Join the output readers; returns True if cancelled first."""
        for reader in readers:
            while reader.is_alive():
                if cancel_token is not None and cancel_token.is_cancelled:
                    # Readers are daemon threads and are abandoned here
                    return True
                reader.join(self.poll_interval)
        return False

    def _signal_process(self, process: subprocess.Popen, force: bool) -> None:
        if is_windows():
            if force:
                process.kill()
            else:
                process.terminate()
            return

        sig = signal.SIGKILL if force else signal.SIGTERM
        try:
            os.killpg(process.pid, sig)
        except ProcessLookupError:
            # Whole group already gone
            pass

    def _stop_process(self, process: subprocess.Popen) -> None:
        """
        Terminate a cancelled child and its process group.

        The group gets a few poll intervals (never more than
        terminate_timeout) to exit after the terminate signal before it is
        killed.
        """
        grace = min(self.terminate_timeout, self.poll_interval * self.TERMINATE_GRACE_POLLS)

        self._logger.debug(f"Terminating process {process.pid}")
        self._signal_process(process, force=False)
        try:
            process.wait(timeout=grace)
            if is_windows():
                return
        except subprocess.TimeoutExpired:
            self._logger.warning(f"Process {process.pid} did not exit, killing it")

        # Descendants that ignored the terminate signal, or the child itself
        self._signal_process(process, force=True)
        try:
            process.wait(timeout=grace)
        except subprocess.TimeoutExpired:
            self._logger.warning(f"Process {process.pid} still running after kill")
