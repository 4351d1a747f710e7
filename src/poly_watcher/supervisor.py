"""Single-instance supervisor for the long-lived run process."""

import logging
import subprocess
import threading
from pathlib import Path

from poly_watcher.errors import ProcessStartError
from poly_watcher.notifier import NoOpNotifier, WatchNotifier

logger = logging.getLogger(__name__)


class ProcessSupervisor:
    """Own at most one tracked run process.

    The handle is shared between the caller of ``restart()`` (the watch loop)
    and one exit-watcher thread per spawned process. Every read and write of it
    happens under ``self._lock``; the raw ``Popen`` never leaves this class.

    The previous process is killed (SIGKILL) but not waited on before the
    replacement is spawned, so the two may briefly coexist and contend for
    resources such as a listening port.
    """

    def __init__(self, cwd: str | Path | None = None, notifier: WatchNotifier | None = None):
        """Initialize supervisor.

        Args:
            cwd: Working directory for the run process
            notifier: Optional notification handler (defaults to NoOpNotifier - silent)
        """
        self.cwd = cwd
        self.notifier = notifier or NoOpNotifier()
        self._lock = threading.Lock()
        self._process: subprocess.Popen | None = None

    # ========================================================================
    # Synchronized accessors
    # ========================================================================

    def current_pid(self) -> int | None:
        """Get the pid of the tracked process, or None."""
        with self._lock:
            return self._process.pid if self._process is not None else None

    def is_running(self) -> bool:
        """Check whether a tracked process exists and has not exited yet."""
        with self._lock:
            return self._process is not None and self._process.poll() is None

    def _swap_and_kill(self, command: str) -> subprocess.Popen | None:
        """Kill the tracked process and start ``command`` in its place.

        Returns:
            The new process, or None when ``command`` is empty

        Raises:
            ProcessStartError: If the shell cannot be spawned; nothing is tracked
        """
        with self._lock:
            self._kill_locked()

            if not command or not command.strip():
                logger.debug("Empty run command, nothing to start")
                return None

            self.notifier.info("Starting app...")
            try:
                process = subprocess.Popen(command, shell=True, cwd=self.cwd)
            except OSError as e:
                raise ProcessStartError(f"Could not start {command!r}: {e}") from e

            self._process = process
            return process

    def _clear_if_matches(self, process: subprocess.Popen) -> bool:
        """Forget ``process`` if it is still the tracked one.

        Returns:
            True if the handle was cleared
        """
        with self._lock:
            if self._process is process:
                self._process = None
                return True
            return False

    def _kill_locked(self) -> None:
        """Kill and clear the tracked process. Caller must hold the lock."""
        if self._process is None:
            return

        self.notifier.info("Stopping previous app process...")
        try:
            self._process.kill()
        except OSError as e:
            # Already gone; the exit watcher will reap it.
            logger.debug(f"Kill of pid {self._process.pid} failed: {e}")
        self._process = None

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def restart(self, command: str) -> int | None:
        """Replace the tracked process with a fresh run of ``command``.

        Args:
            command: Shell command line for the run process

        Returns:
            pid of the new process, or None if ``command`` is empty

        Raises:
            ProcessStartError: If the process cannot be spawned
        """
        process = self._swap_and_kill(command)
        if process is None:
            return None

        watcher = threading.Thread(
            target=self._watch_exit,
            args=(process,),
            name=f"poly-watcher-exit-{process.pid}",
            daemon=True,
        )
        watcher.start()
        logger.debug(f"Run process started with pid {process.pid}")
        return process.pid

    def stop(self) -> None:
        """Force-kill the tracked process, if any."""
        with self._lock:
            self._kill_locked()

    def _watch_exit(self, process: subprocess.Popen) -> None:
        """Block until ``process`` exits, then release the handle."""
        returncode = process.wait()
        self.notifier.info(f"App exited (pid {process.pid}, status {returncode})")
        self._clear_if_matches(process)
