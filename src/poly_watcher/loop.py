"""The polling loop: scan, compare, rebuild, restart, sleep."""

import logging
import threading
from collections.abc import Callable

from poly_watcher.errors import CommandError, ProcessStartError, ScanError
from poly_watcher.fingerprint import scan_tree
from poly_watcher.models import CycleOutcome, CycleReport, ScanResult, WatcherConfig, WatcherState
from poly_watcher.notifier import NoOpNotifier, WatchNotifier
from poly_watcher.runner import CommandRunner
from poly_watcher.supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)

Scanner = Callable[[WatcherConfig, int | None], ScanResult]


class WatchLoop:
    """Drive one watcher: poll the tree and rebuild/restart on change.

    Each ``tick()`` is one cycle::

        scan -> unchanged                                  -> idle
        scan -> changed -> [dependency] -> build -> failed -> idle
                                                 -> ok     -> restart -> idle

    The stored fingerprint is replaced as soon as a change is seen, before the
    build runs. A failed build is therefore not retried until the tree changes
    again.

    Usage:
        loop = WatchLoop(config, notifier=LoggingNotifier())
        loop.run()          # blocks; loop.stop() from another thread ends it
    """

    def __init__(
        self,
        config: WatcherConfig,
        runner: CommandRunner | None = None,
        supervisor: ProcessSupervisor | None = None,
        notifier: WatchNotifier | None = None,
        scanner: Scanner = scan_tree,
    ):
        """Initialize loop.

        Args:
            config: Watcher configuration
            runner: Command runner for dependency and build steps
            supervisor: Supervisor for the run process
            notifier: Optional notification handler (defaults to NoOpNotifier - silent)
            scanner: Tree scanning function (defaults to scan_tree)
        """
        self.config = config
        self.notifier = notifier or NoOpNotifier()
        self.runner = runner or CommandRunner(cwd=config.root)
        self.supervisor = supervisor or ProcessSupervisor(cwd=config.root, notifier=self.notifier)
        self.state = WatcherState()
        self._scan = scanner
        self._stop_event = threading.Event()

    def tick(self) -> CycleReport:
        """Run a single scan/compare/build/restart cycle.

        Returns:
            CycleReport describing how the cycle ended
        """
        try:
            result = self._scan(self.config, self.state.previous_dep_mtime)
        except ScanError as e:
            self.notifier.error(f"Error hashing dir: {e}")
            return CycleReport(CycleOutcome.SCAN_FAILED, error=str(e))

        self.state.previous_dep_mtime = result.dep_mtime

        if result.fingerprint == self.state.previous_fingerprint:
            return CycleReport(CycleOutcome.UNCHANGED, result.fingerprint, result.dep_changed)

        self.notifier.info("Change detected, rebuilding...")
        logger.debug(f"Fingerprint {self.state.previous_fingerprint:016x} -> {result.fingerprint:016x}")
        self.state.previous_fingerprint = result.fingerprint

        report = CycleReport(CycleOutcome.RESTARTED, result.fingerprint, result.dep_changed)

        if result.dep_changed and self.config.dep_command:
            self.notifier.info(f"{self.config.dep_file} changed: running {self.config.dep_command}...")
            report.commands.append(self.config.dep_command)
            try:
                self.runner.run(self.config.dep_command)
            except CommandError as e:
                self.notifier.error(f"Build failed: {e}")
                report.outcome = CycleOutcome.DEPENDENCY_FAILED
                report.error = str(e)
                return report

        self.notifier.info("Running build command...")
        report.commands.append(self.config.build_command)
        try:
            self.runner.run(self.config.build_command)
        except CommandError as e:
            self.notifier.error(f"Build failed: {e}")
            report.outcome = CycleOutcome.BUILD_FAILED
            report.error = str(e)
            return report

        report.commands.append(self.config.run_command)
        try:
            self.supervisor.restart(self.config.run_command)
        except ProcessStartError as e:
            self.notifier.error(f"App start failed: {e}")
            report.outcome = CycleOutcome.RESTART_FAILED
            report.error = str(e)

        return report

    def run(self, max_cycles: int | None = None) -> None:
        """Poll until ``stop()`` is called.

        Sleeps a fixed ``config.interval`` after every cycle, so the effective
        period is cycle work time plus the interval.

        Args:
            max_cycles: Stop after this many cycles (None = run until stopped)
        """
        logger.info(f"Watching {self.config.root} every {self.config.interval:g}s")
        cycles = 0
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception as e:
                # Keep polling; nothing in a cycle is allowed to end the watcher.
                logger.exception(f"Unexpected error in watch cycle: {e}")

            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            self._stop_event.wait(self.config.interval)
        logger.debug(f"Watch loop finished after {cycles} cycle(s)")

    def stop(self) -> None:
        """Ask ``run()`` to return after the current cycle."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        """Whether ``stop()`` has been requested."""
        return self._stop_event.is_set()
