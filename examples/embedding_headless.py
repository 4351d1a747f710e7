#!/usr/bin/env python3
"""
Example: Embedding the watch loop
Shows how to drive WatchLoop from another program instead of the CLI.

This example demonstrates:
- Building a WatcherConfig in code
- A custom notifier that collects cycle messages
- Running single cycles with tick() and stopping run() from another thread
"""

import logging
import sys
import threading
import time

try:
    from poly_watcher import CycleOutcome, WatcherConfig, WatchLoop
except ImportError:
    print("Error: Install poly-watcher first: pip install -e .")
    sys.exit(1)


class CollectingNotifier:
    """Keep every message so the host can show it however it likes."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))


def example_single_cycle(root: str) -> None:
    """Run one cycle and inspect the report."""
    config = WatcherConfig(
        root=root,
        build_command="echo building",
        run_command="echo running && sleep 1",
        excludes=(".pyc", "__pycache__"),
    )
    notifier = CollectingNotifier()
    loop = WatchLoop(config, notifier=notifier)

    report = loop.tick()
    print(f"First cycle: {report.outcome.value} (fingerprint {report.fingerprint:016x})")
    print(f"Commands: {report.commands}")

    report = loop.tick()
    if report.outcome is CycleOutcome.UNCHANGED:
        print("Second cycle: nothing changed, nothing rebuilt")

    loop.supervisor.stop()
    for level, message in notifier.messages:
        print(f"  [{level}] {message}")


def example_background_loop(root: str, seconds: float = 3.0) -> None:
    """Poll in a background thread for a few seconds, then stop."""
    config = WatcherConfig(root=root, interval=0.5, build_command="true", run_command="sleep 30")
    loop = WatchLoop(config)

    thread = threading.Thread(target=loop.run, daemon=True)
    thread.start()
    time.sleep(seconds)

    loop.stop()
    thread.join()
    print(f"Tracked app pid before shutdown: {loop.supervisor.current_pid()}")
    loop.supervisor.stop()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    target = sys.argv[1] if len(sys.argv) > 1 else "."
    example_single_cycle(target)
    example_background_loop(target)
