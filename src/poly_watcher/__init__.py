"""poly-watcher: poll a project tree, rebuild it on change and restart the app."""

__version__ = "0.1.0"

# Models
from poly_watcher.models import CycleOutcome, CycleReport, ScanResult, WatcherConfig, WatcherState

# Errors
from poly_watcher.errors import CommandError, ConfigError, PolyWatcherError, ProcessStartError, ScanError

# Engine
from poly_watcher.fingerprint import scan_tree
from poly_watcher.loop import WatchLoop
from poly_watcher.rules import should_process, split_rules
from poly_watcher.runner import CommandRunner
from poly_watcher.supervisor import ProcessSupervisor

# Notification
from poly_watcher.notifier import LoggingNotifier, NoOpNotifier, WatchNotifier

# Config
from poly_watcher.config import load_config, parse_duration

__all__ = [
    "__version__",
    # Models
    "WatcherConfig",
    "WatcherState",
    "ScanResult",
    "CycleOutcome",
    "CycleReport",
    # Errors
    "PolyWatcherError",
    "ScanError",
    "CommandError",
    "ProcessStartError",
    "ConfigError",
    # Engine
    "scan_tree",
    "should_process",
    "split_rules",
    "CommandRunner",
    "ProcessSupervisor",
    "WatchLoop",
    # Notification
    "WatchNotifier",
    "NoOpNotifier",
    "LoggingNotifier",
    # Config
    "load_config",
    "parse_duration",
]
