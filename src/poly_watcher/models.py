"""Shared data models for poly_watcher."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from poly_watcher.rules import split_rules

DEFAULT_BUILD_COMMAND = "echo 'No build command specified'"
DEFAULT_RUN_COMMAND = "echo 'No run command specified'"
DEFAULT_INTERVAL = 1.0

# Sentinel held before the first scan; any real digest will differ from it.
INITIAL_FINGERPRINT = 0


@dataclass(frozen=True)
class WatcherConfig:
    """Immutable configuration for one watcher instance."""

    root: Path = Path(".")
    """Directory tree to poll."""

    interval: float = DEFAULT_INTERVAL
    """Seconds to sleep after each cycle."""

    build_command: str = DEFAULT_BUILD_COMMAND
    """Shell command run on every detected change."""

    run_command: str = DEFAULT_RUN_COMMAND
    """Shell command for the long-lived process restarted after a good build."""

    dep_file: str = ""
    """Dependency manifest (e.g. go.mod, package.json). Empty disables tracking."""

    dep_command: str = ""
    """Command run before the build when the dependency file changed."""

    includes: tuple[str, ...] = ()
    """Prefix/suffix rules a path must match. Empty accepts everything."""

    excludes: tuple[str, ...] = ()
    """Prefix/suffix rules that always reject a path."""

    def __post_init__(self):
        # Accept str roots and list/comma-separated rules; store as Path/tuples.
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(self, "includes", split_rules(self.includes))
        object.__setattr__(self, "excludes", split_rules(self.excludes))


@dataclass
class WatcherState:
    """Mutable per-loop state, owned by WatchLoop."""

    previous_fingerprint: int = INITIAL_FINGERPRINT
    """Digest from the last scan that differed from its predecessor."""

    previous_dep_mtime: int | None = None
    """Last seen dependency file mtime in nanoseconds (None until first seen)."""


@dataclass(frozen=True)
class ScanResult:
    """Result of one tree scan."""

    fingerprint: int
    """Unsigned 64-bit digest of the accepted files."""

    dep_changed: bool
    """Whether the dependency file's mtime moved since the previous scan."""

    dep_mtime: int | None
    """Dependency mtime to carry into the next scan."""

    files: int = 0
    """Number of files that contributed to the fingerprint."""


class CycleOutcome(Enum):
    """How a single watch cycle ended."""

    SCAN_FAILED = "scan_failed"
    UNCHANGED = "unchanged"
    DEPENDENCY_FAILED = "dependency_failed"
    BUILD_FAILED = "build_failed"
    RESTARTED = "restarted"
    RESTART_FAILED = "restart_failed"


@dataclass
class CycleReport:
    """Summary of one tick of the watch loop."""

    outcome: CycleOutcome
    fingerprint: int | None = None
    dep_changed: bool = False
    error: str | None = None
    commands: list[str] = field(default_factory=list)
    """Shell commands invoked during the cycle, in order."""

    @property
    def changed(self) -> bool:
        """True when the cycle saw a fingerprint change."""
        return self.outcome not in (CycleOutcome.SCAN_FAILED, CycleOutcome.UNCHANGED)
