"""Poll-based change detection.

The fingerprint is a single 64-bit digest streamed over ``(path, size, mtime)``
of every accepted file. Two scans of an untouched tree give the same value;
touching, adding, removing or resizing an accepted file changes it.
"""

import hashlib
import logging
import os
import posixpath
from collections.abc import Iterator
from pathlib import Path

from poly_watcher.errors import ScanError
from poly_watcher.models import ScanResult, WatcherConfig
from poly_watcher.rules import should_process

logger = logging.getLogger(__name__)

DIGEST_SIZE = 8  # bytes -> 64-bit fingerprint

_FIELD_SEPARATOR = b"\0"


def _sorted_entries(directory: str | Path) -> list[os.DirEntry]:
    """List a directory in lexical name order so the digest is deterministic."""
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def _walk(entries: list[os.DirEntry], prefix: str) -> Iterator[tuple[str, os.stat_result]]:
    """Yield ``(relative_path, lstat)`` for every non-directory below ``entries``.

    Hidden directories are pruned. Entries that cannot be read are logged and
    skipped so one bad file never aborts the scan.
    """
    for entry in entries:
        rel_path = prefix + entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            if not is_dir:
                stat = entry.stat(follow_symlinks=False)
        except OSError as e:
            logger.warning(f"Error accessing {entry.path}: {e}")
            continue

        if not is_dir:
            yield rel_path, stat
            continue

        if entry.name.startswith("."):
            logger.debug(f"Skipping hidden directory {rel_path}")
            continue

        try:
            children = _sorted_entries(entry.path)
        except OSError as e:
            logger.warning(f"Error accessing {entry.path}: {e}")
            continue
        yield from _walk(children, rel_path + "/")


def scan_tree(config: WatcherConfig, previous_dep_mtime: int | None = None) -> ScanResult:
    """Fingerprint the watched tree and check the dependency file.

    The root is always traversed, even when its own name starts with a dot.

    Args:
        config: Watcher configuration (root, rules, dependency file)
        previous_dep_mtime: Dependency mtime (ns) returned by the previous scan

    Returns:
        ScanResult with the digest, the dependency-changed flag and the
        dependency mtime to pass to the next call

    Raises:
        ScanError: If the root directory cannot be listed
    """
    try:
        root_entries = _sorted_entries(config.root)
    except OSError as e:
        raise ScanError(f"Cannot scan {config.root}: {e}") from e

    digest = hashlib.blake2b(digest_size=DIGEST_SIZE)
    dep_name = posixpath.basename(config.dep_file.replace(os.sep, "/")) if config.dep_file else ""
    dep_changed = False
    dep_mtime = previous_dep_mtime
    files = 0

    for rel_path, stat in _walk(root_entries, ""):
        if not should_process(rel_path, config.includes, config.excludes):
            continue

        digest.update(rel_path.encode("utf-8", "surrogateescape"))
        digest.update(_FIELD_SEPARATOR)
        digest.update(str(stat.st_size).encode())
        digest.update(_FIELD_SEPARATOR)
        digest.update(str(stat.st_mtime_ns).encode())
        digest.update(_FIELD_SEPARATOR)
        files += 1

        if dep_name and posixpath.basename(rel_path) == dep_name and stat.st_mtime_ns != dep_mtime:
            logger.debug(f"Dependency file {rel_path} mtime moved to {stat.st_mtime_ns}")
            dep_changed = True
            dep_mtime = stat.st_mtime_ns

    return ScanResult(
        fingerprint=int.from_bytes(digest.digest(), "big"),
        dep_changed=dep_changed,
        dep_mtime=dep_mtime,
        files=files,
    )
