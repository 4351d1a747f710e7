"""Pytest configuration and fixtures."""

import os
import sys
import time
from pathlib import Path

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


def set_mtime(path: Path, seconds: float) -> None:
    """Pin a file's atime/mtime so tests do not depend on clock resolution."""
    ns = int(seconds * 1_000_000_000)
    os.utime(path, ns=(ns, ns))


@pytest.fixture
def make_tree(tmp_path):
    """Create files under tmp_path from a {relative_path: content} mapping."""

    def _make(files: dict[str, str], mtime: float = 1_600_000_000.0) -> Path:
        for rel_path, content in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            set_mtime(path, mtime)
        return tmp_path

    return _make


@pytest.fixture
def wait_until():
    """Poll a predicate until it is true or a timeout expires."""

    def _wait(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait
