"""Configuration parsing for poly-watcher."""

import logging
import math
import re
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from poly_watcher.errors import ConfigError
from poly_watcher.rules import split_rules

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "poly-watcher.toml"

# Default config template for a Go project; edit the commands for other stacks.
DEFAULT_CONFIG_TEMPLATE = """\
# Auto-generated poly-watcher.toml

[watcher]
root = "."
interval = "1s"
depfile = "go.mod"
depcommand = "go mod tidy && go mod download"
build = "go build -o app ."
run = "./app"
include = [".go", "go.mod", "go.sum"]
exclude = [".git", "tmp", "app"]
"""

# Keys of the [watcher] table -> keyword names used by WatcherConfig
_KEYS = {
    "root": "root",
    "interval": "interval",
    "build": "build_command",
    "run": "run_command",
    "depfile": "dep_file",
    "depcommand": "dep_command",
    "include": "includes",
    "exclude": "excludes",
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str | int | float) -> float:
    """Parse a polling interval into seconds.

    Accepts numbers (seconds) and Go-style duration strings such as
    ``"500ms"``, ``"1s"`` or ``"1m30s"``.

    Args:
        value: Duration to parse

    Returns:
        Duration in seconds

    Raises:
        ConfigError: If the value is malformed or negative
    """
    if isinstance(value, bool):
        raise ConfigError(f"Invalid duration: {value!r}")

    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip()
        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_duration_string(text)

    if not math.isfinite(seconds):
        raise ConfigError(f"Invalid duration: {value!r}")
    if seconds < 0:
        raise ConfigError(f"Duration must not be negative: {value!r}")
    return seconds


def _parse_duration_string(text: str) -> float:
    sign = 1.0
    if text.startswith(("+", "-")):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    if not text:
        raise ConfigError("Invalid duration: empty string")

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        number, unit = match.groups()
        total += float(number) * _UNIT_SECONDS[unit]
        pos = match.end()

    if pos != len(text) or pos == 0:
        raise ConfigError(f"Invalid duration: {text!r} (expected e.g. 500ms, 1s, 1m30s)")
    return sign * total


def load_config(path: str | Path) -> dict[str, Any]:
    """Load watcher options from a TOML file.

    Args:
        path: Path to TOML config file

    Returns:
        Mapping of WatcherConfig keyword names to values; only keys present in
        the file are returned, so callers can layer them over defaults

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\nRun 'poly-watcher --init' to create a default config."
        )

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    table = raw.get("watcher", {})
    if not isinstance(table, dict):
        raise ConfigError(f"[watcher] in {path} must be a table")

    options: dict[str, Any] = {}
    for key, value in table.items():
        name = _KEYS.get(key)
        if name is None:
            logger.warning(f"Ignoring unknown key '{key}' in {path}")
            continue
        options[name] = value

    if "root" in options:
        options["root"] = (path.parent / Path(str(options["root"]))).resolve()
    if "interval" in options:
        options["interval"] = parse_duration(options["interval"])
    for name in ("includes", "excludes"):
        if name in options:
            value = options[name]
            if not isinstance(value, (str, list)):
                raise ConfigError(f"'{name[:-1]}' in {path} must be a string or a list of strings")
            options[name] = split_rules(value)
    for name in ("build_command", "run_command", "dep_file", "dep_command"):
        if name in options and not isinstance(options[name], str):
            raise ConfigError(f"'{name}' in {path} must be a string")

    return options


def create_default_config(config_path: Path) -> bool:
    """
    Create a default config file if it doesn't exist.

    Args:
        config_path: Path where config should be created

    Returns:
        True if config was created, False if it already exists

    Raises:
        PermissionError: If unable to write to the directory
        OSError: If other file system errors occur
    """
    if config_path.exists():
        return False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TEMPLATE)
    return True
