"""CLI entry point for poly-watcher: polls a project, rebuilds it and restarts it."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from poly_watcher import __version__
from poly_watcher.config import DEFAULT_CONFIG_NAME, create_default_config, load_config, parse_duration
from poly_watcher.errors import ConfigError
from poly_watcher.loop import WatchLoop
from poly_watcher.models import WatcherConfig
from poly_watcher.notifier import LoggingNotifier
from poly_watcher.rules import split_rules

logger = logging.getLogger(__name__)

BANNER = """\
poly-watcher: the universal build-run watcher for your projects. Change it. Build it. Run it. Repeat.
Example:
  poly-watcher --root=./myapp --depfile=go.mod --depcommand="go mod tidy && go mod download" \\
    --build="go build -o myapp ." --run="./myapp" --include=.go --exclude=.git,.polycode
"""

LOG_FORMAT = "%(asctime)s %(message)s"
LOG_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"

# argparse dest -> WatcherConfig keyword
_FLAG_OPTIONS = {
    "root": "root",
    "interval": "interval",
    "build": "build_command",
    "run": "run_command",
    "depfile": "dep_file",
    "depcommand": "dep_command",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Flags default to None so that values from a config file are only
    overridden by flags that were actually given.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="poly-watcher",
        description="Poll a directory, rebuild on change and restart the built app.",
        epilog="Examples:\n"
        "  poly-watcher --build='go build -o app .' --run=./app --include=.go\n"
        "  poly-watcher --init                 # Write a default poly-watcher.toml\n"
        "  poly-watcher -c my-watcher.toml     # Use a config file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--root", help="Directory to watch (default: .)")
    parser.add_argument(
        "--interval",
        type=parse_duration,
        help="Polling interval, e.g. 1s, 500ms (default: 1s)",
    )
    parser.add_argument("--build", help="Build command to run on change")
    parser.add_argument("--run", help="Run command to execute built app")
    parser.add_argument(
        "--depfile",
        help="Dependency file to monitor for changes (e.g. go.mod, package.json)",
    )
    parser.add_argument(
        "--depcommand",
        help="Command to run when dependency file changes (e.g. 'go mod tidy', 'npm install')",
    )
    parser.add_argument(
        "--include",
        help="Comma-separated list of include rules (prefix or suffix, e.g. '.go,services')",
    )
    parser.add_argument(
        "--exclude",
        help="Comma-separated list of exclude rules (prefix or suffix, e.g. '.git,tmp')",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=f"Path to config file (default: {DEFAULT_CONFIG_NAME} if present)",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create a default config file and exit",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> WatcherConfig:
    """Layer defaults, config file and flags into a WatcherConfig.

    Raises:
        FileNotFoundError: If an explicit config file does not exist
        ConfigError: If the config file is invalid
    """
    options: dict[str, Any] = {}

    if args.config:
        options.update(load_config(args.config))
    elif Path(DEFAULT_CONFIG_NAME).is_file():
        logger.debug(f"Loading {DEFAULT_CONFIG_NAME} from current directory")
        options.update(load_config(DEFAULT_CONFIG_NAME))

    for dest, name in _FLAG_OPTIONS.items():
        value = getattr(args, dest)
        if value is not None:
            options[name] = value

    if args.include is not None:
        options["includes"] = split_rules(args.include)
    if args.exclude is not None:
        options["excludes"] = split_rules(args.exclude)

    return WatcherConfig(**options)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set up timestamped console logging."""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, level=logging.WARNING)
    logging.getLogger("poly_watcher").setLevel(level)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the poly-watcher CLI.

    Handles:
    - Argument parsing and config layering
    - Creation of a default config with --init
    - Running the watch loop until interrupted
    - Killing the supervised app on the way out

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if args.init:
        config_path = Path(args.config or DEFAULT_CONFIG_NAME).resolve()
        try:
            if create_default_config(config_path):
                print(f"Created default config at: {config_path}")
            else:
                print(f"Config already exists: {config_path}")
        except OSError as e:
            print(f"Error: Failed to create config: {e}", file=sys.stderr)
            return 1
        return 0

    print(BANNER)

    try:
        config = build_config(args)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.root.is_dir():
        print(f"Error: Root directory not found: {config.root}", file=sys.stderr)
        return 1

    watcher = WatchLoop(config, notifier=LoggingNotifier())
    logger.info("Starting poly-watcher...")
    try:
        watcher.run()
    except KeyboardInterrupt:
        # Gracefully handle Ctrl+C
        return 130
    finally:
        watcher.supervisor.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
