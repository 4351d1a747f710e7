"""Include/exclude path rules.

A rule is a plain string compared against a path relative to the watched root.
It matches when the path starts with it or ends with it, so ``.go`` selects Go
sources and ``vendor`` selects everything under ``vendor/``.
"""

from collections.abc import Iterable


def matches_rule(rel_path: str, rule: str) -> bool:
    """Check if a relative path starts or ends with a rule."""
    return rel_path.startswith(rule) or rel_path.endswith(rule)


def should_process(rel_path: str, includes: Iterable[str], excludes: Iterable[str]) -> bool:
    """Decide whether a file participates in change detection.

    Exclusion always wins over inclusion. An empty include list accepts every
    path that is not excluded.

    Args:
        rel_path: Path relative to the watched root (POSIX separators)
        includes: Include rules
        excludes: Exclude rules

    Returns:
        True if the path should be fingerprinted
    """
    if any(matches_rule(rel_path, rule) for rule in excludes):
        return False

    includes = tuple(includes)
    if not includes:
        return True
    return any(matches_rule(rel_path, rule) for rule in includes)


def split_rules(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalise a rule list from a comma-separated string or an iterable.

    Blank entries are dropped: an empty rule would match every path.
    """
    if not value:
        return ()
    items = value.split(",") if isinstance(value, str) else value
    return tuple(item.strip() for item in items if item and item.strip())
