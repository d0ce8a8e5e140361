"""
Ignore rule matching for src2llm.

A rule without ``*`` names a path or a path segment: it matches the exact
relative path and anything below a directory (or file) of that name, at any
depth. A rule containing ``*`` is a single-level wildcard matched against
the final path segment only.
"""

import re
from typing import Iterable, List, Pattern

from .path_utils import PathUtils


def _compile_wildcard(rule: str) -> Pattern[str]:
    """Compile ``*.log`` style rules; callers match the whole basename."""
    return re.compile('.*'.join(re.escape(part) for part in rule.split('*')))


def _matches_literal(path: str, rule: str) -> bool:
    return (
        path == rule
        or path.startswith(f"{rule}/")
        or path.startswith(f"/{rule}/")
        or f"/{rule}/" in path
        or path.endswith(f"/{rule}")
    )


class IgnoreMatcher:
    """Decides whether a relative path is excluded by a set of rules."""

    def __init__(self, rules: Iterable[str]):
        """
        Initialize the matcher.

        Args:
            rules: Literal or wildcard ignore rules. Wildcard rules are
                compiled once here.
        """
        self.rules = list(rules)
        self._literals: List[str] = [r for r in self.rules if '*' not in r]
        self._wildcards: List[Pattern[str]] = [
            _compile_wildcard(r) for r in self.rules if '*' in r
        ]

    def matches(self, relative_path: str) -> bool:
        """
        Check whether a path is ignored.

        Args:
            relative_path: Path relative to the traversal root, with either
                separator style.

        Returns:
            True if any rule matches, False otherwise.
        """
        path = PathUtils.canonical(relative_path)

        if any(_matches_literal(path, rule) for rule in self._literals):
            return True

        if self._wildcards:
            basename = path.rsplit('/', 1)[-1]
            return any(pattern.fullmatch(basename) for pattern in self._wildcards)

        return False

    def __repr__(self) -> str:
        return f"IgnoreMatcher({self.rules!r})"


def should_ignore(relative_path: str, rules: Iterable[str]) -> bool:
    """Return True if ``relative_path`` is excluded by any of ``rules``."""
    return IgnoreMatcher(rules).matches(relative_path)
