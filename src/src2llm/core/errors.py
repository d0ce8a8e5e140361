"""
Error types raised while bundling sources.

Only PathMissing is recovered locally (the root is skipped); every other
error aborts the run before anything is written.
"""

from typing import List, Optional


class Src2LLMError(Exception):
    """Base class for all src2llm errors."""


class ConfigInvalid(Src2LLMError):
    """A configuration record failed structural validation."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return self.args[0]
        return self.args[0] + "\n" + "\n".join(f"  - {e}" for e in self.errors)


class PathMissing(Src2LLMError):
    """A configured root path does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Path is missing: {path}")
        self.path = path


class ReadFailure(Src2LLMError):
    """A matched file could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class EncodeFailure(Src2LLMError):
    """The bundle could not be serialized (or a serialized bundle decoded)."""
