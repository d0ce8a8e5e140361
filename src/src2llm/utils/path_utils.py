"""Path normalization utilities for cross-platform compatibility."""

import os
import posixpath
import re
from typing import List


_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9.]')


class PathUtils:
    """Utilities for consistent path handling across platforms."""

    @staticmethod
    def normalize_path(path: str) -> str:
        """
        Normalize path separators to forward slashes.

        Args:
            path: File path with potentially mixed separators

        Returns:
            Path with forward slashes only
        """
        return path.replace('\\\\', '/').replace('\\', '/')

    @staticmethod
    def canonical(path: str) -> str:
        """
        Normalize separators and collapse redundant segments.

        ``./src//a.ts`` becomes ``src/a.ts``. Empty input stays empty.
        """
        normalized = PathUtils.normalize_path(path)
        if not normalized:
            return normalized
        return posixpath.normpath(normalized)

    @staticmethod
    def normalize_and_split(path: str) -> List[str]:
        """
        Normalize path and split into components.

        Args:
            path: File path to split

        Returns:
            List of path components
        """
        return PathUtils.normalize_path(path).split('/')

    @staticmethod
    def to_text(path: str) -> str:
        """
        Make a filesystem path safe to store as text.

        Names that are not valid UTF-8 come back from ``os.listdir`` with
        surrogate escapes; each undecodable byte becomes U+FFFD instead.
        """
        return os.fsencode(path).decode('utf-8', errors='replace')

    @staticmethod
    def relative_to(path: str, base: str) -> str:
        """Relative path from ``base`` to ``path`` with forward slashes."""
        return PathUtils.normalize_path(os.path.relpath(path, base))

    @staticmethod
    def sanitize_file_name(name: str) -> str:
        """Replace every character outside ``[A-Za-z0-9.]`` with ``_``."""
        return _UNSAFE_FILENAME_CHARS.sub('_', name)
