"""
File collection for src2llm.

Applies the ignore rules and the extension allow-list to each candidate
file, reads the survivors and stores them in the bundle.
"""

import logging
import os

from .errors import ReadFailure
from .models import PackageBundle, SourceConfig
from ..utils.ignore import IgnoreMatcher


logger = logging.getLogger(__name__)


class FileCollector:
    """Filters candidate files and inserts their content into a bundle."""

    def __init__(self, config: SourceConfig):
        self.config = config
        self.matcher = IgnoreMatcher(config.ignore_paths)
        self.file_types = frozenset(config.file_types)

    def accepts(self, absolute_path: str, relative_path: str) -> bool:
        """
        Check the ignore rules and the extension allow-list.

        The extension includes its leading dot and is compared
        case-sensitively, so ``.TS`` does not match ``.ts``.
        """
        if self.matcher.matches(relative_path):
            logger.debug(f"Ignored: {relative_path}")
            return False

        extension = os.path.splitext(absolute_path)[1]
        if extension not in self.file_types:
            logger.debug(f"Skipped (extension '{extension}'): {relative_path}")
            return False

        return True

    def read(self, absolute_path: str) -> str:
        """
        Read a file as UTF-8 text.

        There is no binary detection: undecodable bytes are replaced rather
        than rejected. Line endings are kept as they are on disk.

        Raises:
            ReadFailure: If the file cannot be opened or read.
        """
        try:
            with open(absolute_path, 'r', encoding='utf-8', errors='replace', newline='') as f:
                return f.read()
        except OSError as e:
            raise ReadFailure(absolute_path, e.strerror or str(e)) from e

    def add_file(self, absolute_path: str, relative_path: str, bundle: PackageBundle) -> bool:
        """
        Collect one file into ``bundle`` under the configured package.

        An existing entry at the same relative path is replaced.

        Returns:
            True if the file was collected, False if it was filtered out.
        """
        if not self.accepts(absolute_path, relative_path):
            return False

        content = self.read(absolute_path)
        bundle.add(self.config.package_name, relative_path, content)
        return True


def add_file(absolute_path: str, relative_path: str, config: SourceConfig, bundle: PackageBundle) -> bool:
    """Functional form of :meth:`FileCollector.add_file`."""
    return FileCollector(config).add_file(absolute_path, relative_path, bundle)
