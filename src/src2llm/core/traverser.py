"""Depth-first directory traversal with ignore-based pruning."""

import logging
import os
import stat
from typing import Iterator, Tuple

from .errors import ReadFailure
from ..utils.ignore import IgnoreMatcher
from ..utils.path_utils import PathUtils


logger = logging.getLogger(__name__)


class Traverser:
    """
    Walks a root path and yields candidate files.

    Entries are visited in directory enumeration order (not sorted).
    A subdirectory whose relative path is ignored is pruned entirely: none
    of the files below it are evaluated.
    """

    def __init__(self, matcher: IgnoreMatcher):
        self.matcher = matcher

    def walk(self, root: str) -> Iterator[Tuple[str, str]]:
        """
        Yield ``(absolute_path, relative_path)`` for every file under ``root``.

        A root that is itself a file is yielded once, with its basename as
        the relative path.

        Args:
            root: Existing file or directory.

        Raises:
            ReadFailure: If a directory cannot be listed or an entry cannot
                be inspected.
        """
        if os.path.isfile(root):
            yield root, PathUtils.to_text(os.path.basename(root))
            return
        yield from self._walk_dir(root, root)

    def _walk_dir(self, directory: str, base: str) -> Iterator[Tuple[str, str]]:
        try:
            entries = os.listdir(directory)
        except OSError as e:
            raise ReadFailure(directory, e.strerror or str(e)) from e

        for entry in entries:
            full_path = os.path.join(directory, entry)
            # full_path keeps the raw name for filesystem calls
            relative_path = PathUtils.to_text(PathUtils.relative_to(full_path, base))

            try:
                mode = os.stat(full_path).st_mode
            except OSError as e:
                raise ReadFailure(full_path, e.strerror or str(e)) from e

            if stat.S_ISDIR(mode):
                if self.matcher.matches(relative_path):
                    logger.debug(f"Pruning ignored directory: {relative_path}")
                    continue
                yield from self._walk_dir(full_path, base)
            elif stat.S_ISREG(mode):
                yield full_path, relative_path
