"""
Writing run artifacts.

For a config with package ``my-app`` the layout under ``output_dir`` is::

    my_app/
        <name>.<ext>                   encoded bundle
        <name>-visualization.json      {"tree": ..., "stats": ...}
"""

import json
import logging
import os
from typing import List

from .encoder import FORMAT_EXTENSIONS
from .errors import EncodeFailure
from .models import ProcessingStats, SizeTreeNode, SourceConfig
from ..utils.path_utils import PathUtils


logger = logging.getLogger(__name__)

VISUALIZATION_SUFFIX = "-visualization.json"


def output_file_name(config: SourceConfig, resolved_paths: List[str], fmt: str) -> str:
    """
    Derive the artifact file name.

    A single root is named after its basename. Any other number of roots
    (including none) is named after the config id with a ``-codebase``
    suffix.
    """
    extension = FORMAT_EXTENSIONS[fmt]
    if len(resolved_paths) == 1:
        base = os.path.basename(os.path.normpath(resolved_paths[0]))
        return f"{PathUtils.sanitize_file_name(base)}{extension}"
    return f"{PathUtils.sanitize_file_name(config.id)}-codebase{extension}"


def visualization_file_name(output_name: str) -> str:
    return os.path.splitext(output_name)[0] + VISUALIZATION_SUFFIX


def _to_utf8(text: str, name: str) -> bytes:
    # Encode before anything touches the disk
    try:
        return text.encode('utf-8')
    except UnicodeEncodeError as e:
        raise EncodeFailure(f"Cannot write {name} as UTF-8: {e}") from e


class Emitter:
    """Writes the encoded bundle and its visualization payload."""

    def __init__(self, output_dir: str, package_name: str):
        """
        Args:
            output_dir: Absolute destination root.
            package_name: Package name; its sanitized form is the
                per-project subdirectory.
        """
        self.project_dir = os.path.join(output_dir, PathUtils.sanitize_file_name(package_name))

    def ensure_directory(self) -> str:
        """Create the project directory (and parents) if needed."""
        os.makedirs(self.project_dir, exist_ok=True)
        return self.project_dir

    def write_output(self, output_name: str, encoded: str) -> str:
        """
        Write the encoded bundle.

        Returns:
            Path of the written file.
        """
        output_path = os.path.join(self.project_dir, output_name)
        self._write_bytes(output_path, _to_utf8(encoded, output_name))
        return output_path

    def _write_bytes(self, path: str, data: bytes) -> None:
        self.ensure_directory()
        try:
            with open(path, 'wb') as f:
                f.write(data)
        except OSError:
            if os.path.exists(path):
                os.remove(path)
            raise
        logger.debug(f"Wrote {path}")

    def write_visualization(self, output_name: str, tree: SizeTreeNode, stats: ProcessingStats) -> str:
        """
        Write the ``{tree, stats}`` payload consumed by the chart page.

        Returns:
            Path of the written file.
        """
        name = visualization_file_name(output_name)
        payload = {'tree': tree.to_dict(), 'stats': stats.to_dict()}
        data = _to_utf8(json.dumps(payload, indent=2, ensure_ascii=False), name)
        path = os.path.join(self.project_dir, name)
        self._write_bytes(path, data)
        return path
