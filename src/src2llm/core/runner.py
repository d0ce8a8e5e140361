"""Main bundling orchestrator."""

import logging
import os
from typing import List, Optional

from tqdm import tqdm

from .collector import FileCollector
from .emitter import Emitter, output_file_name
from .encoder import encode
from .errors import PathMissing
from .models import PackageBundle, RunResult, SourceConfig
from .stats import compute_stats
from .tokenizer import TokenCounter
from .traverser import Traverser
from ..utils.tree_builder import SizeTreeBuilder


logger = logging.getLogger(__name__)


class BundleRunner:
    """
    Runs one configuration end to end.

    Each run owns its bundle; nothing is shared between runs. Either the
    encoded artifact and its visualization payload are both written, or
    neither is.
    """

    def __init__(self, config: SourceConfig, cwd: Optional[str] = None,
                 token_counter: Optional[TokenCounter] = None, show_progress: bool = False):
        """
        Initialize the runner.

        Args:
            config: Validated configuration.
            cwd: Directory relative paths are resolved against
                (defaults to the process working directory).
            token_counter: Optional exact tokenizer for the report.
            show_progress: Display a progress bar over the root paths.
        """
        self.config = config
        self.cwd = os.path.abspath(cwd or os.getcwd())
        self.token_counter = token_counter
        self.show_progress = show_progress
        self.skipped_paths: List[str] = []

    def _resolve(self, path: str) -> str:
        return path if os.path.isabs(path) else os.path.normpath(os.path.join(self.cwd, path))

    def resolve_paths(self) -> List[str]:
        """Configured root paths as absolute paths."""
        return [self._resolve(p) for p in self.config.paths]

    def resolve_output_dir(self) -> str:
        return self._resolve(self.config.output_dir)

    def collect(self) -> PackageBundle:
        """
        Traverse every configured root into a new bundle.

        Missing roots are logged and skipped. Any other error propagates.

        Returns:
            The frozen bundle.
        """
        bundle = PackageBundle()
        collector = FileCollector(self.config)
        traverser = Traverser(collector.matcher)
        self.skipped_paths = []

        roots = self.resolve_paths()
        for root in tqdm(roots, desc="Collecting", unit="path", disable=not self.show_progress):
            logger.info(f"Processing path: {root}")
            try:
                self._collect_root(root, traverser, collector, bundle)
            except PathMissing as e:
                logger.warning(str(e))
                self.skipped_paths.append(root)

        return bundle.freeze()

    def _collect_root(self, root: str, traverser: Traverser, collector: FileCollector,
                      bundle: PackageBundle) -> None:
        if not os.path.exists(root):
            raise PathMissing(root)
        for absolute_path, relative_path in traverser.walk(root):
            collector.add_file(absolute_path, relative_path, bundle)

    def run(self) -> RunResult:
        """
        Collect, encode, write and summarize.

        Returns:
            RunResult describing the written artifacts.

        Raises:
            ReadFailure: A matched file could not be read.
            EncodeFailure: The bundle could not be serialized.
            OSError: The artifacts could not be written.
        """
        bundle = self.collect()
        fmt = self.config.output_format
        encoded = encode(bundle, fmt)

        emitter = Emitter(self.resolve_output_dir(), self.config.package_name)
        output_name = output_file_name(self.config, self.resolve_paths(), fmt)
        output_path = emitter.write_output(output_name, encoded)

        try:
            stats = compute_stats(bundle, encoded, os.path.getsize(output_path))
            tree = SizeTreeBuilder.from_bundle(bundle)
            visualization_path = emitter.write_visualization(output_name, tree, stats)
        except Exception:
            # Do not leave an artifact without its companion payload
            os.remove(output_path)
            raise

        exact_tokens = self.token_counter.count(encoded) if self.token_counter else None

        return RunResult(
            config_id=self.config.id,
            output_format=fmt,
            output_path=output_path,
            visualization_path=visualization_path,
            stats=stats,
            tree=tree,
            exact_tokens=exact_tokens,
            skipped_paths=tuple(self.skipped_paths),
        )
