"""Size tree building utilities."""

from typing import Dict, List, Optional, Union

from ..core.models import PackageBundle, SizeTreeNode
from .path_utils import PathUtils


class _Branch:
    """Mutable directory node used only while a tree is being built."""

    __slots__ = ("name", "children")

    def __init__(self, name: str):
        self.name = name
        self.children: List[Union['_Branch', SizeTreeNode]] = []

    def subdirectory(self, name: str) -> '_Branch':
        # Identity is (parent, name): look only among this node's children
        for child in self.children:
            if isinstance(child, _Branch) and child.name == name:
                return child
        branch = _Branch(name)
        self.children.append(branch)
        return branch

    def freeze(self) -> SizeTreeNode:
        return SizeTreeNode.directory(
            self.name,
            tuple(c.freeze() if isinstance(c, _Branch) else c for c in self.children),
        )


class SizeTreeBuilder:
    """Builds the size hierarchy consumed by the visualization page."""

    @staticmethod
    def from_bundle(bundle: PackageBundle, root_name: str = "root") -> SizeTreeNode:
        """
        Build a SizeTreeNode hierarchy from a bundle.

        The synthetic root holds one directory node per package. Inside a
        package every path segment but the last becomes (or reuses) a
        directory node; the last segment becomes a leaf holding the file
        size in UTF-8 bytes. Leaves are never merged.

        Args:
            bundle: The collected bundle.
            root_name: Name of the synthetic root node.

        Returns:
            Immutable root SizeTreeNode, sharing nothing with the bundle.
        """
        root = _Branch(root_name)

        for package_name in bundle.package_names:
            package_node = _Branch(package_name)
            for file_path, content in bundle.files(package_name).items():
                parts = PathUtils.normalize_and_split(file_path)
                current = package_node
                for part in parts[:-1]:
                    current = current.subdirectory(part)
                current.children.append(
                    SizeTreeNode.leaf(parts[-1], len(content.encode('utf-8')))
                )
            root.children.append(package_node)

        return root.freeze()

    @staticmethod
    def total_size(node: SizeTreeNode) -> int:
        """Sum of all leaf values below (and including) ``node``."""
        if node.is_leaf:
            return node.value or 0
        return sum(SizeTreeBuilder.total_size(child) for child in node.children)

    @staticmethod
    def directory_sizes(tree: SizeTreeNode, top_n: Optional[int] = None) -> Dict[str, int]:
        """
        Aggregate sizes of every directory node, largest first.

        Keys are slash-joined paths from below the synthetic root, so the
        first segment is the package name.

        Args:
            tree: Root node as returned by :meth:`from_bundle`.
            top_n: Keep only the largest N directories.
        """
        sizes: Dict[str, int] = {}

        def _collect(node: SizeTreeNode, prefix: str) -> int:
            if node.is_leaf:
                return node.value or 0
            total = 0
            for child in node.children:
                child_path = f"{prefix}/{child.name}" if prefix else child.name
                total += _collect(child, child_path)
            if prefix:
                sizes[prefix] = total
            return total

        _collect(tree, "")
        ordered = sorted(sizes.items(), key=lambda item: item[1], reverse=True)
        if top_n is not None:
            ordered = ordered[:top_n]
        return dict(ordered)
