"""
Core data models for src2llm.

This module contains the fundamental data structures used throughout
the application: the validated source configuration, the collected
package bundle, and the derived statistics and size tree.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


OutputFormat = Literal['json', 'yaml', 'toon']
OUTPUT_FORMATS: Tuple[str, ...] = ('json', 'yaml', 'toon')


class SourceConfig(BaseModel):
    """
    Configuration of a single bundling run.

    Field names accept both the snake_case spelling and the camelCase
    spelling used by hand-written definition files (``packageName``,
    ``fileTypes``, ...). Instances are immutable.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra='ignore')

    id: str
    package_name: str = Field(alias='packageName')
    paths: List[str]
    file_types: List[str] = Field(alias='fileTypes')
    ignore_paths: List[str] = Field(alias='ignorePaths')
    output_dir: str = Field(default='output', alias='outputDir')
    output_format: OutputFormat = Field(default='json', alias='outputFormat')

    # Display only
    name: str = ''
    description: str = ''

    @model_validator(mode='before')
    @classmethod
    def _default_id(cls, data: Any) -> Any:
        # id falls back to the package name when a record omits it
        if isinstance(data, dict) and 'id' not in data:
            package = data.get('package_name', data.get('packageName'))
            if isinstance(package, str):
                data = {**data, 'id': package}
        return data

    @property
    def display_name(self) -> str:
        """Human readable label for selection lists."""
        if self.name and self.description:
            return f"{self.name} - {self.description}"
        return self.name or self.description or self.id


@dataclass(frozen=True)
class FileRecord:
    """A collected file: its path relative to the traversal root and its text."""

    package_name: str
    relative_path: str
    content: str

    @property
    def size(self) -> int:
        """Size of the content in UTF-8 bytes."""
        return len(self.content.encode('utf-8'))


class PackageBundle:
    """
    Mapping of package name -> relative path -> file content.

    Insertion order is preserved at both levels and follows traversal
    order. Adding a path that is already present replaces its content
    (last write wins). Once frozen, the bundle rejects further additions.
    """

    def __init__(self):
        self._packages: Dict[str, Dict[str, str]] = {}
        self._frozen = False

    def add(self, package_name: str, relative_path: str, content: str) -> None:
        """Insert or replace a file in the given package."""
        if self._frozen:
            raise RuntimeError("Cannot add files to a frozen bundle")
        self._packages.setdefault(package_name, {})[relative_path] = content

    def freeze(self) -> 'PackageBundle':
        """Mark the bundle as complete. Returns self for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def package_names(self) -> List[str]:
        return list(self._packages)

    def files(self, package_name: str) -> Mapping[str, str]:
        """Read-only view of one package's files."""
        return MappingProxyType(self._packages.get(package_name, {}))

    def records(self) -> Iterator[FileRecord]:
        """Iterate over all files in insertion order."""
        for package_name, files in self._packages.items():
            for relative_path, content in files.items():
                yield FileRecord(package_name, relative_path, content)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        """Plain nested dict copy, suitable for serialization."""
        return {name: dict(files) for name, files in self._packages.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, str]]) -> 'PackageBundle':
        bundle = cls()
        for package_name, files in data.items():
            for relative_path, content in files.items():
                bundle.add(package_name, relative_path, content)
        return bundle

    def __len__(self) -> int:
        return sum(len(files) for files in self._packages.values())

    def __contains__(self, package_name: object) -> bool:
        return package_name in self._packages

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageBundle):
            return NotImplemented
        return self._packages == other._packages

    def __repr__(self) -> str:
        return f"PackageBundle(packages={self.package_names!r}, files={len(self)})"


@dataclass(frozen=True)
class ProcessingStats:
    """Aggregate figures for one run."""

    total_files: int
    total_source_size: int
    output_file_size: int
    estimated_tokens: int

    def to_dict(self) -> Dict[str, int]:
        """Serialize with the key names the visualization page expects."""
        return {
            'totalFiles': self.total_files,
            'totalSourceSize': self.total_source_size,
            'outputFileSize': self.output_file_size,
            'estimatedTokens': self.estimated_tokens,
        }


@dataclass(frozen=True)
class SizeTreeNode:
    """
    Node of the size hierarchy.

    Internal nodes carry ``children`` (possibly empty) and no value;
    leaves carry a byte-size ``value`` and ``children`` is None.
    """

    name: str
    children: Optional[Tuple['SizeTreeNode', ...]] = None
    value: Optional[int] = None

    @classmethod
    def leaf(cls, name: str, value: int) -> 'SizeTreeNode':
        return cls(name=name, value=value)

    @classmethod
    def directory(cls, name: str, children: Tuple['SizeTreeNode', ...] = ()) -> 'SizeTreeNode':
        return cls(name=name, children=tuple(children))

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def child(self, name: str) -> Optional['SizeTreeNode']:
        """First child with the given name, if any."""
        for node in self.children or ():
            if node.name == name:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_leaf:
            return {'name': self.name, 'value': self.value}
        return {'name': self.name, 'children': [c.to_dict() for c in self.children]}


@dataclass(frozen=True)
class RunResult:
    """Everything a finished run produced."""

    config_id: str
    output_format: str
    output_path: str
    visualization_path: str
    stats: ProcessingStats
    tree: SizeTreeNode
    exact_tokens: Optional[int] = None
    skipped_paths: Tuple[str, ...] = ()
