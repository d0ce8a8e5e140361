"""Core components for src2llm."""

from .errors import Src2LLMError, ConfigInvalid, PathMissing, ReadFailure, EncodeFailure
from .models import SourceConfig, PackageBundle, FileRecord, ProcessingStats, SizeTreeNode, RunResult
from .collector import FileCollector
from .traverser import Traverser
from .encoder import encode, decode, FORMAT_EXTENSIONS
from .stats import compute_stats, estimate_tokens

__all__ = [
    "Src2LLMError",
    "ConfigInvalid",
    "PathMissing",
    "ReadFailure",
    "EncodeFailure",
    "SourceConfig",
    "PackageBundle",
    "FileRecord",
    "ProcessingStats",
    "SizeTreeNode",
    "RunResult",
    "FileCollector",
    "Traverser",
    "encode",
    "decode",
    "FORMAT_EXTENSIONS",
    "compute_stats",
    "estimate_tokens",
]
