"""Utility modules for src2llm."""

from .ignore import IgnoreMatcher, should_ignore
from .path_utils import PathUtils
from .tree_builder import SizeTreeBuilder

__all__ = ["IgnoreMatcher", "should_ignore", "PathUtils", "SizeTreeBuilder"]
