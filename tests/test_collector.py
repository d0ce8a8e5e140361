"""Tests for traversal and file collection."""

import os
import sys

import pytest

from src2llm.core.collector import FileCollector, add_file
from src2llm.core.errors import ReadFailure
from src2llm.core.models import PackageBundle
from src2llm.core.traverser import Traverser
from src2llm.utils.ignore import IgnoreMatcher


def _collect(root, config):
    """Traverse ``root`` the way a run does and return the bundle."""
    bundle = PackageBundle()
    collector = FileCollector(config)
    for absolute_path, relative_path in Traverser(collector.matcher).walk(str(root)):
        collector.add_file(absolute_path, relative_path, bundle)
    return bundle.freeze()


class TestTraverser:
    """Test the directory walk."""

    def test_yields_relative_paths(self, sample_repo):
        walked = {rel for _, rel in Traverser(IgnoreMatcher([])).walk(str(sample_repo))}
        assert "index.ts" in walked
        assert "src/utils/helpers.ts" in walked
        assert "node_modules/lib/index.ts" in walked

    def test_absolute_paths_exist(self, sample_repo):
        for absolute_path, relative_path in Traverser(IgnoreMatcher([])).walk(str(sample_repo)):
            assert os.path.isfile(absolute_path)
            assert absolute_path.replace(os.sep, "/").endswith(relative_path)

    def test_ignored_directories_are_pruned(self, sample_repo):
        """Nothing below an ignored directory is yielded."""
        walked = {rel for _, rel in Traverser(IgnoreMatcher(["node_modules"])).walk(str(sample_repo))}
        assert not any("node_modules" in rel for rel in walked)
        assert "packages/core/core.ts" in walked

    def test_ignored_files_are_still_yielded(self, sample_repo):
        """File-level rules are left to the collector."""
        walked = {rel for _, rel in Traverser(IgnoreMatcher(["*.log"])).walk(str(sample_repo))}
        assert "src/debug.log" in walked

    def test_file_root(self, sample_repo):
        root = sample_repo / "src" / "main.ts"
        assert list(Traverser(IgnoreMatcher([])).walk(str(root))) == [(str(root), "main.ts")]

    def test_empty_directory(self, tmp_path):
        assert list(Traverser(IgnoreMatcher([])).walk(str(tmp_path))) == []

    def test_broken_symlink_fails(self, tmp_path):
        (tmp_path / "dangling.ts").symlink_to(tmp_path / "nowhere.ts")
        with pytest.raises(ReadFailure):
            list(Traverser(IgnoreMatcher([])).walk(str(tmp_path)))

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="needs byte-level file names")
    def test_undecodable_name(self, tmp_path):
        """Names that are not UTF-8 are reported with replacement characters."""
        with open(os.path.join(os.fsencode(str(tmp_path)), b"bad\xff.ts"), "wb") as f:
            f.write(b"x")
        walked = list(Traverser(IgnoreMatcher([])).walk(str(tmp_path)))
        assert [rel for _, rel in walked] == ["bad\ufffd.ts"]
        assert os.path.isfile(walked[0][0])


class TestFileCollector:
    """Test filtering and reading of candidate files."""

    def test_only_matching_extension_collected(self, tmp_path, make_config):
        (tmp_path / "dist").mkdir()
        (tmp_path / "a.ts").write_text("A")
        (tmp_path / "dist" / "b.ts").write_text("B")
        (tmp_path / "c.js").write_text("C")

        config = make_config(file_types=[".ts"], ignore_paths=["dist"])
        bundle = _collect(tmp_path, config)
        assert bundle.to_dict() == {"sample-app": {"a.ts": "A"}}

    def test_sample_repo(self, sample_repo, make_config):
        bundle = _collect(sample_repo, make_config())
        assert set(bundle.files("sample-app")) == {
            "index.ts",
            "src/main.ts",
            "src/app.tsx",
            "src/utils/helpers.ts",
            "packages/core/core.ts",
        }

    def test_node_modules_pruned_at_any_depth(self, sample_repo, make_config):
        bundle = _collect(sample_repo, make_config(ignore_paths=["node_modules"]))
        paths = list(bundle.files("sample-app"))
        assert not any("node_modules" in p for p in paths)
        assert "dist/main.js" not in paths

    def test_extension_is_case_sensitive(self, tmp_path, make_config):
        (tmp_path / "upper.TS").write_text("X")
        (tmp_path / "lower.ts").write_text("x")
        bundle = _collect(tmp_path, make_config(file_types=[".ts"]))
        assert list(bundle.files("sample-app")) == ["lower.ts"]

    def test_extension_is_last_suffix(self, tmp_path, make_config):
        (tmp_path / "types.d.ts").write_text("d")
        (tmp_path / "Makefile").write_text("all:")
        bundle = _collect(tmp_path, make_config(file_types=[".ts"]))
        assert list(bundle.files("sample-app")) == ["types.d.ts"]

    def test_accepts(self, make_config):
        collector = FileCollector(make_config())
        assert collector.accepts("/x/src/a.ts", "src/a.ts") is True
        assert collector.accepts("/x/src/a.js", "src/a.js") is False
        assert collector.accepts("/x/dist/a.ts", "dist/a.ts") is False
        assert collector.accepts("/x/a.log", "a.log") is False

    def test_content_is_preserved(self, tmp_path, make_config):
        """Line endings and non-ASCII text are stored as they are on disk."""
        (tmp_path / "crlf.ts").write_bytes("line1\r\nline2 ✓\r\n".encode("utf-8"))
        bundle = _collect(tmp_path, make_config())
        assert bundle.files("sample-app")["crlf.ts"] == "line1\r\nline2 ✓\r\n"

    def test_invalid_utf8_is_replaced(self, tmp_path, make_config):
        (tmp_path / "bad.ts").write_bytes(b"ok\xff")
        bundle = _collect(tmp_path, make_config())
        assert bundle.files("sample-app")["bad.ts"] == "ok\ufffd"

    def test_read_failure(self, tmp_path, make_config):
        collector = FileCollector(make_config())
        with pytest.raises(ReadFailure) as exc_info:
            collector.read(str(tmp_path))
        assert exc_info.value.path == str(tmp_path)

    def test_add_file_replaces_existing(self, tmp_path, make_config):
        config = make_config()
        path = tmp_path / "a.ts"
        bundle = PackageBundle()

        path.write_text("old")
        assert add_file(str(path), "a.ts", config, bundle) is True
        path.write_text("new")
        assert add_file(str(path), "a.ts", config, bundle) is True
        assert dict(bundle.files("sample-app")) == {"a.ts": "new"}

    def test_add_file_filtered(self, tmp_path, make_config):
        path = tmp_path / "a.js"
        path.write_text("js")
        bundle = PackageBundle()
        assert add_file(str(path), "a.js", make_config(), bundle) is False
        assert len(bundle) == 0
