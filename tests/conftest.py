import pytest
import tempfile
import shutil
from pathlib import Path

from src2llm.core.models import SourceConfig


@pytest.fixture
def temp_workspace():
    """Create a temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def sample_repo(temp_workspace):
    """Create a sample source tree for testing."""
    repo_root = temp_workspace / "sample_repo"
    repo_root.mkdir()

    # Create directory structure
    (repo_root / "src").mkdir()
    (repo_root / "src" / "utils").mkdir()
    (repo_root / "dist").mkdir()
    (repo_root / "node_modules").mkdir()
    (repo_root / "node_modules" / "lib").mkdir()
    (repo_root / "packages").mkdir()
    (repo_root / "packages" / "core").mkdir()
    (repo_root / "packages" / "core" / "node_modules").mkdir()

    # Create files
    (repo_root / "index.ts").write_text("export * from './src/main';\n")
    (repo_root / "README.md").write_text("# Sample\n")
    (repo_root / "src" / "main.ts").write_text("export const main = () => 'hello';\n")
    (repo_root / "src" / "app.tsx").write_text("export const App = () => null;\n")
    (repo_root / "src" / "utils" / "helpers.ts").write_text("export const helper = 42;\n")
    (repo_root / "src" / "legacy.js").write_text("module.exports = {};\n")
    (repo_root / "src" / "debug.log").write_text("not source\n")
    (repo_root / "dist" / "main.js").write_text("compiled\n")
    (repo_root / "node_modules" / "lib" / "index.ts").write_text("dependency\n")
    (repo_root / "packages" / "core" / "core.ts").write_text("export const core = true;\n")
    (repo_root / "packages" / "core" / "node_modules" / "dep.ts").write_text("nested dependency\n")

    return repo_root


@pytest.fixture
def make_config(temp_workspace):
    """Factory for SourceConfig instances with sensible test defaults."""
    def _make(**overrides):
        values = {
            "id": "sample",
            "package_name": "sample-app",
            "paths": ["."],
            "file_types": [".ts", ".tsx"],
            "ignore_paths": ["node_modules", "dist", "*.log"],
            "output_dir": str(temp_workspace / "out"),
        }
        values.update(overrides)
        return SourceConfig(**values)
    return _make
