from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """
    Path to a not-yet-existing store file inside a temp directory.
    """
    return tmp_path / "data.json"


@pytest.fixture
def sandbox_env(monkeypatch: pytest.MonkeyPatch, db_path: Path) -> Path:
    """
    Point settings at a temp store file so tests never touch a real ./data.json.
    """
    monkeypatch.setenv("TOILETDB_PATH", str(db_path))
    monkeypatch.setenv("TOILETDB_FSYNC", "false")
    monkeypatch.delenv("TOILETDB_INDENT", raising=False)
    monkeypatch.delenv("TOILETDB_SORT_KEYS", raising=False)
    monkeypatch.chdir(db_path.parent)
    return db_path
