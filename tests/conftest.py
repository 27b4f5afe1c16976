import os
import sys
from pathlib import Path

import pytest

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'whisker' without an install.
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from whisker.core.config import clear_all_caches  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_whisker_config(monkeypatch):
    """Drop WHISKER_* env vars and reset config caches around every test."""
    for key in list(os.environ):
        if key.startswith("WHISKER_"):
            monkeypatch.delenv(key, raising=False)
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def write_file(tmp_path):
    """Write ``content`` to ``tmp_path / relative`` (creating parents) and return the path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
