"""Shared test fixtures for CntxtMap tests."""

import json
import sys
import textwrap
from pathlib import Path

import pytest

# Add the repository root to path so tests can import cntxtmap
sys.path.insert(0, str(Path(__file__).parent.parent))

from cntxtmap.context import ScanContext  # noqa: E402


def write_tree(root: Path, files: dict) -> Path:
    """Create *files* (relative path -> text, or dict for JSON) under *root*."""
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            target.write_text(json.dumps(content))
        else:
            target.write_text(textwrap.dedent(content))
    return root


@pytest.fixture
def make_tree(tmp_path):
    def _make(files: dict, subdir: str = "") -> Path:
        root = tmp_path / subdir if subdir else tmp_path
        root.mkdir(parents=True, exist_ok=True)
        return write_tree(root, files)
    return _make


@pytest.fixture
def ctx():
    with ScanContext() as context:
        yield context
