"""Tests for scan settings and the .cntxtmaprc overlay."""

import json
from pathlib import Path

import pytest

from cntxtmap.config import (
    DEFAULT_IGNORE,
    PROJECT_MARKERS,
    RC_FILENAME,
    ScanConfig,
    ecosystem_name,
    load_config,
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    return home


def test_defaults(tmp_path):
    config = load_config(str(tmp_path))
    assert config == ScanConfig()
    assert config.ignore == list(DEFAULT_IGNORE)
    assert "node_modules" in config.framework_dirs
    assert config.batch_size == 50


def test_project_rc(tmp_path):
    (tmp_path / RC_FILENAME).write_text(json.dumps({
        "alias_prefix": "~/",
        "ignore": ["coverage"],
        "batch_size": 10,
        "include_content": False,
        "unknown_key": True,
    }))
    config = load_config(str(tmp_path))
    assert config.alias_prefix == "~/"
    assert config.ignore == ["coverage"]
    assert config.batch_size == 10
    assert config.include_content is False


def test_home_rc_fallback(tmp_path, isolated_home):
    (isolated_home / RC_FILENAME).write_text(json.dumps({"max_workers": 2}))
    project = tmp_path / "project"
    project.mkdir()
    assert load_config(str(project)).max_workers == 2


def test_corrupt_rc_skipped(tmp_path, isolated_home):
    (tmp_path / RC_FILENAME).write_text("{not json")
    (isolated_home / RC_FILENAME).write_text(json.dumps({"max_workers": 3}))
    assert load_config(str(tmp_path)).max_workers == 3


def test_framework_dirs_become_set(tmp_path):
    (tmp_path / RC_FILENAME).write_text(json.dumps({"framework_dirs": ["dist", "dist"]}))
    assert load_config(str(tmp_path)).framework_dirs == {"dist"}


def test_with_ignore_appends_once():
    config = ScanConfig().with_ignore(["coverage", "node_modules"])
    assert config.ignore == list(DEFAULT_IGNORE) + ["coverage"]
    assert ScanConfig().ignore == list(DEFAULT_IGNORE)


def test_marker_precedence_starts_with_package_json():
    assert list(PROJECT_MARKERS)[0] == "package.json"


def test_ecosystem_name():
    assert ecosystem_name("python") == "Python"
    assert ecosystem_name("cobol") == "Unknown"
