"""Tests for node project classification."""

import pytest

from cntxtmap.detector import FrameworkDetector
from cntxtmap.models import ProjectKind


def _classify(root, ctx):
    return FrameworkDetector(ctx).classify(str(root))


@pytest.mark.parametrize("files, expected", [
    (
        {"package.json": {"dependencies": {"express": "^4"}, "devDependencies": {"nodemon": "^3"}}},
        ProjectKind.NODE_BACKEND,
    ),
    (
        {"package.json": {"dependencies": {"express": "^4"}}, "src/routes/users.js": ""},
        ProjectKind.NODE_BACKEND,
    ),
    (
        {"package.json": {"dependencies": {"next": "14", "react": "18"}}, "app/page.tsx": ""},
        ProjectKind.NEXTJS,
    ),
    (
        {"package.json": {"dependencies": {"next": "14"}}, "next.config.mjs": ""},
        ProjectKind.NEXTJS,
    ),
    (
        {"package.json": {"dependencies": {"react-native": "0.74", "react": "18"}}, "app.json": {}},
        ProjectKind.REACT_NATIVE,
    ),
    (
        {"package.json": {"dependencies": {"react": "18"}}},
        ProjectKind.REACT,
    ),
])
def test_classify(make_tree, ctx, files, expected):
    assert _classify(make_tree(files), ctx) == expected


def test_express_without_evidence_is_not_backend(make_tree, ctx):
    root = make_tree({"package.json": {"dependencies": {"express": "^4", "react": "18"}}})
    assert _classify(root, ctx) == ProjectKind.REACT


def test_next_without_app_dir_falls_back_to_react(make_tree, ctx):
    root = make_tree({"package.json": {"dependencies": {"next": "14", "react": "18"}}})
    assert _classify(root, ctx) == ProjectKind.REACT


def test_react_native_needs_app_json(make_tree, ctx):
    root = make_tree({"package.json": {"dependencies": {"react-native": "0.74"}}})
    assert _classify(root, ctx) is None


def test_backend_wins_over_react(make_tree, ctx):
    root = make_tree({
        "package.json": {"dependencies": {"express": "^4", "react": "18"}},
        "controllers/user.js": "",
    })
    assert _classify(root, ctx) == ProjectKind.NODE_BACKEND


def test_no_known_dependencies(make_tree, ctx):
    root = make_tree({"package.json": {"dependencies": {"lodash": "4"}}})
    assert _classify(root, ctx) is None


def test_malformed_manifest(make_tree, ctx):
    root = make_tree({"package.json": "{ not json"})
    assert _classify(root, ctx) is None


def test_missing_manifest(tmp_path, ctx):
    assert _classify(tmp_path, ctx) is None


def test_non_object_manifest(make_tree, ctx):
    root = make_tree({"package.json": "[1, 2]"})
    assert _classify(root, ctx) is None


def test_dependencies_not_a_mapping(make_tree, ctx):
    root = make_tree({"package.json": {"dependencies": ["react"]}})
    assert _classify(root, ctx) is None
