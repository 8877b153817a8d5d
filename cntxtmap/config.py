#config.py - Scan settings, manifest markers and the optional .cntxtmaprc overlay.

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Set, Tuple

logger = logging.getLogger(__name__)

RC_FILENAME = ".cntxtmaprc"

DEFAULT_ALIAS_PREFIX = "@/"

# Build output, vendored dependencies and generated code. Always skipped.
FRAMEWORK_DIRS = (
    ".next",
    "dist",
    "build",
    "node_modules",
    "vendor",
    "bin",
    "__pycache__",
    "venv",
    "target",
    "out",
    "migrations",
    ".prisma",
    "generated",
)

DEFAULT_IGNORE = (
    "node_modules",
    ".git",
    "logs",
    "package-lock.json",
)

# Manifest file name -> ecosystem tag. Order is precedence when one
# directory holds several manifests.
PROJECT_MARKERS: Dict[str, str] = {
    "package.json": "node",
    "composer.json": "php",
    "pom.xml": "java",
    "build.gradle": "java",
    "requirements.txt": "python",
    "go.mod": "go",
    "Cargo.toml": "rust",
    "mix.exs": "elixir",
    "pubspec.yaml": "dart",
    "Gemfile": "ruby",
}

ECOSYSTEM_NAMES: Dict[str, str] = {
    "node": "Node.js",
    "php": "PHP",
    "java": "Java",
    "python": "Python",
    "go": "Go",
    "rust": "Rust",
    "elixir": "Elixir",
    "dart": "Dart",
    "ruby": "Ruby",
}

# Resolution candidates, in preference order.
SCRIPT_EXTENSIONS = (".tsx", ".ts", ".jsx", ".js")
BACKEND_EXTENSIONS = (".ts", ".js", ".json")
GENERIC_EXTENSIONS = SCRIPT_EXTENSIONS + (".json",)

# Files the generic analyzer reads.
SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".json", ".vue", ".py", ".rb", ".java", ".php")


def ecosystem_name(tag: str) -> str:
    return ECOSYSTEM_NAMES.get(tag, "Unknown")


@dataclass
class ScanConfig:
    """Tunables for one scan. Defaults match a typical JS/TS workspace."""

    alias_prefix: str = DEFAULT_ALIAS_PREFIX
    ignore: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))
    framework_dirs: Set[str] = field(default_factory=lambda: set(FRAMEWORK_DIRS))
    source_extensions: Tuple[str, ...] = SOURCE_EXTENSIONS
    batch_size: int = 50
    max_workers: int = 8
    include_content: bool = True

    def with_ignore(self, extra: Iterable[str]) -> "ScanConfig":
        """Return a copy whose ignore list also holds *extra*."""
        merged = list(self.ignore)
        for name in extra:
            if name not in merged:
                merged.append(name)
        return replace(self, ignore=merged)


def _apply(config: ScanConfig, data: Dict[str, Any]) -> ScanConfig:
    known = {f.name for f in fields(ScanConfig)}
    changes: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown config key %s", key)
            continue
        if key == "framework_dirs":
            value = set(value)
        elif key == "source_extensions":
            value = tuple(value)
        elif key == "ignore":
            value = list(value)
        changes[key] = value
    return replace(config, **changes)


def load_config(project_root: str) -> ScanConfig:
    """Load settings from .cntxtmaprc, falling back through:

        1. <project_root>/.cntxtmaprc
        2. ~/.cntxtmaprc
        3. Built-in defaults

    Recognised keys: alias_prefix, ignore, framework_dirs, source_extensions,
    batch_size, max_workers, include_content.
    """
    candidates = [
        Path(project_root) / RC_FILENAME,
        Path.home() / RC_FILENAME,
    ]

    for candidate in candidates:
        if candidate.is_file():
            try:
                with open(str(candidate), "r", encoding="utf-8") as fh:
                    data = json.load(fh)
                if isinstance(data, dict):
                    return _apply(ScanConfig(), data)
            except (OSError, json.JSONDecodeError, TypeError, ValueError):
                # Corrupt rc file, try the next one.
                continue

    return ScanConfig()
