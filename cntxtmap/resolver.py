#resolver.py - Resolve import specifiers to files and find enclosing project roots.

import logging
import os
from typing import Optional, Sequence

from cntxtmap.config import DEFAULT_ALIAS_PREFIX, PROJECT_MARKERS, SCRIPT_EXTENSIONS
from cntxtmap.context import ScanContext
from cntxtmap.extractor import EcosystemSyntax

logger = logging.getLogger(__name__)


def _strip_query(spec: str) -> str:
    # Bundler-style "./x.svg?raw" or "./x.css#id".
    return spec.split("?")[0].split("#")[0]


class PathResolver:
    """Maps a specifier seen in one file onto a file that exists.

    Extension order is the preference order: with ``./Button`` and both
    ``Button.tsx`` and ``Button.js`` on disk, the first listed extension wins.
    """

    def __init__(self, ctx: ScanContext, extensions: Sequence[str] = SCRIPT_EXTENSIONS,
                 alias_prefix: Optional[str] = DEFAULT_ALIAS_PREFIX, index_stem: str = "index",
                 exact_extensions: Optional[Sequence[str]] = None):
        self.ctx = ctx
        self.extensions = tuple(extensions)
        self.alias_prefix = alias_prefix
        self.index_stem = index_stem
        # Specifiers already carrying one of these suffixes may name a file directly.
        self.exact_extensions = tuple(exact_extensions) if exact_extensions else self.extensions

    def base_path(self, spec: str, current_file: str, project_root: str) -> str:
        """Absolute path the specifier points at, before extension probing."""
        spec = _strip_query(spec)
        if self.alias_prefix and spec.startswith(self.alias_prefix):
            src_dir = os.path.join(project_root, "src")
            base_dir = src_dir if self.ctx.is_dir(src_dir) else project_root
            return os.path.normpath(os.path.join(base_dir, spec[len(self.alias_prefix):]))
        if spec.startswith("."):
            return os.path.normpath(os.path.join(os.path.dirname(current_file), spec))
        if spec.startswith("/"):
            return os.path.normpath(os.path.join(project_root, spec.lstrip("/")))
        return os.path.normpath(os.path.join(project_root, "src", spec))

    def resolve(self, spec: str, current_file: str, project_root: str) -> Optional[str]:
        """Return the file *spec* refers to, or None when nothing matches."""
        base = self.base_path(spec, current_file, project_root)
        if os.path.splitext(base)[1] in self.exact_extensions and self.ctx.is_file(base):
            return base
        found = self.probe(base, self.extensions, self.index_stem)
        if found is None:
            logger.debug("Unresolved import %s in %s", spec, current_file)
        return found

    def probe(self, base: str, extensions: Sequence[str], index_stem: Optional[str]) -> Optional[str]:
        """Try *base* as written, then with each extension, then as a directory index."""
        if os.path.splitext(base)[1] in extensions and self.ctx.is_file(base):
            return base

        for ext in extensions:
            full_path = base + ext
            if self.ctx.is_file(full_path):
                return full_path

        if index_stem:
            for ext in extensions:
                index_path = os.path.join(base, index_stem + ext)
                if self.ctx.is_file(index_path):
                    return index_path

        return None

    def resolve_module(self, spec: str, syntax: EcosystemSyntax, current_file: str,
                       project_root: str) -> Optional[str]:
        """Resolve a module name written in another ecosystem's import syntax."""
        dots = 0
        if syntax.separator == ".":
            dots = len(spec) - len(spec.lstrip("."))
        rest = spec[dots:]
        rel_path = rest.replace(syntax.separator, "/") if syntax.separator else _strip_query(rest)

        if dots:
            base_dir = os.path.dirname(current_file)
            for _ in range(dots - 1):
                base_dir = os.path.dirname(base_dir)
            base_dirs = [base_dir]
        elif syntax.relative:
            base_dirs = [os.path.dirname(current_file)]
        else:
            base_dirs = [os.path.join(project_root, root) for root in syntax.source_roots]

        for base_dir in base_dirs:
            base = os.path.normpath(os.path.join(base_dir, rel_path)) if rel_path else base_dir
            found = self.probe(base, syntax.extensions, syntax.index_stem)
            if found:
                return found
        return None

    def find_project_root(self, start: str) -> str:
        """Nearest ancestor of *start* (inclusive) holding a manifest marker.

        Falls back to *start* itself when the filesystem root is reached.
        Answers are memoised per queried path for the life of the scan.
        """
        cache = self.ctx.root_cache
        if start in cache:
            return cache[start]

        current = start
        while True:
            if current in self.ctx.projects or any(
                self.ctx.is_file(os.path.join(current, marker)) for marker in PROJECT_MARKERS
            ):
                cache[start] = current
                return current
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent

        cache[start] = start
        return start
