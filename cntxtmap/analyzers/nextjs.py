#nextjs.py - App-router analyzer: route tree from folder conventions and nested layouts.

import logging
import os
import re
from typing import List, Optional, Tuple

from cntxtmap.analyzers.base import Processed, StructuralAnalyzer
from cntxtmap.context import DirEntry
from cntxtmap.models import REFERENCE_VALUE, STRUCTURAL_VALUE, GraphFragment, GraphNode

logger = logging.getLogger(__name__)

SCRIPT_FILE_RE = re.compile(r"\.(jsx?|tsx?)$")


def route_segment(part: str) -> Optional[str]:
    """URL segment for one directory name, or None when it adds nothing."""
    if not part or part == ".":
        return None
    if part.startswith("(") and part.endswith(")"):
        # Route group.
        return None
    if part.startswith("[[...") or part.startswith("[..."):
        return "*"
    if part.startswith("[") and part.endswith("]"):
        return ":" + part[1:-1]
    return part


def route_from_path(relative_dir: str) -> str:
    """Web route for a directory relative to the pages root.

    >>> route_from_path("(marketing)/blog/[slug]")
    '/blog/:slug'
    """
    parts = relative_dir.replace(os.sep, "/").split("/")
    segments = [s for s in (route_segment(p) for p in parts) if s]
    return "/" + "/".join(segments)


class NextjsAnalyzer(StructuralAnalyzer):
    """Walks ``app/`` (or legacy ``pages/``) and builds the layout/page tree.

    Every directory may hold a ``layout.*`` and a ``page.*``. A layout hangs
    off the nearest enclosing layout (or the application node) and becomes
    the parent of everything below it. A page attaches to the nearest layout.
    """

    project_tag = "nextjs"

    def find_pages_root(self, project_root: str) -> Tuple[str, bool]:
        """Return ``(directory, is_app_router)``."""
        for candidate in (("src", "app"), ("app",)):
            app_dir = os.path.join(project_root, *candidate)
            if self.ctx.is_dir(app_dir):
                return app_dir, True
        for candidate in (("src", "pages"), ("pages",)):
            pages_dir = os.path.join(project_root, *candidate)
            if self.ctx.is_dir(pages_dir):
                return pages_dir, False
        return os.path.join(project_root, "src", "pages"), False

    def analyze(self, project_root: str) -> GraphFragment:
        pages_root, is_app_dir = self.find_pages_root(project_root)

        app_node = GraphNode(
            id=f"nextjs:{project_root}",
            name="Next.js App",
            type="application",
            group=0,
            radius=30,
            project=self.project_tag,
            project_root=project_root,
        )
        fragment = GraphFragment()
        fragment.add_node(app_node)
        processed: Processed = {}

        if is_app_dir:
            fragment.extend(self.scan_app_directory(pages_root, pages_root, app_node, processed))
        else:
            fragment.extend(self.scan_pages_directory(pages_root, pages_root, app_node, processed))
        return fragment

    def scan_app_directory(self, current_path: str, pages_root: str, parent_node: GraphNode,
                           processed: Processed) -> GraphFragment:
        fragment = GraphFragment()
        if self.ctx.cancelled:
            return fragment

        entries = self.ctx.list_dir(current_path)
        file_names = [e.name for e in entries if not e.is_dir]
        layout_name = self.pick_by_extension(file_names, "layout")
        page_name = self.pick_by_extension(file_names, "page")

        wanted = [os.path.join(current_path, n) for n in (layout_name, page_name) if n]
        contents = dict(zip(wanted, self.ctx.read_many(wanted)))

        layout_node = None
        if layout_name:
            layout_path = os.path.join(current_path, layout_name)
            layout_node = processed.get(layout_path)
            content = contents.get(layout_path)
            if layout_node is None and content is not None:
                layout_node = self.file_node(layout_path, content, "layout", "layout", 2, 20)
                fragment.add_node(layout_node)
                processed[layout_path] = layout_node
                fragment.link(layout_node.id, parent_node.id, STRUCTURAL_VALUE, "layout-structure")
                fragment.extend(self.pull_dependencies(layout_path, content, layout_node, processed))

        if page_name:
            page_path = os.path.join(current_path, page_name)
            content = contents.get(page_path)
            if page_path not in processed and content is not None:
                route = route_from_path(os.path.relpath(current_path, pages_root))
                page_node = self.file_node(page_path, content, "page", route, 1, 15)
                fragment.add_node(page_node)
                processed[page_path] = page_node
                fragment.extend(self.attach_page(page_node, layout_node or parent_node))
                fragment.extend(self.pull_dependencies(page_path, content, page_node, processed))

        for entry in self._child_dirs(entries):
            fragment.extend(self.scan_app_directory(
                entry.path, pages_root, layout_node or parent_node, processed,
            ))
        return fragment

    def scan_pages_directory(self, current_path: str, pages_root: str, parent_node: GraphNode,
                             processed: Processed) -> GraphFragment:
        """Legacy pages router: every script file is a page, ``_app`` wraps them all."""
        fragment = GraphFragment()
        if self.ctx.cancelled:
            return fragment

        entries = self.ctx.list_dir(current_path)
        script_files = [e for e in entries if not e.is_dir and SCRIPT_FILE_RE.search(e.name)]
        contents = dict(zip(
            [e.path for e in script_files],
            self.ctx.read_many([e.path for e in script_files]),
        ))

        if current_path == pages_root:
            app_name = self.pick_by_extension([e.name for e in script_files], "_app")
            if app_name:
                app_path = os.path.join(current_path, app_name)
                content = contents.get(app_path)
                if app_path not in processed and content is not None:
                    layout_node = self.file_node(app_path, content, "layout", "_app", 2, 20)
                    fragment.add_node(layout_node)
                    processed[app_path] = layout_node
                    fragment.link(layout_node.id, parent_node.id, STRUCTURAL_VALUE, "layout-structure")
                    fragment.extend(self.pull_dependencies(app_path, content, layout_node, processed))
                    parent_node = layout_node

        relative_dir = os.path.relpath(current_path, pages_root)
        for entry in script_files:
            stem = SCRIPT_FILE_RE.sub("", entry.name)
            content = contents.get(entry.path)
            if stem.startswith("_") or entry.path in processed or content is None:
                continue
            page_dir = relative_dir if stem == "index" else os.path.join(relative_dir, stem)
            page_node = self.file_node(entry.path, content, "page", route_from_path(page_dir), 1, 15)
            fragment.add_node(page_node)
            processed[entry.path] = page_node
            fragment.extend(self.attach_page(page_node, parent_node))
            fragment.extend(self.pull_dependencies(entry.path, content, page_node, processed))

        for entry in self._child_dirs(entries):
            fragment.extend(self.scan_pages_directory(entry.path, pages_root, parent_node, processed))
        return fragment

    def attach_page(self, page_node: GraphNode, target: GraphNode) -> GraphFragment:
        fragment = GraphFragment()
        if target.type == "layout":
            fragment.link(page_node.id, target.id, STRUCTURAL_VALUE, "uses-layout")
        else:
            fragment.link(page_node.id, target.id, REFERENCE_VALUE, "route")
        return fragment

    @staticmethod
    def _child_dirs(entries: List[DirEntry]) -> List[DirEntry]:
        return [e for e in entries if e.is_dir and not e.name.startswith(("_", "."))]
