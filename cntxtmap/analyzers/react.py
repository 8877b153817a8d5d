#react.py - Classic single page app analyzer: pages, their layouts and imported components.

import logging
import os
import re
from dataclasses import dataclass
from typing import Dict, Optional

from cntxtmap.analyzers.base import Processed, StructuralAnalyzer
from cntxtmap.detector import FrameworkDetector
from cntxtmap.models import REFERENCE_VALUE, STRUCTURAL_VALUE, GraphFragment, GraphNode

logger = logging.getLogger(__name__)

PAGE_FILE_RE = re.compile(r"(page|screen)\.(jsx?|tsx?)$", re.IGNORECASE)

# Import shapes that bring in a layout component.
LAYOUT_IMPORT_PATTERNS = [
    re.compile(r"""import\s+[^;\n]*?from\s+['"]([^'"]*/layouts/[^'"]+)['"]"""),
    # Default or named binding ending in "Layout"; hooks like useLayoutEffect do not count.
    re.compile(
        r"""import\s+(?:\w*Layout\b|[^;\n]*?[{,]\s*\w*Layout\s*(?:as\s+\w+\s*)?[,}])"""
        r"""[^;\n]*?from\s+['"]([^'"]+)['"]"""
    ),
]

PAGE_DIRS = {
    "nextjs": ("src/app", "app", "pages", "src/pages"),
    "react-native": ("screens", "src/screens"),
    "react": ("src/pages",),
}

VARIANT_NAMES = {
    "nextjs": "Next.js Application",
    "react-native": "React Native Application",
    "react": "React Application",
}


@dataclass
class PageInfo:
    content: str
    layout: Optional[str]


class ReactAnalyzer(StructuralAnalyzer):
    """Flat page scan for projects without a route-tree convention.

    Pages are any ``*page.*`` (or ``*screen.*`` on mobile) file below the
    variant's page directories. A page's layout comes from the nearest
    ``layout.*`` when it sits in an app directory, otherwise from its imports.

    The dispatcher only routes plain React projects here; the ``nextjs`` and
    ``react-native`` variants are reached when the class is used directly.
    """

    def __init__(self, ctx):
        super().__init__(ctx)
        self.detector = FrameworkDetector(ctx)
        self.project_type: Optional[str] = None

    def detect_project_variant(self, project_root: str) -> Optional[str]:
        manifest = self.detector.read_manifest(project_root)
        if manifest is None:
            return None
        dependencies = manifest.get("dependencies")
        if not isinstance(dependencies, dict):
            return None

        has_app_json = self.ctx.is_file(os.path.join(project_root, "app.json"))
        has_next_config = self.ctx.is_file(os.path.join(project_root, "next.config.js"))
        has_app_dir = self.ctx.is_dir(os.path.join(project_root, "src", "app")) or \
            self.ctx.is_dir(os.path.join(project_root, "app"))

        if "react-native" in dependencies and has_app_json:
            return "react-native"
        if "next" in dependencies and (has_next_config or has_app_dir):
            return "nextjs"
        if "react" in dependencies:
            return "react"
        return None

    def analyze(self, project_root: str) -> GraphFragment:
        fragment = GraphFragment()
        self.project_type = self.detect_project_variant(project_root)
        if not self.project_type:
            return fragment

        pages: Dict[str, PageInfo] = {}
        layouts: Dict[str, Optional[str]] = {}
        for page_dir in PAGE_DIRS[self.project_type]:
            full_path = os.path.join(project_root, *page_dir.split("/"))
            if self.ctx.is_dir(full_path):
                self.scan_pages(full_path, project_root, pages, layouts)

        app_node = GraphNode(
            id=f"{self.project_type}:{project_root}",
            name=VARIANT_NAMES[self.project_type],
            type="application",
            group=0,
            radius=30,
            project=self.project_type,
            project_root=project_root,
        )
        fragment.add_node(app_node)
        processed: Processed = {}

        layout_paths = [p for p in layouts if p not in pages]
        layout_contents = dict(zip(layout_paths, self.ctx.read_many(layout_paths)))
        for layout_path in layout_paths:
            content = layout_contents.get(layout_path)
            if layout_path in processed or content is None:
                continue
            layout_node = self.create_file_node(layout_path, content, "layout", project_root)
            fragment.add_node(layout_node)
            processed[layout_path] = layout_node
            fragment.link(layout_node.id, app_node.id, STRUCTURAL_VALUE, "layout-structure")
            fragment.extend(self.pull_dependencies(layout_path, content, layout_node, processed))

        for page_path, info in pages.items():
            if self.ctx.cancelled:
                break
            if page_path in processed:
                continue
            page_node = self.create_file_node(page_path, info.content, "page", project_root)
            fragment.add_node(page_node)
            processed[page_path] = page_node
            layout_node = processed.get(info.layout) if info.layout else None
            if layout_node is not None and layout_node.type == "layout":
                fragment.link(page_node.id, layout_node.id, STRUCTURAL_VALUE, "uses-layout")
            else:
                fragment.link(page_node.id, app_node.id, REFERENCE_VALUE, "route")
            fragment.extend(self.pull_dependencies(page_path, info.content, page_node, processed))

        return fragment

    def create_file_node(self, file_path: str, content: str, node_type: str,
                         project_root: str) -> GraphNode:
        group = 1 if node_type == "page" else 2 if node_type == "layout" else 3
        radius = 15 if node_type == "page" else 20 if node_type == "layout" else 10
        return self.file_node(file_path, content, node_type, os.path.basename(file_path), group, radius,
                              project=self.project_type, project_root=project_root)

    def make_dependency_node(self, file_path: str, content: str) -> GraphNode:
        return self.file_node(file_path, content, "component", os.path.basename(file_path), 3, 10,
                              project=self.project_type)

    def scan_pages(self, current_path: str, project_root: str, pages: Dict[str, PageInfo],
                   layouts: Dict[str, Optional[str]]) -> None:
        if self.ctx.cancelled:
            return
        entries = self.ctx.list_dir(current_path)
        page_files = [e.path for e in entries if not e.is_dir and PAGE_FILE_RE.search(e.name)]
        for page_path, content in zip(page_files, self.ctx.read_many(page_files)):
            if content is None or page_path in pages:
                continue
            layout = self.find_layout(content, page_path, project_root)
            if layout:
                layouts.setdefault(layout, None)
            pages[page_path] = PageInfo(content=content, layout=layout)

        for entry in entries:
            if entry.is_dir and not entry.name.startswith(("_", ".")):
                self.scan_pages(entry.path, project_root, pages, layouts)

    def find_layout(self, content: str, page_path: str, project_root: str) -> Optional[str]:
        """Layout file for a page, or None."""
        page_dir = os.path.dirname(page_path)

        if self.project_type == "nextjs" and self._in_app_dir(page_dir, project_root):
            current = page_dir
            while self._in_app_dir(current, project_root):
                names = [e.name for e in self.ctx.list_dir(current) if not e.is_dir]
                layout_name = self.pick_by_extension(names, "layout")
                if layout_name:
                    return os.path.join(current, layout_name)
                parent = os.path.dirname(current)
                if parent == current:
                    break
                current = parent

        for pattern in LAYOUT_IMPORT_PATTERNS:
            for match in pattern.finditer(content):
                resolved = self.resolver.resolve(match.group(1), page_path, project_root)
                if resolved:
                    return resolved
        return None

    @staticmethod
    def _in_app_dir(directory: str, project_root: str) -> bool:
        parts = os.path.relpath(directory, project_root).split(os.sep)
        return "app" in parts
