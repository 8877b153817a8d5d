#nodejs.py - Express-style backend analyzer: server entry, conventional folders and endpoints.

import logging
import os
import re
from typing import Any, Dict, List, Optional

from cntxtmap.analyzers.base import Processed, StructuralAnalyzer
from cntxtmap.config import BACKEND_EXTENSIONS
from cntxtmap.detector import FrameworkDetector
from cntxtmap.models import REFERENCE_VALUE, STRUCTURAL_VALUE, GraphFragment, GraphNode

logger = logging.getLogger(__name__)

# Conventional folder -> role of the files inside it.
FOLDERS_TO_ANALYZE = [
    ("routes", "route"),
    ("controllers", "controller"),
    ("models", "model"),
    ("services", "service"),
    ("middleware", "middleware"),
    ("utils", "utility"),
    ("config", "config"),
    ("types", "type"),
    ("prisma", "database"),
    ("helpers", "helper"),
]

NODE_GROUPS = {
    "application": 0,
    "server": 1,
    "route": 2,
    "controller": 3,
    "model": 4,
    "service": 5,
    "middleware": 6,
    "utility": 7,
    "config": 8,
    "endpoint": 9,
    "database": 10,
    "helper": 11,
    "type": 12,
}

NODE_RADII = {
    "application": 30,
    "server": 25,
    "route": 20,
    "controller": 18,
    "model": 18,
    "service": 15,
    "middleware": 12,
    "utility": 10,
    "config": 10,
    "endpoint": 8,
    "database": 15,
    "helper": 12,
    "type": 10,
}

# app.get('/users', ...), router.post("/login", ...). Paths must look like paths
# so that map.get('key') and req.get('Content-Type') are left alone.
ROUTE_REGISTRATION_RE = re.compile(
    r"""\.(get|post|put|delete|patch)\(\s*['"]((?:/|\*)[^'"]*)['"]"""
)

SOURCE_FILE_RE = re.compile(r"\.(js|ts)$")
DATABASE_FILE_RE = re.compile(r"\.(js|ts|prisma|sql)$")


def get_node_group(node_type: str) -> int:
    return NODE_GROUPS.get(node_type, 13)


def get_node_radius(node_type: str) -> int:
    return NODE_RADII.get(node_type, 10)


class NodejsAnalyzer(StructuralAnalyzer):
    """Server entry from package.json ``main`` plus one node per conventional folder."""

    project_tag = "nodejs"
    extensions = BACKEND_EXTENSIONS

    def __init__(self, ctx):
        super().__init__(ctx)
        self.detector = FrameworkDetector(ctx)
        self.project_root = ""

    def analyze_package_json(self, project_root: str) -> Dict[str, Any]:
        manifest = self.detector.read_manifest(project_root)
        if manifest is None:
            self.ctx.warn("Error reading package.json in %s", project_root)
            return {"main": "index.js"}
        return manifest

    def locate_entry(self, project_root: str, main: str) -> Optional[str]:
        """Server entry file named by ``main``.

        Tries the path as written, then the same stem as .ts and .js, then
        the same candidates under ``src/``.
        """
        stem, ext = os.path.splitext(os.path.normpath(os.path.join(project_root, main)))
        candidates: List[str] = []
        for base in (stem, os.path.join(project_root, "src", os.path.basename(stem))):
            if ext:
                candidates.append(base + ext)
            candidates.extend(base + e for e in (".ts", ".js") if e != ext)

        for candidate in candidates:
            if self.ctx.is_file(candidate):
                return candidate
        return None

    def analyze(self, project_root: str) -> GraphFragment:
        self.project_root = project_root
        package_json = self.analyze_package_json(project_root)

        app_node = GraphNode(
            id=f"nodejs:{project_root}",
            name="Node.js Backend",
            type="application",
            group=0,
            radius=30,
            project=self.project_tag,
            project_root=project_root,
        )
        fragment = GraphFragment()
        fragment.add_node(app_node)
        processed: Processed = {}
        endpoint_sources = set()

        main = package_json.get("main") if isinstance(package_json.get("main"), str) else "index.js"
        main_node = None
        main_path = self.locate_entry(project_root, main)
        if main_path and not self.ctx.is_claimed(main_path):
            content = self.ctx.read_text(main_path)
            if content is not None:
                main_node = self.file_node(main_path, content, "server", "Server",
                                           get_node_group("server"), get_node_radius("server"))
                fragment.add_node(main_node)
                processed[main_path] = main_node
                fragment.link(main_node.id, app_node.id, STRUCTURAL_VALUE, "server-entry")
                fragment.extend(self.pull_dependencies(main_path, content, main_node, processed))

        root_dir = self.src_or_root(project_root)
        for folder, file_type in FOLDERS_TO_ANALYZE:
            if self.ctx.cancelled:
                break
            folder_path = os.path.join(root_dir, folder)
            if not self.ctx.is_dir(folder_path):
                continue

            folder_node = GraphNode(
                id=f"folder:{folder_path}",
                name=folder,
                type=f"{file_type}-folder",
                group=get_node_group(file_type),
                radius=20,
                project=self.project_tag,
            )
            fragment.add_node(folder_node)
            fragment.link(folder_node.id, (main_node or app_node).id, STRUCTURAL_VALUE,
                          "folder-structure")
            fragment.extend(self.scan_directory(folder_path, folder_node, file_type, processed,
                                                endpoint_sources))

        return fragment

    def scan_directory(self, current_path: str, parent_node: GraphNode, file_type: str,
                       processed: Processed, endpoint_sources: set) -> GraphFragment:
        fragment = GraphFragment()
        if self.ctx.cancelled:
            return fragment

        pattern = DATABASE_FILE_RE if file_type == "database" else SOURCE_FILE_RE
        entries = self.ctx.list_dir(current_path)
        files = [e for e in entries if not e.is_dir and pattern.search(e.name)
                 and not self.ctx.is_claimed(e.path)]
        fresh = [e.path for e in files if e.path not in processed]
        contents = dict(zip(fresh, self.ctx.read_many(fresh)))

        for entry in files:
            if self.ctx.cancelled:
                break
            node = processed.get(entry.path)
            content = contents.get(entry.path)
            if node is None:
                if content is None:
                    continue
                node = self.file_node(entry.path, content, file_type, self.format_name(entry.name),
                                      get_node_group(file_type), get_node_radius(file_type))
                fragment.add_node(node)
                processed[entry.path] = node
                fragment.link(node.id, parent_node.id, REFERENCE_VALUE, f"{file_type}-structure")
                fragment.extend(self.pull_dependencies(entry.path, content, node, processed))
            else:
                # Already pulled in through an import; still hang it off its folder.
                fragment.link(node.id, parent_node.id, REFERENCE_VALUE, f"{file_type}-structure")
                if node.content is not None:
                    content = node.content
                elif file_type == "route":
                    content = self.ctx.read_text(entry.path)

            if file_type == "route" and content is not None and entry.path not in endpoint_sources:
                endpoint_sources.add(entry.path)
                fragment.extend(self.analyze_routes(content, node))

        for entry in entries:
            if entry.is_dir:
                fragment.extend(self.scan_directory(entry.path, parent_node, file_type, processed,
                                                    endpoint_sources))
        return fragment

    def analyze_routes(self, content: str, route_node: GraphNode) -> GraphFragment:
        """One endpoint node per HTTP-verb registration found in a route file."""
        fragment = GraphFragment()
        seen: List[str] = []
        for match in ROUTE_REGISTRATION_RE.finditer(content):
            method, route_path = match.group(1).upper(), match.group(2)
            endpoint_id = f"{route_node.id}#{method} {route_path}"
            if endpoint_id in seen:
                continue
            seen.append(endpoint_id)
            endpoint_node = GraphNode(
                id=endpoint_id,
                name=route_path,
                type="endpoint",
                content=f"Endpoint: {method} {route_path}",
                group=get_node_group("endpoint"),
                radius=get_node_radius("endpoint"),
            )
            fragment.add_node(endpoint_node)
            fragment.link(endpoint_node.id, route_node.id, REFERENCE_VALUE, "endpoint-definition")
        return fragment

    def format_name(self, file_name: str) -> str:
        return SOURCE_FILE_RE.sub("", file_name)

    def get_file_type(self, file_path: str) -> str:
        """Role of a pulled-in file, taken from the conventional folder it lives under."""
        relative = os.path.relpath(os.path.dirname(file_path), self.project_root or os.sep)
        parts = set(relative.split(os.sep))
        for folder, file_type in FOLDERS_TO_ANALYZE:
            if folder in parts:
                return file_type
        return "module"

    def make_dependency_node(self, file_path: str, content: str) -> GraphNode:
        file_type = self.get_file_type(file_path)
        name = os.path.splitext(os.path.basename(file_path))[0]
        return self.file_node(file_path, content, file_type, name,
                              get_node_group(file_type), get_node_radius(file_type))
