#react_native.py - Native mobile analyzer: screens, navigators and the routes they declare.

import logging
import os
import re
from typing import List, Optional, Tuple

from cntxtmap.analyzers.base import Processed, StructuralAnalyzer
from cntxtmap.models import REFERENCE_VALUE, GraphFragment, GraphNode

logger = logging.getLogger(__name__)

FOLDERS_TO_ANALYZE = [
    ("screens", "screen"),
    ("navigation", "navigation"),
    ("components", "component"),
]

NODE_GROUPS = {"application": 0, "navigation": 1, "screen": 2, "component": 3}
NODE_RADII = {"application": 30, "navigation": 25, "screen": 20, "component": 15}

SOURCE_FILE_RE = re.compile(r"\.(jsx?|tsx?)$")

# <Stack.Screen name="Home" component={HomeScreen} />, any navigator, any attribute order.
SCREEN_ELEMENT_RE = re.compile(r"<\w+\.Screen\b([^>]*)>", re.DOTALL)
NAME_ATTR_RE = re.compile(r"""\bname\s*=\s*\{?\s*["']([^"']+)["']""")
COMPONENT_ATTR_RE = re.compile(r"\bcomponent\s*=\s*\{\s*([\w.]+)\s*\}")


def format_name(file_name: str, file_type: str) -> str:
    if file_type == "screen":
        return re.sub(r"Screen$", "", file_name)
    if file_type == "navigation":
        return re.sub(r"Navigation$", "", file_name)
    return file_name


class ReactNativeAnalyzer(StructuralAnalyzer):
    """Scans screens/, navigation/ and components/ under src/ (or the project root).

    Navigator files are read for ``<X.Screen name=... component={...}>``
    declarations. Each one becomes a ``navigation-route`` edge to the matching
    screen node; when no screen file matches, the edge targets the bare route
    name and is dropped at merge time.
    """

    project_tag = "react-native"
    dependency_radius = 15

    def analyze(self, project_root: str) -> GraphFragment:
        app_node = GraphNode(
            id=f"react-native:{project_root}",
            name="React Native App",
            type="application",
            group=0,
            radius=30,
            project=self.project_tag,
            project_root=project_root,
        )
        fragment = GraphFragment()
        fragment.add_node(app_node)
        processed: Processed = {}
        navigators: List[Tuple[GraphNode, str]] = []

        root_dir = self.src_or_root(project_root)
        for folder, file_type in FOLDERS_TO_ANALYZE:
            if self.ctx.cancelled:
                break
            folder_path = os.path.join(root_dir, folder)
            if self.ctx.is_dir(folder_path):
                fragment.extend(self.scan_directory(folder_path, app_node, file_type, processed, navigators))

        # Screens are all known now, so routes can point at them.
        for nav_node, content in navigators:
            fragment.extend(self.analyze_navigation(content, nav_node, fragment.nodes))
        return fragment

    def scan_directory(self, current_path: str, parent_node: GraphNode, file_type: str,
                       processed: Processed, navigators: List[Tuple[GraphNode, str]]) -> GraphFragment:
        fragment = GraphFragment()
        if self.ctx.cancelled:
            return fragment

        entries = self.ctx.list_dir(current_path)
        files = [e.path for e in entries if not e.is_dir and SOURCE_FILE_RE.search(e.name)
                 and e.path not in processed and not self.ctx.is_claimed(e.path)]

        for file_path, content in zip(files, self.ctx.read_many(files)):
            if self.ctx.cancelled:
                break
            if content is None or file_path in processed:
                continue
            stem = os.path.splitext(os.path.basename(file_path))[0]
            node = self.file_node(file_path, content, file_type, format_name(stem, file_type),
                                  NODE_GROUPS.get(file_type, 4), NODE_RADII.get(file_type, 10))
            fragment.add_node(node)
            processed[file_path] = node
            fragment.link(node.id, parent_node.id, REFERENCE_VALUE, f"{file_type}-structure")
            fragment.extend(self.pull_dependencies(file_path, content, node, processed))

            if file_type == "navigation":
                navigators.append((node, content))

        for entry in entries:
            if entry.is_dir:
                fragment.extend(self.scan_directory(entry.path, parent_node, file_type, processed,
                                                    navigators))
        return fragment

    def analyze_navigation(self, content: str, nav_node: GraphNode,
                           known_nodes: List[GraphNode]) -> GraphFragment:
        fragment = GraphFragment()
        for element in SCREEN_ELEMENT_RE.finditer(content):
            attributes = element.group(1)
            name_match = NAME_ATTR_RE.search(attributes)
            if not name_match:
                continue
            route_name = name_match.group(1)
            component_match = COMPONENT_ATTR_RE.search(attributes)
            component = component_match.group(1).split(".")[-1] if component_match else None
            target = self.find_screen(route_name, component, known_nodes)
            fragment.link(nav_node.id, target, REFERENCE_VALUE, "navigation-route")
        return fragment

    @staticmethod
    def find_screen(route_name: str, component: Optional[str], known_nodes: List[GraphNode]):
        """Id of the screen node a route refers to, else the route name itself."""
        screens = [n for n in known_nodes if n.type == "screen"]
        if component:
            for node in screens:
                stem = os.path.splitext(os.path.basename(str(node.id)))[0]
                if stem == component:
                    return node.id
        for node in screens:
            if node.name == route_name or node.name == format_name(route_name, "screen"):
                return node.id
        return route_name
