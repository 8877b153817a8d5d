#models.py - Graph records shared by every analyzer: nodes, links, fragments and projects.

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

NodeId = Union[str, int]

STRUCTURAL_VALUE = 2
REFERENCE_VALUE = 1


class ProjectKind(str, Enum):
    """Refined classification of a node-ecosystem project."""

    NODE_BACKEND = "nodejs"
    NEXTJS = "nextjs"
    REACT_NATIVE = "react-native"
    REACT = "react"


@dataclass
class Project:
    """A directory holding an ecosystem manifest."""

    root: str
    type: str
    config_file: str
    kind: Optional[ProjectKind] = None


@dataclass
class GraphNode:
    id: NodeId
    name: str
    type: str
    group: int
    radius: int
    content: Optional[str] = None
    path: Optional[str] = None
    project: Optional[str] = None
    project_root: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise using the key names the graph consumer expects."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "group": self.group,
            "radius": self.radius,
        }
        if self.path is not None:
            data["path"] = self.path
        if self.project is not None:
            data["project"] = self.project
        if self.project_root is not None:
            data["projectRoot"] = self.project_root
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class GraphLink:
    source: NodeId
    target: NodeId
    value: int = REFERENCE_VALUE
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"source": self.source, "target": self.target, "value": self.value}
        if self.type is not None:
            data["type"] = self.type
        return data


@dataclass
class GraphFragment:
    """Partial node/link set produced by one analyzer or one recursive branch.

    Branches return their own fragment and the caller folds it in with
    ``extend``, so nothing appends to a shared list from more than one place.
    """

    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)

    def add_node(self, node: GraphNode) -> GraphNode:
        self.nodes.append(node)
        return node

    def link(self, source: NodeId, target: NodeId, value: int = REFERENCE_VALUE,
             link_type: Optional[str] = None) -> GraphLink:
        link = GraphLink(source=source, target=target, value=value, type=link_type)
        self.links.append(link)
        return link

    def extend(self, other: "GraphFragment") -> "GraphFragment":
        self.nodes.extend(other.nodes)
        self.links.extend(other.links)
        return self

    def node_ids(self) -> List[NodeId]:
        return [node.id for node in self.nodes]


@dataclass
class GraphData:
    """Final ``{nodes, links}`` result of one scan."""

    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    cancelled: bool = False

    @classmethod
    def empty(cls, cancelled: bool = False) -> "GraphData":
        return cls(cancelled=cancelled)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }

    def count_by_type(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for node in self.nodes:
            counts[node.type] = counts.get(node.type, 0) + 1
        return counts


def radius_from_content(content: str) -> int:
    """Size hint from line count: clamp(8, 20, log2(lines) * 3)."""
    lines = len(content.split("\n"))
    return int(min(20, max(8, math.log2(lines) * 3)))
