#graph.py - Merge analyzer fragments into one node-link graph backed by networkx.

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import networkx as nx

from cntxtmap.models import GraphData, GraphFragment, GraphLink, GraphNode, NodeId, Project

logger = logging.getLogger(__name__)

# Structural analyzers key nodes by file path, the generic analyzer by index.
PATH_NAMESPACE = "path"
INDEX_NAMESPACE = "index"

NodeKey = Tuple[str, NodeId]


class GraphAssembler:
    """Collects fragments, then builds one consistent graph.

    Node identity inside the assembler is ``(namespace, id)`` so path-keyed
    and index-keyed fragments can never be confused. A node id seen twice in
    one namespace keeps its first definition. Links are wired after every
    node is known; a link whose endpoint is missing is dropped, and the same
    typed edge between two nodes is kept once.
    """

    def __init__(self):
        self.graph = nx.MultiDiGraph()
        self._pending: List[Tuple[str, GraphFragment]] = []
        self.dropped_links = 0
        self.duplicate_nodes = 0

    def add_fragment(self, fragment: GraphFragment, namespace: str = PATH_NAMESPACE) -> None:
        self._pending.append((namespace, fragment))

    def build(self, projects: Optional[List[Project]] = None) -> GraphData:
        for namespace, fragment in self._pending:
            for node in fragment.nodes:
                key = (namespace, node.id)
                if self.graph.has_node(key):
                    self.duplicate_nodes += 1
                    logger.debug("Duplicate node %s ignored", node.id)
                    continue
                self.graph.add_node(key, node=node)

        for namespace, fragment in self._pending:
            for link in fragment.links:
                source, target = (namespace, link.source), (namespace, link.target)
                if not self.graph.has_node(source) or not self.graph.has_node(target):
                    self.dropped_links += 1
                    logger.debug("Dropping dangling link %s -> %s", link.source, link.target)
                    continue
                self.graph.add_edge(source, target, key=link.type or "link", link=link)

        if self.dropped_links:
            logger.debug("Dropped %d dangling links", self.dropped_links)

        nodes: List[GraphNode] = [data["node"] for _, data in self.graph.nodes(data=True)]
        links: List[GraphLink] = [data["link"] for _, _, data in self.graph.edges(data=True)]
        return GraphData(nodes=nodes, links=links, projects=list(projects or []))


def to_networkx(graph_data: GraphData) -> nx.MultiDiGraph:
    """Plain networkx view of a result, nodes keyed by their output id."""
    graph = nx.MultiDiGraph()
    for node in graph_data.nodes:
        graph.add_node(node.id, **{k: v for k, v in node.to_dict().items() if k not in ("id", "content")})
    for link in graph_data.links:
        graph.add_edge(link.source, link.target, key=link.type, value=link.value, relation=link.type)
    return graph


def graph_stats(graph_data: GraphData) -> Dict[str, Any]:
    return {
        "total_nodes": len(graph_data.nodes),
        "total_links": len(graph_data.links),
        "total_projects": len({p.root for p in graph_data.projects}),
        "nodes_by_type": graph_data.count_by_type(),
    }


def save_graph(graph_data: GraphData, output_path: str) -> None:
    """Save the graph and its statistics as JSON."""
    metadata = {
        "stats": graph_stats(graph_data),
        "projects": [
            {"root": p.root, "type": p.type, "kind": p.kind.value if p.kind else None}
            for p in graph_data.projects
        ],
        "cancelled": graph_data.cancelled,
    }
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump({"graph": graph_data.to_dict(), "metadata": metadata}, f, indent=2)
