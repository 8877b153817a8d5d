#visualize.py - Optional matplotlib preview of a dependency graph.

from typing import Dict

import networkx as nx

from cntxtmap.graph import to_networkx
from cntxtmap.models import GraphData

# Node type -> colour. Anything unlisted is drawn light gray.
COLOR_MAP: Dict[str, str] = {
    "application": "#FFD700",  # Gold
    "server": "#FFA500",       # Orange
    "layout": "#90EE90",       # Light green
    "page": "#ADD8E6",         # Light blue
    "screen": "#ADD8E6",
    "route": "#FFB6C1",        # Light pink
    "endpoint": "#FF7F7F",
    "navigation": "#DDA0DD",   # Plum
    "component": "#E6E6FA",    # Lavender
    "module": "#C0C0C0",       # Silver
}


def node_color(node_type: str) -> str:
    if node_type.endswith("-folder"):
        return "#F5DEB3"  # Wheat
    return COLOR_MAP.get(node_type, "lightgray")


def visualize_graph(graph_data: GraphData) -> None:
    """Draw the graph with a spring layout; node size follows the radius."""
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("Matplotlib is required for visualization. Install it using 'pip install matplotlib'.")
        return

    graph = to_networkx(graph_data)
    if graph.number_of_nodes() == 0:
        print("Nothing to visualize: the graph is empty.")
        return

    node_colors = [node_color(graph.nodes[node].get("type", "file")) for node in graph.nodes()]
    node_sizes = [graph.nodes[node].get("radius", 10) * 60 for node in graph.nodes()]
    labels = {node: graph.nodes[node].get("name", str(node)) for node in graph.nodes()}

    fig, ax = plt.subplots(figsize=(20, 15))
    pos = nx.spring_layout(graph, k=1.5, iterations=50, seed=42)

    nx.draw(
        graph,
        pos,
        ax=ax,
        labels=labels,
        with_labels=True,
        node_color=node_colors,
        node_size=node_sizes,
        font_size=8,
        font_weight="bold",
        arrows=True,
        edge_color="gray",
        arrowsize=15,
    )

    present = sorted({graph.nodes[node].get("type", "file") for node in graph.nodes()})
    legend_elements = [
        plt.Line2D(
            [0], [0],
            marker='o',
            color='w',
            markerfacecolor=node_color(node_type),
            label=node_type,
            markersize=10
        )
        for node_type in present
    ]
    ax.legend(
        handles=legend_elements,
        loc='center left',
        bbox_to_anchor=(1.05, 0.5),
        title="Node Types"
    )
    ax.set_title("Code Dependency Graph Visualization", pad=20)
    plt.subplots_adjust(right=0.85)
    plt.show()
