"""CntxtMap - file-level dependency graphs for JS/TS project trees."""

__version__ = "0.1.0"

from cntxtmap.config import ScanConfig, load_config  # noqa: E402
from cntxtmap.dispatcher import DependencyAnalyzer, analyze_dependencies  # noqa: E402
from cntxtmap.errors import CntxtMapError, ScanRootError  # noqa: E402
from cntxtmap.graph import graph_stats, save_graph  # noqa: E402
from cntxtmap.models import GraphData, GraphLink, GraphNode, Project, ProjectKind  # noqa: E402

__all__ = [
    "CntxtMapError",
    "DependencyAnalyzer",
    "GraphData",
    "GraphLink",
    "GraphNode",
    "Project",
    "ProjectKind",
    "ScanConfig",
    "ScanRootError",
    "analyze_dependencies",
    "graph_stats",
    "load_config",
    "save_graph",
]
