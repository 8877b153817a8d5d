"""Framework-specific structural analyzers."""

from cntxtmap.analyzers.base import StructuralAnalyzer
from cntxtmap.analyzers.nextjs import NextjsAnalyzer, route_from_path
from cntxtmap.analyzers.nodejs import NodejsAnalyzer
from cntxtmap.analyzers.react import ReactAnalyzer
from cntxtmap.analyzers.react_native import ReactNativeAnalyzer
from cntxtmap.models import ProjectKind

ANALYZERS = {
    ProjectKind.NODE_BACKEND: NodejsAnalyzer,
    ProjectKind.NEXTJS: NextjsAnalyzer,
    ProjectKind.REACT_NATIVE: ReactNativeAnalyzer,
    ProjectKind.REACT: ReactAnalyzer,
}

ANALYZER_NAMES = {
    ProjectKind.NODE_BACKEND: "Node.js Backend",
    ProjectKind.NEXTJS: "Next.js",
    ProjectKind.REACT_NATIVE: "React Native",
    ProjectKind.REACT: "React",
}

__all__ = [
    "ANALYZERS",
    "ANALYZER_NAMES",
    "NextjsAnalyzer",
    "NodejsAnalyzer",
    "ReactAnalyzer",
    "ReactNativeAnalyzer",
    "StructuralAnalyzer",
    "route_from_path",
]
