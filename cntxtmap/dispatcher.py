#dispatcher.py - Detect projects, route each to its analyzer and merge everything into one graph.

import logging
import os
import threading
from typing import Iterable, List, Optional

from cntxtmap.analyzers import ANALYZER_NAMES, ANALYZERS
from cntxtmap.config import ScanConfig, ecosystem_name
from cntxtmap.context import ScanContext
from cntxtmap.dependency import GenericDependencyAnalyzer
from cntxtmap.detector import FrameworkDetector
from cntxtmap.errors import ScanRootError
from cntxtmap.graph import INDEX_NAMESPACE, PATH_NAMESPACE, GraphAssembler
from cntxtmap.models import GraphData, GraphFragment, Project

logger = logging.getLogger(__name__)


class DependencyAnalyzer:
    """Entry point: ``analyze_dependencies(root)`` returns the merged graph.

    Every call builds a fresh ScanContext, so caches and claimed-file sets
    never leak from one scan into the next.
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()
        self.warnings: List[str] = []

    def analyze_dependencies(self, root_path: str, ignore: Optional[Iterable[str]] = None,
                             cancel_event: Optional[threading.Event] = None) -> GraphData:
        root_path = os.path.abspath(root_path)
        if not os.path.isdir(root_path):
            raise ScanRootError(f"Directory does not exist: {root_path}")
        ignore = list(ignore) if ignore is not None else None

        with ScanContext(self.config, cancel_event) as ctx:
            result = self._run(ctx, root_path, ignore)
            self.warnings = list(ctx.warnings)
        return result

    def _run(self, ctx: ScanContext, root_path: str, ignore: Optional[List[str]]) -> GraphData:
        if ctx.cancelled:
            return self._cancelled()

        generic = GenericDependencyAnalyzer(ctx)
        projects = generic.detect_projects(root_path, ignore)
        if ctx.cancelled:
            return self._cancelled()

        structural: List[GraphFragment] = []
        detector = FrameworkDetector(ctx)
        for project in ctx.projects.values():
            if ctx.cancelled:
                return self._cancelled()
            fragment = self.analyze_project(ctx, detector, project)
            if fragment is not None:
                structural.append(fragment)
                ctx.claim(fragment.node_ids())

        if ctx.cancelled:
            return self._cancelled()
        generic_fragment = generic.analyze(root_path, ignore)
        if ctx.cancelled:
            return self._cancelled()

        assembler = GraphAssembler()
        assembler.add_fragment(generic_fragment, INDEX_NAMESPACE)
        for fragment in structural:
            assembler.add_fragment(fragment, PATH_NAMESPACE)
        for project in projects:
            chosen = ctx.projects.get(project.root)
            if chosen is not None:
                project.kind = chosen.kind
        return assembler.build(projects)

    def analyze_project(self, ctx: ScanContext, detector: FrameworkDetector,
                        project: Project) -> Optional[GraphFragment]:
        """Run the structural analyzer for one project, if it has one."""
        if project.type != "node":
            logger.info("Analyzing %s project: %s", ecosystem_name(project.type), project.root)
            return None

        project.kind = detector.classify(project.root)
        analyzer_cls = ANALYZERS.get(project.kind) if project.kind else None
        if analyzer_cls is None:
            logger.info("No framework detected, generic analysis only: %s", project.root)
            return None

        logger.info("Analyzing %s project: %s", ANALYZER_NAMES[project.kind], project.root)
        try:
            return analyzer_cls(ctx).analyze(project.root)
        except Exception as e:
            ctx.warn("Error analyzing project %s: %s", project.root, e)
            return None

    @staticmethod
    def _cancelled() -> GraphData:
        logger.info("Operation cancelled.")
        return GraphData.empty(cancelled=True)


def analyze_dependencies(root_path: str, ignore: Optional[Iterable[str]] = None,
                         cancel_event: Optional[threading.Event] = None,
                         config: Optional[ScanConfig] = None) -> GraphData:
    """Scan *root_path* and return its merged dependency graph."""
    return DependencyAnalyzer(config).analyze_dependencies(root_path, ignore, cancel_event)
