#dependency.py - Generic dependency analyzer: project discovery plus a flat, index-keyed file graph.

import logging
import os
from typing import Dict, Iterable, List, Optional, Set

from cntxtmap.config import GENERIC_EXTENSIONS, PROJECT_MARKERS
from cntxtmap.context import ScanContext
from cntxtmap.extractor import GENERIC_PATTERNS, ImportExtractor, syntax_for
from cntxtmap.models import REFERENCE_VALUE, GraphFragment, GraphNode, Project, radius_from_content
from cntxtmap.resolver import PathResolver

logger = logging.getLogger(__name__)

NODE_FILE_GROUPS = {".js": 1, ".jsx": 1, ".ts": 2, ".tsx": 2, ".json": 3}
ECOSYSTEM_GROUPS = {"php": 8, "java": 7, "python": 5}
DEFAULT_GROUP = 9


def get_file_group(file_path: str, project_type: Optional[str]) -> int:
    """Colour bucket from the ecosystem tag and, for node projects, the extension."""
    ext = os.path.splitext(file_path)[1]
    if project_type == "node":
        return NODE_FILE_GROUPS.get(ext, DEFAULT_GROUP)
    if project_type in ECOSYSTEM_GROUPS:
        return ECOSYSTEM_GROUPS[project_type]
    return 3 if ext == ".md" else DEFAULT_GROUP


class GenericDependencyAnalyzer:
    """Graph of every source-like file that no structural analyzer claimed.

    Phase A discovers manifest-marked projects anywhere under the root.
    Phase B reads each remaining file, extracts and resolves its imports
    against the nearest project root, and keys nodes by discovery index.
    """

    def __init__(self, ctx: ScanContext):
        self.ctx = ctx
        alias_prefix = ctx.config.alias_prefix
        self.extractor = ImportExtractor(GENERIC_PATTERNS, alias_prefix=alias_prefix)
        self.resolver = PathResolver(ctx, GENERIC_EXTENSIONS, alias_prefix,
                                     exact_extensions=ctx.config.source_extensions)
        self.dependencies: Dict[str, List[str]] = {}
        self.file_contents: Dict[str, str] = {}

    def skip_names(self, ignore: Optional[Iterable[str]]) -> Set[str]:
        names = set(self.ctx.config.ignore if ignore is None else ignore)
        return names | set(self.ctx.config.framework_dirs)

    # Phase A.

    def detect_projects(self, root_path: str, ignore: Optional[Iterable[str]] = None) -> List[Project]:
        """Every (marker, directory) pair under *root_path*.

        Also registers one project per directory on the scan context, the
        earliest marker in ``PROJECT_MARKERS`` deciding its ecosystem.
        """
        projects: List[Project] = []
        self._scan_for_markers(root_path, self.skip_names(ignore), projects)

        ranking = list(PROJECT_MARKERS)
        chosen: Dict[str, Project] = {}
        for project in projects:
            current = chosen.get(project.root)
            marker = os.path.basename(project.config_file)
            if current is None or ranking.index(marker) < ranking.index(os.path.basename(current.config_file)):
                chosen[project.root] = project
        self.ctx.projects.update(chosen)
        return projects

    def _scan_for_markers(self, directory: str, skip: Set[str], projects: List[Project]) -> None:
        if self.ctx.cancelled:
            logger.info("Operation cancelled.")
            return
        for entry in self.ctx.list_dir(directory):
            if entry.is_dir:
                if entry.name not in skip:
                    self._scan_for_markers(entry.path, skip, projects)
            elif entry.name in PROJECT_MARKERS:
                projects.append(Project(root=directory, type=PROJECT_MARKERS[entry.name],
                                        config_file=entry.path))

    # Phase B.

    def get_all_files(self, directory: str, skip: Set[str]) -> List[str]:
        files: List[str] = []
        if self.ctx.cancelled:
            return files
        extensions = tuple(self.ctx.config.source_extensions)
        for entry in self.ctx.list_dir(directory):
            if entry.name in skip:
                continue
            if entry.is_dir:
                files.extend(self.get_all_files(entry.path, skip))
            elif entry.name.endswith(extensions):
                files.append(entry.path)
        return files

    def analyze(self, root_path: str, ignore: Optional[Iterable[str]] = None) -> GraphFragment:
        root_path = os.path.abspath(root_path)
        if not self.ctx.projects:
            self.detect_projects(root_path, ignore)

        files = [f for f in self.get_all_files(root_path, self.skip_names(ignore))
                 if not self.ctx.is_claimed(f)]
        for file_path, content in zip(files, self.ctx.read_many(files)):
            if content is not None and content.strip():
                self.file_contents[file_path] = content
        if self.ctx.cancelled:
            logger.info("Operation cancelled.")
            return GraphFragment()

        for file_path, content in self.file_contents.items():
            if self.ctx.cancelled:
                logger.info("Operation cancelled.")
                return GraphFragment()
            project_root = self.resolver.find_project_root(os.path.dirname(file_path))
            self.dependencies[file_path] = self.find_dependencies(file_path, content, project_root)

        return self.format_dependency_graph(root_path)

    def project_type(self, project_root: str) -> Optional[str]:
        project = self.ctx.projects.get(project_root)
        return project.type if project else None

    def find_dependencies(self, file_path: str, content: str, project_root: str) -> List[str]:
        candidates: List[Optional[str]] = [
            self.resolver.resolve(spec, file_path, project_root)
            for spec in sorted(self.extractor.extract(content))
        ]
        syntax = syntax_for(self.project_type(project_root))
        if syntax is not None:
            candidates.extend(
                self.resolver.resolve_module(spec, syntax, file_path, project_root)
                for spec in sorted(syntax.extract(content))
            )

        dependencies: List[str] = []
        for target in candidates:
            if not target or target == file_path or target in dependencies:
                continue
            if target not in self.file_contents or self.ctx.is_claimed(target):
                continue
            dependencies.append(target)
        return dependencies

    def format_dependency_graph(self, root_path: str) -> GraphFragment:
        fragment = GraphFragment()
        file_index: Dict[str, int] = {}

        for index, file_path in enumerate(self.dependencies):
            project_root = self.resolver.find_project_root(os.path.dirname(file_path))
            project_type = self.project_type(project_root)
            content = self.file_contents[file_path]
            file_index[file_path] = index
            fragment.add_node(GraphNode(
                id=index,
                name=os.path.basename(file_path),
                type=os.path.splitext(file_path)[1][1:] or "file",
                content=content if self.ctx.config.include_content else None,
                group=get_file_group(file_path, project_type),
                radius=radius_from_content(content),
                path=os.path.relpath(file_path, root_path),
                project=project_type or "unknown",
                project_root=project_root,
            ))

        for file_path, deps in self.dependencies.items():
            source_index = file_index[file_path]
            for dep in deps:
                target_index = file_index.get(dep)
                if target_index is not None:
                    fragment.link(source_index, target_index, REFERENCE_VALUE, "dependency")

        return fragment
