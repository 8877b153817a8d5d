#base.py - Shared machinery for the framework-specific structural analyzers.

import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple

from cntxtmap.config import SCRIPT_EXTENSIONS
from cntxtmap.context import ScanContext
from cntxtmap.extractor import ImportExtractor
from cntxtmap.models import REFERENCE_VALUE, GraphFragment, GraphNode
from cntxtmap.resolver import PathResolver

logger = logging.getLogger(__name__)

# Resolved path -> node emitted for it by the current analyzer run.
Processed = Dict[str, GraphNode]


class StructuralAnalyzer:
    """Base class: one instance analyzes one project root.

    Subclasses implement ``analyze`` and may override
    ``make_dependency_node`` to tag pulled-in files differently.
    """

    project_tag = "node"
    extensions: Tuple[str, ...] = SCRIPT_EXTENSIONS
    dependency_group = 3
    dependency_radius = 10

    def __init__(self, ctx: ScanContext):
        self.ctx = ctx
        self.extractor = ImportExtractor(alias_prefix=ctx.config.alias_prefix)
        self.resolver = PathResolver(ctx, self.extensions, ctx.config.alias_prefix)

    def analyze(self, project_root: str) -> GraphFragment:
        raise NotImplementedError

    def file_node(self, file_path: str, content: Optional[str], node_type: str, name: str,
                  group: int, radius: int, **extra) -> GraphNode:
        """Node for a file on disk. Content is dropped when the config says so."""
        if not self.ctx.config.include_content:
            content = None
        return GraphNode(id=file_path, name=name, type=node_type, content=content,
                         group=group, radius=radius, **extra)

    def make_dependency_node(self, file_path: str, content: str) -> GraphNode:
        return self.file_node(file_path, content, "component", os.path.basename(file_path),
                              self.dependency_group, self.dependency_radius)

    def resolve_imports(self, file_path: str, content: str) -> List[str]:
        """Resolved, de-duplicated local imports of one file, in stable order."""
        project_root = self.resolver.find_project_root(os.path.dirname(file_path))
        resolved: List[str] = []
        for spec in sorted(self.extractor.extract(content)):
            target = self.resolver.resolve(spec, file_path, project_root)
            if not target or target == file_path or target in resolved:
                continue
            if self.ctx.is_claimed(target):
                continue
            resolved.append(target)
        return resolved

    def pull_dependencies(self, file_path: str, content: str, source_node: GraphNode,
                          processed: Processed) -> GraphFragment:
        """Add an ``imports`` edge per local import and recurse into new files.

        A file already in *processed* only gains the edge, so shared and
        circular imports yield one node each and terminate.
        """
        fragment = GraphFragment()
        if self.ctx.cancelled:
            return fragment

        targets = self.resolve_imports(file_path, content)
        fresh = [t for t in targets if t not in processed]
        contents = dict(zip(fresh, self.ctx.read_many(fresh)))

        for target in targets:
            if self.ctx.cancelled:
                break
            existing = processed.get(target)
            if existing is not None:
                fragment.link(source_node.id, existing.id, REFERENCE_VALUE, "imports")
                continue

            dep_content = contents.get(target)
            if dep_content is None:
                self.ctx.warn("Error processing dependency: %s", target)
                continue

            dep_node = self.make_dependency_node(target, dep_content)
            fragment.add_node(dep_node)
            processed[target] = dep_node
            fragment.link(source_node.id, dep_node.id, REFERENCE_VALUE, "imports")
            fragment.extend(self.pull_dependencies(target, dep_content, dep_node, processed))

        return fragment

    def pick_by_extension(self, candidates: Sequence[str], stem: str) -> Optional[str]:
        """First ``<stem><ext>`` among *candidates*, honouring extension preference."""
        names = set(candidates)
        for ext in self.extensions:
            if stem + ext in names:
                return stem + ext
        return None

    def src_or_root(self, project_root: str) -> str:
        src_dir = os.path.join(project_root, "src")
        return src_dir if self.ctx.is_dir(src_dir) else project_root
