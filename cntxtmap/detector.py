#detector.py - Classify a node project as backend, app-router, mobile or plain UI-library.

import json
import logging
import os
from typing import Any, Dict, Optional

from cntxtmap.context import ScanContext
from cntxtmap.models import ProjectKind

logger = logging.getLogger(__name__)

BACKEND_FOLDERS = ("routes", "controllers", "models", "middleware")
NEXT_CONFIG_FILES = ("next.config.js", "next.config.mjs", "next.config.ts")


class FrameworkDetector:
    """Priority-ordered decision list over package.json and directory evidence.

    1. Express dependency plus nodemon or backend-shaped folders -> backend.
    2. Next.js dependency plus an app directory or next.config -> app-router.
    3. React Native dependency plus app.json -> native mobile.
    4. React dependency -> classic single page app.
    Anything else, including an unreadable manifest, is unrecognised (None).
    """

    def __init__(self, ctx: ScanContext):
        self.ctx = ctx

    def read_manifest(self, project_root: str) -> Optional[Dict[str, Any]]:
        """Parsed package.json, or None when it is absent or malformed."""
        manifest_path = os.path.join(project_root, "package.json")
        try:
            with open(manifest_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug("Unusable manifest %s: %s", manifest_path, e)
            return None
        return data if isinstance(data, dict) else None

    def classify(self, project_root: str) -> Optional[ProjectKind]:
        if self.ctx.cancelled:
            return None
        manifest = self.read_manifest(project_root)
        if manifest is None:
            return None

        dependencies = _as_dict(manifest.get("dependencies"))
        dev_dependencies = _as_dict(manifest.get("devDependencies"))

        if self.is_nodejs_backend(project_root, dependencies, dev_dependencies):
            return ProjectKind.NODE_BACKEND
        if self.is_nextjs(project_root, dependencies):
            return ProjectKind.NEXTJS
        if self.is_react_native(project_root, dependencies):
            return ProjectKind.REACT_NATIVE
        if "react" in dependencies:
            return ProjectKind.REACT
        return None

    def is_nodejs_backend(self, project_root: str, dependencies: Dict[str, Any],
                          dev_dependencies: Dict[str, Any]) -> bool:
        if "express" not in dependencies:
            return False
        has_nodemon = "nodemon" in dependencies or "nodemon" in dev_dependencies
        return has_nodemon or self.has_backend_folders(project_root)

    def has_backend_folders(self, project_root: str) -> bool:
        src_dir = os.path.join(project_root, "src")
        for folder in BACKEND_FOLDERS:
            if self.ctx.is_dir(os.path.join(project_root, folder)) or \
                    self.ctx.is_dir(os.path.join(src_dir, folder)):
                return True
        return False

    def is_nextjs(self, project_root: str, dependencies: Dict[str, Any]) -> bool:
        if "next" not in dependencies:
            return False
        has_app_dir = self.ctx.is_dir(os.path.join(project_root, "src", "app")) or \
            self.ctx.is_dir(os.path.join(project_root, "app"))
        has_next_config = any(
            self.ctx.is_file(os.path.join(project_root, name)) for name in NEXT_CONFIG_FILES
        )
        return has_app_dir or has_next_config

    def is_react_native(self, project_root: str, dependencies: Dict[str, Any]) -> bool:
        return "react-native" in dependencies and \
            self.ctx.is_file(os.path.join(project_root, "app.json"))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}
