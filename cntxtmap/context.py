#context.py - Per-scan state: cancellation, caches, claimed files and filesystem reads.

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, NamedTuple, Optional, Sequence, Set

from cntxtmap.config import ScanConfig
from cntxtmap.models import Project

logger = logging.getLogger(__name__)


class DirEntry(NamedTuple):
    name: str
    path: str
    is_dir: bool


class ScanContext:
    """Everything one scan owns. Nothing here outlives the scan.

    Directory listings are returned sorted by name so that two scans of an
    unchanged tree visit files in the same order. File reads are fanned out
    on a thread pool in batches of ``config.batch_size``; results come back
    in request order and are consumed by a single thread.
    """

    def __init__(self, config: Optional[ScanConfig] = None,
                 cancel_event: Optional[threading.Event] = None):
        self.config = config or ScanConfig()
        self.cancel_event = cancel_event or threading.Event()
        self.projects: Dict[str, Project] = {}
        self.claimed: Set[str] = set()
        self.root_cache: Dict[str, str] = {}
        self.warnings: List[str] = []
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self) -> "ScanContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def warn(self, message: str, *args) -> None:
        """Log a non-fatal problem and keep it for the caller."""
        logger.warning(message, *args)
        self.warnings.append(message % args if args else message)

    def claim(self, paths) -> None:
        self.claimed.update(p for p in paths if isinstance(p, str))

    def is_claimed(self, path: str) -> bool:
        return path in self.claimed

    # Filesystem access.

    def list_dir(self, directory: str) -> List[DirEntry]:
        """Sorted entries of *directory*; an unreadable directory yields none."""
        entries: List[DirEntry] = []
        try:
            with os.scandir(directory) as it:
                for entry in it:
                    try:
                        is_dir = entry.is_dir()
                    except OSError:
                        is_dir = False
                    entries.append(DirEntry(entry.name, entry.path, is_dir))
        except OSError as e:
            self.warn("Error reading directory %s: %s", directory, e)
            return []
        entries.sort(key=lambda e: e.name)
        return entries

    def read_text(self, file_path: str) -> Optional[str]:
        try:
            with open(file_path, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except OSError as e:
            self.warn("Error reading file %s: %s", file_path, e)
            return None

    def read_many(self, paths: Sequence[str]) -> List[Optional[str]]:
        """Read *paths* concurrently, one batch at a time.

        The result lines up with *paths*. Once cancellation is requested the
        remaining entries are left as None.
        """
        results: List[Optional[str]] = [None] * len(paths)
        if not paths:
            return results
        if len(paths) == 1:
            if not self.cancelled:
                results[0] = self.read_text(paths[0])
            return results

        size = max(1, self.config.batch_size)
        for start in range(0, len(paths), size):
            if self.cancelled:
                break
            batch = paths[start:start + size]
            for offset, content in enumerate(self._pool().map(self.read_text, batch)):
                results[start + offset] = content
        return results

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=max(1, self.config.max_workers),
                thread_name_prefix="cntxtmap-read",
            )
        return self._executor
