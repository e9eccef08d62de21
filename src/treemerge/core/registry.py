# src/treemerge/core/registry.py
import threading
from typing import Set


class DedupRegistry:
    """
    Paths already emitted during this run. Shared by every walker;
    entries are only ever added.

    Identity is the path string as the walk produced it. Two spellings of
    the same file (relative vs absolute, through a symlink) are distinct.
    """

    def __init__(self):
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def mark_if_new(self, path: str) -> bool:
        with self._lock:
            if path in self._seen:
                return False
            self._seen.add(path)
            return True

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
