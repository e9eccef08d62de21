# src/treemerge/core/walker.py
import os
import stat
from typing import Collection, Iterator, Optional

import pathspec

from treemerge.config import DEFAULT_COMMENT
from treemerge.core.channel import RecordChannel
from treemerge.core.filters import PathFilter
from treemerge.core.ignore import matches_spec
from treemerge.core.registry import DedupRegistry
from treemerge.errors import WalkError
from treemerge.models import Record, WalkResult
from treemerge.utils import tokenizer


class TreeWalker:
    """
    Depth-first producer. One walk() call per root; the same walker may be
    used from several threads at once since its only shared state is the
    registry and the channel.
    """

    def __init__(
        self,
        path_filter: PathFilter,
        registry: DedupRegistry,
        channel: RecordChannel,
        comment_symbol: str = DEFAULT_COMMENT,
        ignore_spec: Optional[pathspec.PathSpec] = None,
        exclude_paths: Collection[str] = (),
        count_tokens: bool = True,
    ):
        self.path_filter = path_filter
        self.registry = registry
        self.channel = channel
        self.comment_symbol = comment_symbol
        self.ignore_spec = ignore_spec
        self.exclude_paths = frozenset(os.path.abspath(p) for p in exclude_paths)
        self.count_tokens = count_tokens

    def walk(self, root: str) -> WalkResult:
        """
        Pushes every qualifying file under root onto the channel.
        Failures stay local to this root and come back in the result.
        """
        emitted = 0
        try:
            for record in self.iter_records(root):
                if not self.channel.send(record):
                    return WalkResult(root=root, emitted=emitted, cancelled=True)
                emitted += 1
        except OSError as e:
            return WalkResult(root=root, emitted=emitted, error=WalkError(root, e))
        return WalkResult(root=root, emitted=emitted, cancelled=self.channel.cancelled)

    def iter_records(self, root: str) -> Iterator[Record]:
        root = os.path.normpath(root)
        st = os.stat(root)

        if not stat.S_ISDIR(st.st_mode):
            # A plain file given as a root is judged on its own
            record = self._build_record(root, os.path.basename(root), os.path.basename(root))
            if record is not None:
                yield record
            return

        if self.path_filter.should_prune_directory(os.path.basename(root), True):
            return

        yield from self._descend(root, root)

    def _descend(self, root: str, dirpath: str) -> Iterator[Record]:
        if self.channel.cancelled:
            return

        # Listing errors propagate and end this root's walk
        with os.scandir(dirpath) as it:
            entries = list(it)

        for entry in entries:
            path = os.path.join(dirpath, entry.name)
            if entry.is_dir():
                if self._is_pruned(root, path, entry.name):
                    continue
                # Symlinked directories are listed but not followed
                if not entry.is_symlink():
                    yield from self._descend(root, path)
                continue

            record = self._build_record(path, entry.name, self._rel(root, path))
            if record is not None:
                yield record

    def _rel(self, root: str, path: str) -> Optional[str]:
        if self.ignore_spec is None:
            return None
        return os.path.relpath(path, root).replace(os.sep, "/")

    def _is_pruned(self, root: str, path: str, name: str) -> bool:
        if self.path_filter.should_prune_directory(name, True):
            return True
        return matches_spec(self.ignore_spec, self._rel(root, path), is_directory=True)

    def _build_record(self, path: str, name: str, rel_path: Optional[str]) -> Optional[Record]:
        if not self.path_filter.should_emit_file(name, False):
            return None
        if rel_path is not None and matches_spec(self.ignore_spec, rel_path):
            return None
        if self.exclude_paths and os.path.abspath(path) in self.exclude_paths:
            return None
        if not self.registry.mark_if_new(path):
            return None

        with open(path, "rb") as f:
            content = f.read()

        tokens = tokenizer.count_tokens(content) if self.count_tokens else 0
        return Record.frame(self.comment_symbol, path, content, token_count=tokens)
