# src/treemerge/models.py
import heapq
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Pattern, Tuple

from treemerge.config import SUMMARY_TOP_N
from treemerge.errors import WalkError


@dataclass(frozen=True)
class FilterConfig:
    """Immutable selection rules for one run."""
    extensions: FrozenSet[str]
    ignored_dirs: FrozenSet[str]
    ignore_pattern: Pattern[str]


@dataclass(frozen=True)
class Record:
    """One framed file: header line, raw content and a trailing newline."""
    path: str
    data: bytes
    token_count: int = 0

    @classmethod
    def frame(cls, comment: str, path: str, content: bytes, token_count: int = 0) -> "Record":
        header = f"{comment} {path}\n".encode("utf-8", errors="surrogateescape")
        return cls(path=path, data=header + content + b"\n", token_count=token_count)


@dataclass(frozen=True)
class WalkResult:
    root: str
    emitted: int = 0
    error: Optional[WalkError] = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SinkStats:
    files: int = 0
    bytes_written: int = 0
    tokens: int = 0
    top_n: int = SUMMARY_TOP_N
    # Min-heap of (tokens, seq, path); never holds more than top_n entries
    _top: List[Tuple[int, int, str]] = field(default_factory=list, init=False, repr=False)

    def add(self, record: Record) -> None:
        self.files += 1
        self.bytes_written += len(record.data)
        self.tokens += record.token_count
        if self.top_n <= 0:
            return
        entry = (record.token_count, -self.files, record.path)
        if len(self._top) < self.top_n:
            heapq.heappush(self._top, entry)
        else:
            heapq.heappushpop(self._top, entry)

    def largest(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        n = self.top_n if n is None else min(n, self.top_n)
        return [(path, tokens) for tokens, _, path in heapq.nlargest(n, self._top)]


@dataclass(frozen=True)
class RunReport:
    stats: SinkStats
    results: List[WalkResult]

    @property
    def failures(self) -> List[WalkResult]:
        return [r for r in self.results if not r.ok]
