# src/treemerge/core/filters.py
import re
from typing import List, Optional

from treemerge.config import DEFAULT_IGNORE_REGEXP
from treemerge.errors import ConfigError
from treemerge.models import FilterConfig


def file_extension(name: str) -> str:
    """Text from the last '.' of the base name, dot included; '' if there is none."""
    idx = name.rfind(".")
    return name[idx:] if idx >= 0 else ""


def _split_unique(raw: str) -> List[str]:
    # Keeps first-seen order, drops blanks and duplicates
    seen = []
    for item in raw.split(","):
        item = item.strip()
        if item and item not in seen:
            seen.append(item)
    return seen


def prepare_extensions(raw: str) -> frozenset:
    """'go, .py,go' -> {'.go', '.py'}"""
    items = _split_unique(raw)
    if not items:
        raise ConfigError("extensions must be a non-empty comma-separated string")
    exts = set()
    for item in items:
        bare = item.lstrip(".")
        if not bare:
            raise ConfigError(f"Invalid extension: '{item}'")
        exts.add(f".{bare}")
    return frozenset(exts)


def prepare_ignored_dirs(raw: str) -> frozenset:
    # An empty list is allowed: nothing gets pruned
    return frozenset(_split_unique(raw))


def compile_ignore_pattern(raw: Optional[str]):
    if raw is None:
        raw = DEFAULT_IGNORE_REGEXP
    try:
        return re.compile(raw)
    except re.error as e:
        raise ConfigError(f"Invalid ignore pattern '{raw}': {e}") from e


def build_filter_config(extensions: str, ignored_dirs: str, ignore_regexp: Optional[str] = None) -> FilterConfig:
    return FilterConfig(
        extensions=prepare_extensions(extensions),
        ignored_dirs=prepare_ignored_dirs(ignored_dirs),
        ignore_pattern=compile_ignore_pattern(ignore_regexp),
    )


class PathFilter:
    """
    Pure name-based predicates. Neither method touches the filesystem,
    so the same (name, is_directory) pair always gives the same answer.
    """

    def __init__(self, config: FilterConfig):
        self.config = config

    @classmethod
    def from_strings(cls, extensions: str, ignored_dirs: str, ignore_regexp: Optional[str] = None) -> "PathFilter":
        return cls(build_filter_config(extensions, ignored_dirs, ignore_regexp))

    def should_prune_directory(self, name: str, is_directory: bool) -> bool:
        return is_directory and name in self.config.ignored_dirs

    def should_emit_file(self, name: str, is_directory: bool) -> bool:
        if is_directory:
            return False
        if file_extension(name) not in self.config.extensions:
            return False
        return self.config.ignore_pattern.search(name) is None
