# src/treemerge/core/ignore.py
from pathlib import Path
from typing import List, Optional

import pathspec

from treemerge.errors import ConfigError


def load_ignore_spec(ignore_file: Optional[Path], extra_patterns: Optional[List[str]] = None) -> Optional[pathspec.PathSpec]:
    """
    Loads gitignore-style rules from ignore_file (plus any extra patterns)
    into a PathSpec. Returns None when there is nothing to match.
    """
    lines: List[str] = []

    if ignore_file is not None:
        if not ignore_file.is_file():
            raise ConfigError(f"Ignore file '{ignore_file}' does not exist or is not a file")
        try:
            with open(ignore_file, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Could not read ignore file '{ignore_file}': {e}") from e

    if extra_patterns:
        lines.extend(extra_patterns)

    if not any(ln.strip() and not ln.lstrip().startswith("#") for ln in lines):
        return None

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except Exception as e:
        raise ConfigError(f"Error parsing ignore rules: {e}") from e


def matches_spec(spec: Optional[pathspec.PathSpec], rel_path: str, is_directory: bool = False) -> bool:
    """rel_path is POSIX-style and relative to the walk root."""
    if spec is None:
        return False
    if is_directory:
        # "venv/" style rules only match when the path carries a trailing slash
        return spec.match_file(rel_path + "/")
    return spec.match_file(rel_path)
