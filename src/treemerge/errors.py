# src/treemerge/errors.py


class TreeMergeError(Exception):
    """Base class for all treemerge failures."""


class ConfigError(TreeMergeError):
    """Bad run configuration, detected before any traversal starts."""


class WalkError(TreeMergeError):
    """A single root could not be fully traversed."""

    def __init__(self, root: str, cause: BaseException):
        self.root = root
        self.cause = cause
        super().__init__(f"{root}: {cause}")


class SinkError(TreeMergeError):
    """The output destination rejected a write. Fatal for the whole run."""
