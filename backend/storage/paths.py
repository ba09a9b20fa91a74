"""
Path validation for caller-supplied filenames.

Every public GitWiki operation runs its path arguments through here before
touching the disk or the repository.
"""
import logging
import os
from pathlib import Path
from typing import Union

from .exceptions import PathTraversalException, OperationFailedException

logger = logging.getLogger(__name__)


# Top-level name holding git's own metadata
CONTROL_DIR = ".git"


def _reject(path: str, reason: str):
    logger.warning(f"Rejected path {path!r}: {reason}")
    raise PathTraversalException(path)


def validate_path(root: Union[str, Path], path: str) -> str:
    """
    Check that a relative path stays inside the repository root.

    Args:
        root: Absolute repository root
        path: Caller-supplied relative path ("" means the root itself)

    Returns:
        The cleaned relative path using forward slashes ("" for the root)

    Raises:
        PathTraversalException: If the path is absolute or escapes the root
    """
    if not path:
        return ""

    if "\x00" in path:
        _reject(path, "embedded NUL byte")

    cleaned = os.path.normpath(path)
    if os.path.isabs(cleaned):
        _reject(path, "absolute path")
    if cleaned.startswith(".."):
        _reject(path, "parent directory reference")

    root_str = str(root)
    joined = os.path.normpath(os.path.join(root_str, cleaned))
    if joined != root_str and not joined.startswith(root_str.rstrip(os.sep) + os.sep):
        _reject(path, "outside repository root")

    if cleaned == ".":
        return ""
    return cleaned.replace(os.sep, "/")


def validate_target(root: Union[str, Path], path: str, operation: str) -> str:
    """
    Validate a path that is about to be written, moved or removed.

    On top of validate_path, refuses the repository root itself and anything
    inside a git control directory, nested ones included.
    """
    cleaned = validate_path(root, path)
    if not cleaned:
        raise OperationFailedException(operation, path, "refusing to modify the repository root")
    if CONTROL_DIR in cleaned.split("/"):
        _reject(path, "inside the git control directory")
    return cleaned
