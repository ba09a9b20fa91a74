"""
Exceptions raised by the git-backed wiki storage.

Callers branch on the exception class: PathTraversalException and
NotFoundException are expected outcomes, everything else is a failure.
"""
from typing import Optional


class GitWikiException(Exception):
    """Base exception for GitWiki operations"""
    pass


class PathTraversalException(GitWikiException):
    """Raised when a supplied path resolves outside the repository root"""

    def __init__(self, path: str):
        super().__init__(f"Path traversal rejected: {path!r}")
        self.path = path


class NotFoundException(GitWikiException):
    """Raised when a file, commit or revision does not exist"""
    pass


class ConflictException(GitWikiException):
    """Raised when a rename target already exists"""
    pass


class RepositoryNotFoundException(GitWikiException):
    """Raised when the location is not a valid git repository"""
    pass


class RootCommitException(GitWikiException):
    """Raised when reverting a commit that has no parent"""
    pass


class OperationFailedException(GitWikiException):
    """
    Any other storage failure (disk full, corrupted repository, permissions).

    Carries the operation name and path so the message is useful in logs.
    """

    def __init__(self, operation: str, path: Optional[str], cause):
        self.operation = operation
        self.path = path
        self.cause = cause
        target = f" {path}" if path else ""
        super().__init__(f"{operation}{target}: {cause}")
