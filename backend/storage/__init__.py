"""Git-based storage backend for wiki"""
from .exceptions import (
    ConflictException,
    GitWikiException,
    NotFoundException,
    OperationFailedException,
    PathTraversalException,
    RepositoryNotFoundException,
    RootCommitException,
)
from .git_wiki import GitWiki, PathKind, RELOAD_MARKER
from .models import Author, BlameLine, CommitMetadata
from .paths import validate_path

__all__ = [
    "GitWiki",
    "PathKind",
    "RELOAD_MARKER",
    "Author",
    "BlameLine",
    "CommitMetadata",
    "validate_path",
    "GitWikiException",
    "PathTraversalException",
    "NotFoundException",
    "OperationFailedException",
    "ConflictException",
    "RepositoryNotFoundException",
    "RootCommitException",
]
