"""
Git-based wiki storage backend.

Every page edit is recorded as a commit in a local git repository.
History, blame, diffs and reverts are all answered from that repository.

One lock per GitWiki serializes every call that touches the repository,
reads included. Plain filesystem probes (exists, is_dir, mtime, size)
skip the lock.
"""
import logging
import os
import shutil
import stat
import threading
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from git import Actor, Commit, GitCommandError, Repo
from git.exc import BadName, BadObject, GitError, InvalidGitRepositoryError, NoSuchPathError

from .exceptions import (
    ConflictException,
    GitWikiException,
    NotFoundException,
    OperationFailedException,
    RepositoryNotFoundException,
    RootCommitException,
)
from .models import Author, BlameLine, CommitMetadata
from .paths import CONTROL_DIR, validate_path, validate_target

logger = logging.getLogger(__name__)


# Dropped into .git/ by external tools after changing the repository behind our back
RELOAD_MARKER = "RELOAD_GIT"

SHORT_SHA_LENGTH = 7

# Errors from git, the filesystem or GitPython's object parsing
_FAILURES = (GitError, OSError, ValueError)


class PathKind(Enum):
    """What a path points at in the working tree"""
    MISSING = "missing"
    FILE = "file"
    EMPTY_DIR = "empty_dir"
    DIR = "dir"


class GitWiki:
    """
    Git-based wiki storage system.

    Manages wiki files in a single git repository. Each successful
    mutation adds exactly one commit, or none when the content did not
    change.
    """

    def __init__(self, repo_path: Union[str, Path], initialize: bool = False,
                 default_author: Optional[Author] = None):
        """
        Open (or create) the wiki repository.

        Args:
            repo_path: Path to the wiki git repository
            initialize: Create a new repository at repo_path
            default_author: Author used when a call does not pass one

        Raises:
            RepositoryNotFoundException: If repo_path is not a git repository
            OperationFailedException: If the repository cannot be created or opened
        """
        self.repo_path = Path(os.path.abspath(repo_path))
        self.default_author = default_author or Author.from_name("System")
        self._lock = threading.Lock()
        self.repo = self._open_repo(initialize)

    @property
    def path(self) -> Path:
        return self.repo_path

    def _open_repo(self, initialize: bool = False) -> Repo:
        if initialize:
            try:
                repo = Repo.init(self.repo_path, mkdir=True)
            except _FAILURES as e:
                raise OperationFailedException("init", str(self.repo_path), e) from e
            logger.info(f"Initialized wiki repository at {self.repo_path}")
        else:
            try:
                repo = Repo(self.repo_path)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise RepositoryNotFoundException(
                    f"No valid git repository in '{self.repo_path}'"
                ) from e
            except _FAILURES as e:
                raise OperationFailedException("open", str(self.repo_path), e) from e

        # Caller paths are file names, never pathspec globs or magic
        repo.git.update_environment(GIT_LITERAL_PATHSPECS="1")
        return repo

    # ─────────────────────────────────────────────────────────────────────────────
    # Repository handle
    # ─────────────────────────────────────────────────────────────────────────────

    @staticmethod
    def signal_reload(repo_path: Union[str, Path]) -> None:
        """
        Tell running GitWiki instances that the repository changed externally.

        The next locked access consumes the marker and re-opens the repository.
        """
        marker = Path(repo_path) / CONTROL_DIR / RELOAD_MARKER
        marker.touch()

    def _check_reload(self) -> None:
        """Consume the reload marker and re-open the repository. Caller holds the lock."""
        marker = self.repo_path / CONTROL_DIR / RELOAD_MARKER
        if not marker.exists():
            return

        try:
            marker.unlink()
        except OSError as e:
            logger.warning(f"Failed to remove reload marker {marker}: {e}")

        try:
            repo = self._open_repo()
        except (RepositoryNotFoundException, OperationFailedException) as e:
            logger.warning(f"Failed to reopen repository after reload signal: {e}")
            return

        self.repo.close()
        self.repo = repo
        logger.info(f"Reloaded repository at {self.repo_path}")

    @contextmanager
    def _repo_access(self) -> Iterator[Repo]:
        with self._lock:
            self._check_reload()
            yield self.repo

    def _full_path(self, rel: str) -> Path:
        return self.repo_path / rel if rel else self.repo_path

    @staticmethod
    def _actor(author: Author) -> Actor:
        return Actor(author.name, author.email)

    def _commit(self, repo: Repo, message: str, author: Optional[Author]) -> Commit:
        actor = self._actor(author or self.default_author)
        return repo.index.commit(message, author=actor, committer=actor)

    @staticmethod
    def _has_staged_changes(repo: Repo, *paths: str) -> bool:
        """True if the index differs from HEAD for the given paths."""
        output = repo.git.status("--porcelain", "--untracked-files=no", "--", *paths)
        return any(line[:1] not in (" ", "?") for line in output.splitlines())

    @staticmethod
    def _resolve_commit(repo: Repo, revision: str) -> Commit:
        try:
            return repo.commit(revision)
        except (BadName, BadObject, ValueError, IndexError, GitCommandError) as e:
            raise NotFoundException(f"Revision '{revision}' not found") from e

    # ─────────────────────────────────────────────────────────────────────────────
    # Filesystem probes (no lock)
    # ─────────────────────────────────────────────────────────────────────────────

    def exists(self, path: str) -> bool:
        """Check if a file or directory exists in the working tree."""
        try:
            rel = validate_path(self.repo_path, path)
            return self._full_path(rel).exists()
        except (GitWikiException, OSError):
            return False

    def is_dir(self, path: str) -> bool:
        try:
            rel = validate_path(self.repo_path, path)
            return self._full_path(rel).is_dir()
        except (GitWikiException, OSError):
            return False

    def is_empty_dir(self, path: str) -> bool:
        try:
            rel = validate_path(self.repo_path, path)
            with os.scandir(self._full_path(rel)) as entries:
                return next(entries, None) is None
        except (GitWikiException, OSError):
            return False

    def _stat(self, path: str, operation: str) -> os.stat_result:
        rel = validate_path(self.repo_path, path)
        try:
            return os.stat(self._full_path(rel))
        except FileNotFoundError as e:
            raise NotFoundException(f"'{rel}' not found") from e
        except OSError as e:
            raise OperationFailedException(operation, rel, e) from e

    def mtime(self, path: str) -> datetime:
        """Modification time of a working tree file."""
        return datetime.fromtimestamp(self._stat(path, "mtime").st_mtime).astimezone()

    def size(self, path: str) -> int:
        """Size of a working tree file in bytes."""
        return self._stat(path, "size").st_size

    # ─────────────────────────────────────────────────────────────────────────────
    # Content operations
    # ─────────────────────────────────────────────────────────────────────────────

    def load(self, path: str, revision: str = "") -> bytes:
        """
        Read a file's content.

        Args:
            path: File path relative to the repository root
            revision: Commit to read from; empty reads the working tree

        Returns:
            Raw file content

        Raises:
            NotFoundException: If the revision or the file does not exist
        """
        rel = validate_path(self.repo_path, path)

        with self._repo_access() as repo:
            if revision:
                commit = self._resolve_commit(repo, revision)
                if not rel:
                    raise NotFoundException(f"'{path}' is not a file")
                try:
                    blob = commit.tree / rel
                except KeyError as e:
                    raise NotFoundException(f"'{rel}' not found at revision {revision}") from e
                if blob.type != "blob":
                    raise NotFoundException(f"'{rel}' is not a file at revision {revision}")
                try:
                    return blob.data_stream.read()
                except _FAILURES as e:
                    raise OperationFailedException("load", rel, e) from e

            try:
                return self._full_path(rel).read_bytes()
            except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
                raise NotFoundException(f"'{rel}' not found") from e
            except OSError as e:
                raise OperationFailedException("load", rel, e) from e

    def load_text(self, path: str, revision: str = "", encoding: str = "utf-8") -> str:
        """Read a file's content as text."""
        return self.load(path, revision).decode(encoding)

    def store(self, path: str, content: Union[bytes, str], message: str = "",
              author: Optional[Author] = None) -> bool:
        """
        Write content to a file and commit it.

        Storing content identical to the last commit is a no-op.

        Args:
            path: File path relative to the repository root
            content: New content (str is encoded as UTF-8)
            message: Commit message (generated if empty)
            author: Commit author

        Returns:
            True if a commit was made, False if the content was unchanged

        Raises:
            PathTraversalException: If the path escapes the repository
            OperationFailedException: If writing or committing fails
        """
        rel = validate_target(self.repo_path, path, "store")
        data = content.encode("utf-8") if isinstance(content, str) else content
        message = message or f"Update {rel}"
        filepath = self._full_path(rel)

        with self._repo_access() as repo:
            try:
                filepath.parent.mkdir(parents=True, exist_ok=True)
                filepath.write_bytes(data)
                repo.git.add("--", rel)

                if not self._has_staged_changes(repo, rel):
                    logger.debug(f"Store {rel}: content unchanged, nothing to commit")
                    return False

                commit = self._commit(repo, message, author)
            except _FAILURES as e:
                raise OperationFailedException("store", rel, e) from e

        logger.info(f"Committed {commit.hexsha[:SHORT_SHA_LENGTH]}: {message}")
        return True

    @staticmethod
    def _classify(filepath: Path) -> PathKind:
        try:
            st = os.lstat(filepath)
        except FileNotFoundError:
            return PathKind.MISSING

        if not stat.S_ISDIR(st.st_mode):
            return PathKind.FILE
        with os.scandir(filepath) as entries:
            if next(entries, None) is None:
                return PathKind.EMPTY_DIR
        return PathKind.DIR

    def delete(self, path: str, message: str = "", author: Optional[Author] = None) -> None:
        """
        Delete a file or directory and commit the removal.

        Deleting a missing path does nothing. An empty directory was never
        tracked, so it is removed without a commit.

        Raises:
            PathTraversalException: If the path escapes the repository
            OperationFailedException: If removal or commit fails
        """
        rel = validate_target(self.repo_path, path, "delete")
        filepath = self._full_path(rel)

        with self._repo_access() as repo:
            try:
                kind = self._classify(filepath)

                if kind is PathKind.MISSING:
                    return
                if kind is PathKind.EMPTY_DIR:
                    filepath.rmdir()
                    return

                repo.git.rm("-r", "-f", "-q", "--ignore-unmatch", "--", rel)

                # Untracked leftovers are not touched by git rm
                if kind is PathKind.DIR and filepath.is_dir():
                    shutil.rmtree(filepath)
                elif kind is PathKind.FILE and os.path.lexists(filepath):
                    filepath.unlink()

                if not self._has_staged_changes(repo, rel):
                    logger.info(f"Delete {rel}: nothing tracked, removed from disk only")
                    return

                message = message or f"Deleted {rel}."
                commit = self._commit(repo, message, author)
            except _FAILURES as e:
                raise OperationFailedException("delete", rel, e) from e

        logger.info(f"Committed {commit.hexsha[:SHORT_SHA_LENGTH]}: {message}")

    def rename(self, old_path: str, new_path: str, message: str = "",
               author: Optional[Author] = None) -> None:
        """
        Move a file to a new path and commit the move.

        Args:
            old_path: Current path relative to the repository root
            new_path: Target path relative to the repository root
            message: Commit message (generated if empty)
            author: Commit author

        Raises:
            PathTraversalException: If either path escapes the repository
            ConflictException: If new_path already exists
            NotFoundException: If old_path does not exist
            OperationFailedException: If the move or commit fails
        """
        old_rel = validate_target(self.repo_path, old_path, "rename")
        new_rel = validate_target(self.repo_path, new_path, "rename")
        old_filepath = self._full_path(old_rel)
        new_filepath = self._full_path(new_rel)

        with self._repo_access() as repo:
            if os.path.lexists(new_filepath):
                raise ConflictException(f"The filename '{new_rel}' already exists")
            if not os.path.lexists(old_filepath):
                raise NotFoundException(f"'{old_rel}' not found")

            message = message or f"{old_rel} renamed to {new_rel}."
            try:
                new_filepath.parent.mkdir(parents=True, exist_ok=True)
                os.rename(old_filepath, new_filepath)
                repo.git.rm("-r", "--cached", "-q", "--ignore-unmatch", "--", old_rel)
                repo.git.add("--", new_rel)
                commit = self._commit(repo, message, author)
            except _FAILURES as e:
                raise OperationFailedException("rename", f"{old_rel} -> {new_rel}", e) from e

        logger.info(f"Committed {commit.hexsha[:SHORT_SHA_LENGTH]}: {message}")

    def commit(self, paths: Sequence[str], message: str = "",
               author: Optional[Author] = None) -> bool:
        """
        Stage the given working tree paths and commit them.

        For callers that write files themselves (e.g. bulk imports).

        Returns:
            True if a commit was made, False if nothing was staged
        """
        rels = [validate_target(self.repo_path, p, "commit") for p in paths]
        message = message or f"Update {', '.join(rels)}"

        with self._repo_access() as repo:
            try:
                if rels:
                    repo.git.add("--", *rels)

                if not self._has_staged_changes(repo, *rels):
                    logger.debug(f"Commit {', '.join(rels)}: nothing staged")
                    return False

                commit = self._commit(repo, message, author)
            except _FAILURES as e:
                raise OperationFailedException("commit", ", ".join(rels), e) from e

        logger.info(f"Committed {commit.hexsha[:SHORT_SHA_LENGTH]}: {message}")
        return True

    # ─────────────────────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _history(repo: Repo, rel: str, max_count: int = 0) -> List[Commit]:
        """
        Commits reachable from HEAD, newest first, optionally limited to a path.

        Raises:
            NotFoundException: If the repository has no commits yet
        """
        if not repo.head.is_valid():
            raise NotFoundException("Repository has no commits yet")

        kwargs = {}
        if max_count > 0:
            kwargs["max_count"] = max_count
        if rel:
            kwargs["paths"] = rel

        try:
            return list(repo.iter_commits("HEAD", **kwargs))
        except _FAILURES as e:
            raise OperationFailedException("log", rel or None, e) from e

    @staticmethod
    def _name_status(repo: Repo, old: Commit, new: Commit) -> List[Tuple[str, str]]:
        """
        Changed paths between two commits as (status, path) pairs.

        Renames are reported as a delete plus an add.
        """
        output = repo.git.diff("--name-status", "--no-renames", "-z", old.hexsha, new.hexsha)
        parts = output.split("\x00")
        if parts and parts[-1] == "":
            parts.pop()
        return list(zip(parts[0::2], parts[1::2]))

    def _changed_files(self, repo: Repo, commit: Commit) -> List[str]:
        if commit.parents:
            return [path for _, path in self._name_status(repo, commit.parents[0], commit)]

        # Root commit: everything was added
        output = repo.git.ls_tree("-r", "--name-only", "-z", commit.hexsha)
        return [path for path in output.split("\x00") if path]

    def _commit_to_metadata(self, repo: Repo, commit: Commit,
                            include_files: bool = False) -> CommitMetadata:
        """
        Project a commit onto CommitMetadata.

        The file list needs a tree diff, so it is only computed on request.
        """
        files = self._changed_files(repo, commit) if include_files else None

        return CommitMetadata(
            revision=commit.hexsha[:SHORT_SHA_LENGTH],
            revision_full=commit.hexsha,
            datetime=commit.authored_datetime,
            author_name=commit.author.name,
            author_email=commit.author.email,
            message=commit.message.strip(),
            files=files
        )

    def metadata(self, path: str, revision: str = "") -> CommitMetadata:
        """
        Get commit metadata for a file.

        Args:
            path: File path relative to the repository root
            revision: Specific revision; empty means the newest commit
                that touched the path

        Returns:
            CommitMetadata without a file list

        Raises:
            NotFoundException: If no matching commit exists
        """
        rel = validate_path(self.repo_path, path)

        with self._repo_access() as repo:
            if revision:
                commit = self._resolve_commit(repo, revision)
            else:
                commits = self._history(repo, rel, 1)
                if not commits:
                    raise NotFoundException(f"No history for '{rel}'")
                commit = commits[0]

            return self._commit_to_metadata(repo, commit)

    def log(self, path: str = "", max_count: int = 0) -> List[CommitMetadata]:
        """
        Get commit history, newest first.

        Args:
            path: File path to filter by; empty for the whole repository
            max_count: Maximum number of commits (0 or less for all)

        Returns:
            List of CommitMetadata without file lists

        Raises:
            NotFoundException: If there is no matching history
        """
        rel = validate_path(self.repo_path, path)

        with self._repo_access() as repo:
            commits = self._history(repo, rel, max_count)
            if rel and not commits:
                raise NotFoundException(f"No history for '{rel}'")

            return [self._commit_to_metadata(repo, commit) for commit in commits]

    def blame(self, path: str, revision: str = "") -> List[BlameLine]:
        """
        Attribute every line of a file to the commit that last changed it.

        Args:
            path: File path relative to the repository root
            revision: Revision to blame at; empty for HEAD

        Returns:
            One BlameLine per line, numbered from 1

        Raises:
            NotFoundException: If the revision or the file does not exist
        """
        rel = validate_path(self.repo_path, path)
        if not rel:
            raise NotFoundException("Cannot blame the repository root")

        with self._repo_access() as repo:
            if revision:
                commit = self._resolve_commit(repo, revision)
            elif repo.head.is_valid():
                commit = repo.head.commit
            else:
                raise NotFoundException("Repository has no commits yet")

            try:
                blob = commit.tree / rel
            except KeyError as e:
                raise NotFoundException(f"'{rel}' not found at {commit.hexsha[:SHORT_SHA_LENGTH]}") from e
            if blob.type != "blob":
                raise NotFoundException(f"'{rel}' is not a file")

            try:
                entries = repo.blame(commit.hexsha, rel) or []
                source = self._split_lines(blob.data_stream.read())
            except _FAILURES as e:
                raise OperationFailedException("blame", rel, e) from e

            # Line text comes from the blob; porcelain output is only used for attribution
            lines = []
            for blame_commit, blame_lines in entries:
                for _ in blame_lines:
                    index = len(lines)
                    lines.append(BlameLine(
                        revision=blame_commit.hexsha[:SHORT_SHA_LENGTH],
                        author_name=blame_commit.author.name,
                        datetime=blame_commit.authored_datetime,
                        line_number=index + 1,
                        line=source[index] if index < len(source) else "",
                        message=str(blame_commit.summary)
                    ))

            return lines

    @staticmethod
    def _split_lines(data: bytes) -> List[str]:
        """Split file content into lines without their LF or CRLF terminators."""
        if not data:
            return []
        raw_lines = data.split(b"\n")
        if data.endswith(b"\n"):
            raw_lines.pop()
        return [
            (raw[:-1] if raw.endswith(b"\r") else raw).decode("utf-8", errors="replace")
            for raw in raw_lines
        ]

    def diff(self, rev_a: str, rev_b: str, context_lines: int = 3) -> str:
        """
        Unified diff between two revisions.

        Raises:
            NotFoundException: If either revision cannot be resolved
        """
        with self._repo_access() as repo:
            commit_a = self._resolve_commit(repo, rev_a)
            commit_b = self._resolve_commit(repo, rev_b)
            try:
                return repo.git.diff(commit_a.hexsha, commit_b.hexsha, unified=context_lines)
            except _FAILURES as e:
                raise OperationFailedException("diff", f"{rev_a}..{rev_b}", e) from e

    def show_commit(self, revision: str) -> Tuple[CommitMetadata, str]:
        """
        Metadata (with file list) and patch for a single commit.

        The patch is taken against the first parent. The root commit shows
        all of its files as added.

        Raises:
            NotFoundException: If the revision cannot be resolved
        """
        with self._repo_access() as repo:
            commit = self._resolve_commit(repo, revision)
            try:
                meta = self._commit_to_metadata(repo, commit, include_files=True)
                if commit.parents:
                    patch = repo.git.diff(commit.parents[0].hexsha, commit.hexsha)
                else:
                    patch = repo.git.diff_tree("-r", "-p", "--root", "--no-commit-id", commit.hexsha)
            except _FAILURES as e:
                raise OperationFailedException("show", revision, e) from e

            return meta, patch

    def get_parent_revision(self, path: str, revision: str = "") -> str:
        """
        Revision preceding `revision` in a file's history.

        An empty revision means the file's latest revision. Otherwise the
        revision is resolved by git, so short ids must be unambiguous.

        Raises:
            NotFoundException: If the revision cannot be resolved, is not
                in the file's history or is its first revision
        """
        rel = validate_path(self.repo_path, path)

        with self._repo_access() as repo:
            commits = self._history(repo, rel)
            if not commits:
                raise NotFoundException(f"No history for '{rel}'")
            target = self._resolve_commit(repo, revision).hexsha if revision else commits[0].hexsha

        for i, commit in enumerate(commits):
            if commit.hexsha == target:
                if i + 1 < len(commits):
                    return commits[i + 1].hexsha[:SHORT_SHA_LENGTH]
                raise NotFoundException(f"'{rel}' has no revision before {revision or 'HEAD'}")
        raise NotFoundException(f"Revision '{revision}' not in history of '{rel}'")

    # ─────────────────────────────────────────────────────────────────────────────
    # Revert
    # ─────────────────────────────────────────────────────────────────────────────

    def revert(self, revision: str, message: str = "", author: Optional[Author] = None) -> bool:
        """
        Undo a commit by committing its parent's version of every file it touched.

        History is not rewritten; the revert is a new commit on top.

        Args:
            revision: Commit to revert
            message: Commit message (defaults to referencing the reverted commit)
            author: Commit author

        Returns:
            True if a revert commit was made, False if HEAD already matched

        Raises:
            NotFoundException: If the revision cannot be resolved
            RootCommitException: If the commit has no parent
            OperationFailedException: If restoring or committing fails
        """
        with self._repo_access() as repo:
            commit = self._resolve_commit(repo, revision)
            if not commit.parents:
                raise RootCommitException(
                    f"Cannot revert initial commit {commit.hexsha[:SHORT_SHA_LENGTH]}"
                )
            parent = commit.parents[0]
            message = message or f'Revert "{commit.summary}"'

            try:
                changes = self._name_status(repo, parent, commit)
                for status, rel in changes:
                    if status == "A":
                        repo.git.rm("-f", "-q", "--ignore-unmatch", "--", rel)
                        continue

                    blob = parent.tree / rel
                    filepath = self._full_path(rel)
                    filepath.parent.mkdir(parents=True, exist_ok=True)
                    filepath.write_bytes(blob.data_stream.read())
                    repo.git.add("--", rel)

                paths = [rel for _, rel in changes]
                if not paths or not self._has_staged_changes(repo, *paths):
                    logger.info(f"Revert {commit.hexsha[:SHORT_SHA_LENGTH]}: nothing to change")
                    return False

                new_commit = self._commit(repo, message, author)
            except _FAILURES as e:
                raise OperationFailedException("revert", revision, e) from e

        logger.info(
            f"Committed {new_commit.hexsha[:SHORT_SHA_LENGTH]}: "
            f"reverted {commit.hexsha[:SHORT_SHA_LENGTH]}"
        )
        return True

    # ─────────────────────────────────────────────────────────────────────────────
    # Listing
    # ─────────────────────────────────────────────────────────────────────────────

    def list(self, path: str = "", depth: Optional[int] = None,
             exclude: Optional[Sequence[str]] = None) -> Tuple[List[str], List[str]]:
        """
        Recursively list files and directories below a path.

        Args:
            path: Directory to list, relative to the repository root
            depth: How many directory levels to descend below `path`
                (0 lists direct children only, None is unlimited)
            exclude: Names to skip; a matching directory is pruned entirely

        Returns:
            Tuple of (files, directories), sorted, relative to `path`

        Raises:
            NotFoundException: If `path` is not an existing directory
        """
        rel = validate_path(self.repo_path, path)
        if CONTROL_DIR in rel.split("/"):
            raise NotFoundException(f"Directory '{rel}' not found")
        root = self._full_path(rel)
        if not root.is_dir():
            raise NotFoundException(f"Directory '{rel}' not found")

        excluded = {CONTROL_DIR}
        excluded.update(exclude or ())

        files = []
        directories = []

        # os.walk skips entries it cannot read
        for dirpath, dirnames, filenames in os.walk(root):
            rel_dir = os.path.relpath(dirpath, root)
            if rel_dir == ".":
                level, prefix = 0, ""
            else:
                level = rel_dir.count(os.sep) + 1
                prefix = rel_dir.replace(os.sep, "/") + "/"

            dirnames[:] = [d for d in dirnames if d not in excluded]
            directories.extend(prefix + d for d in dirnames)
            files.extend(prefix + f for f in filenames if f not in excluded)

            if depth is not None and level >= depth:
                dirnames[:] = []

        files.sort()
        directories.sort()
        return files, directories
