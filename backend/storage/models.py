"""
Value objects returned by the wiki storage.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class Author:
    """Commit author, supplied per call."""
    name: str
    email: str

    @classmethod
    def from_name(cls, name: str) -> 'Author':
        """Build an author with a generated wiki.local address"""
        return cls(name, f"{name.replace(' ', '').lower()}@wiki.local")


@dataclass
class CommitMetadata:
    """
    Summary of a single commit.

    `files` stays None for routine history queries. It is only filled in by
    detailed inspection (show_commit), which has to diff the commit against
    its parent.
    """
    revision: str        # short sha
    revision_full: str
    datetime: datetime
    author_name: str
    author_email: str
    message: str
    files: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revision": self.revision,
            "revision_full": self.revision_full,
            "date": self.datetime.isoformat(),
            "author_name": self.author_name,
            "author_email": self.author_email,
            "message": self.message,
            "files": self.files
        }


@dataclass
class BlameLine:
    """One line of a file attributed to the commit that last touched it."""
    revision: str
    author_name: str
    datetime: datetime
    line_number: int
    line: str
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revision": self.revision,
            "author_name": self.author_name,
            "date": self.datetime.isoformat(),
            "line_number": self.line_number,
            "line": self.line,
            "message": self.message
        }
