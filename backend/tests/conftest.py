import pytest
import sys
import os
import shutil
import tempfile

# Add the parent directory to Python path so we can import backend modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storage import Author, GitWiki


@pytest.fixture
def temp_dir():
    """Create a temporary directory, removed after the test."""
    path = tempfile.mkdtemp()
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def temp_wiki(temp_dir):
    """Create an empty wiki repository for testing."""
    return GitWiki(temp_dir, initialize=True)


@pytest.fixture
def author():
    return Author("Test User", "test@example.com")


def commit_count(wiki: GitWiki) -> int:
    """Number of commits reachable from HEAD (0 for an empty repository)."""
    if not wiki.repo.head.is_valid():
        return 0
    return len(wiki.log())
