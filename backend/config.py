"""
Central configuration for the wiki storage.

All settings loaded from .env file or environment variables.
See .env.example for available options.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from backend directory
load_dotenv(Path(__file__).parent / ".env")

# Wiki repository path (required by the scripts, see require_repo_path)
WIKI_REPO_PATH = os.getenv("WIKI_REPO_PATH")

# Create the repository on startup if it does not exist yet
WIKI_INIT_REPO = os.getenv("WIKI_INIT_REPO", "false").lower() in ("1", "true", "yes")

# Log level for scripts (DEBUG, INFO, WARNING, ...)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Author name for commits made by maintenance scripts
WIKI_SYSTEM_AUTHOR = os.getenv("WIKI_SYSTEM_AUTHOR", "System")


def require_repo_path() -> str:
    """Return WIKI_REPO_PATH or fail with a helpful message."""
    if not WIKI_REPO_PATH:
        raise ValueError("WIKI_REPO_PATH environment variable is required. See .env.example")
    return WIKI_REPO_PATH
