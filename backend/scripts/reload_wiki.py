#!/usr/bin/env python3
"""
Signal running wiki processes to re-open the repository.

Run after changing the repository outside the wiki (e.g. a git pull
done by an administrator).
"""

import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storage import GitWiki
from config import LOG_LEVEL, require_repo_path

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("reload_wiki")


def main() -> int:
    repo_path = require_repo_path()
    try:
        GitWiki.signal_reload(repo_path)
    except OSError as e:
        logger.error(f"Could not write reload marker in {repo_path}: {e}")
        return 1
    logger.info(f"Reload requested for {repo_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
