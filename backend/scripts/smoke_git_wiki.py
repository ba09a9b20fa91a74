#!/usr/bin/env python3
"""Smoke test for GitWiki against the configured repository"""

import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storage import Author, GitWiki, GitWikiException
from config import LOG_LEVEL, WIKI_INIT_REPO, WIKI_SYSTEM_AUTHOR, require_repo_path

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

PAGE = "smoke-test.md"

wiki = GitWiki(require_repo_path(), initialize=WIKI_INIT_REPO)
author = Author.from_name(WIKI_SYSTEM_AUTHOR)

print("Testing GitWiki...")

# Test 1: List files
print("\n1. Listing files:")
files, directories = wiki.list(exclude=["node_modules"])
for name in files:
    print(f"  - {name}")

# Test 2: Store a page
print(f"\n2. Storing '{PAGE}'...")
try:
    changed = wiki.store(PAGE, "# Smoke Test\n\nCreated from the smoke script.\n", "Create smoke test page", author)
    print(f"  ✓ Stored (changed={changed})")
except GitWikiException as e:
    print(f"  ✗ Error: {e}")

# Test 3: Update the page
print(f"\n3. Updating '{PAGE}'...")
try:
    changed = wiki.store(PAGE, "# Smoke Test (Updated)\n\nThis page has been updated!\n", "Update smoke test page", author)
    print(f"  ✓ Updated (changed={changed})")
except GitWikiException as e:
    print(f"  ✗ Error: {e}")

# Test 4: History
print("\n4. Getting page history...")
try:
    history = wiki.log(PAGE, max_count=5)
    print(f"  ✓ Found {len(history)} commits:")
    for commit in history:
        print(f"    - {commit.revision}: {commit.message}")
except GitWikiException as e:
    print(f"  ✗ Error: {e}")

# Test 5: Revert the update
print("\n5. Reverting the last change...")
try:
    latest = wiki.metadata(PAGE)
    wiki.revert(latest.revision, author=author)
    print(f"  ✓ Reverted {latest.revision}")
except GitWikiException as e:
    print(f"  ✗ Error: {e}")

# Test 6: Delete the page
print(f"\n6. Deleting '{PAGE}'...")
try:
    wiki.delete(PAGE, author=author)
    print("  ✓ Deleted")
except GitWikiException as e:
    print(f"  ✗ Error: {e}")

print("\n✅ Smoke test complete!")
