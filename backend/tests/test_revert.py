"""
Unit tests for reverting commits.
"""
import pytest

from storage import NotFoundException, RootCommitException
from conftest import commit_count


def test_revert_scenario(temp_wiki, author):
    """Create, no-op save, update, then revert the update."""
    assert temp_wiki.store("a.md", "v1", "create", author) is True
    assert commit_count(temp_wiki) == 1

    assert temp_wiki.store("a.md", "v1", "noop", author) is False
    assert commit_count(temp_wiki) == 1

    assert temp_wiki.store("a.md", "v2", "update", author) is True
    assert commit_count(temp_wiki) == 2

    history = temp_wiki.log("a.md", 0)
    assert [meta.message for meta in history] == ["update", "create"]

    temp_wiki.revert(history[0].revision, "", author)

    assert temp_wiki.load("a.md") == b"v1"
    assert commit_count(temp_wiki) == 3


def test_revert_appends_history(temp_wiki, author):
    temp_wiki.store("page.md", "c0", "Create", author)
    temp_wiki.store("page.md", "c1", "Change", author)
    before = [meta.revision_full for meta in temp_wiki.log()]

    assert temp_wiki.revert(before[0], "Undo change", author) is True

    after = temp_wiki.log()
    assert len(after) == len(before) + 1
    assert [meta.revision_full for meta in after[1:]] == before
    assert after[0].message == "Undo change"
    assert temp_wiki.load("page.md", before[0]) == b"c1"


def test_revert_default_message(temp_wiki, author):
    temp_wiki.store("page.md", "c0", "Create", author)
    temp_wiki.store("page.md", "c1", "Change the page", author)

    temp_wiki.revert(temp_wiki.metadata("page.md").revision, author=author)

    assert temp_wiki.metadata("page.md").message == 'Revert "Change the page"'


def test_revert_removes_added_files(temp_wiki, author):
    temp_wiki.store("keep.md", "keep", "Create keep", author)
    temp_wiki.store("added.md", "new", "Add page", author)

    temp_wiki.revert(temp_wiki.metadata("added.md").revision, "", author)

    assert not temp_wiki.exists("added.md")
    assert temp_wiki.load("keep.md") == b"keep"
    meta, _ = temp_wiki.show_commit(temp_wiki.log()[0].revision)
    assert meta.files == ["added.md"]


def test_revert_restores_deleted_files(temp_wiki, author):
    temp_wiki.store("folder/page.md", "content", "Create", author)
    temp_wiki.delete("folder/page.md", "Remove", author)

    temp_wiki.revert(temp_wiki.log()[0].revision, "", author)

    assert temp_wiki.load("folder/page.md") == b"content"


def test_revert_only_touches_files_of_the_commit(temp_wiki, author):
    temp_wiki.store("a.md", "a1", "Create a", author)
    temp_wiki.store("b.md", "b1", "Create b", author)
    temp_wiki.store("a.md", "a2", "Change a", author)
    target = temp_wiki.metadata("a.md").revision
    temp_wiki.store("b.md", "b2", "Change b", author)

    temp_wiki.revert(target, "", author)

    assert temp_wiki.load("a.md") == b"a1"
    assert temp_wiki.load("b.md") == b"b2"


def test_revert_rename(temp_wiki, author):
    temp_wiki.store("old.md", "content", "Create", author)
    temp_wiki.rename("old.md", "new.md", "Rename", author)

    temp_wiki.revert(temp_wiki.log()[0].revision, "", author)

    assert temp_wiki.exists("old.md")
    assert not temp_wiki.exists("new.md")


def test_revert_already_undone_is_noop(temp_wiki, author):
    temp_wiki.store("page.md", "c0", "Create", author)
    temp_wiki.store("page.md", "c1", "Change", author)
    target = temp_wiki.metadata("page.md").revision
    temp_wiki.store("page.md", "c0", "Manual undo", author)
    count = commit_count(temp_wiki)

    assert temp_wiki.revert(target, "", author) is False
    assert commit_count(temp_wiki) == count


def test_revert_root_commit(temp_wiki, author):
    temp_wiki.store("page.md", "c0", "Create", author)

    with pytest.raises(RootCommitException):
        temp_wiki.revert(temp_wiki.metadata("page.md").revision, "", author)

    assert commit_count(temp_wiki) == 1


def test_revert_unknown_revision(temp_wiki, author):
    temp_wiki.store("page.md", "c0", "Create", author)

    with pytest.raises(NotFoundException):
        temp_wiki.revert("deadbeefdeadbeef", "", author)
