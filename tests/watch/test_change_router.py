"""Unit tests for the ChangeRouter class."""

import os

import pytest

from dir2prompt.file_system_tree.file_system_tree import FileSystemTree
from dir2prompt.types import ChangeKind
from dir2prompt.watch.change_event import ChangeEvent
from dir2prompt.watch.change_router import ChangeRouter


@pytest.fixture
def tree(project):
    return FileSystemTree(project)


def paths(rows):
    return [row.node.abs_path for row in rows]


def test_created_entry_in_expanded_directory_is_reloaded(tree, project):
    new_file = os.path.join(project, "c.txt")
    open(new_file, "w").close()

    result = ChangeRouter(tree).route(ChangeEvent(ChangeKind.CREATED, new_file))

    assert result.reloaded == [tree.root]
    assert result.errors == []
    assert tree.find_by_path(new_file) is not None


def test_event_in_collapsed_directory_is_ignored(tree, project):
    a = tree.find_by_path(os.path.join(project, "a"))
    tree.toggle_expand(a)
    tree.toggle_expand(a)
    before = paths(tree.flatten())
    new_file = os.path.join(project, "a", "z.txt")
    open(new_file, "w").close()

    result = ChangeRouter(tree).route(ChangeEvent(ChangeKind.CREATED, new_file))

    assert result.reloaded == []
    assert paths(tree.flatten()) == before
    assert tree.find_by_path(new_file) is None


def test_event_in_unloaded_directory_is_ignored(tree, project):
    result = ChangeRouter(tree).route(ChangeEvent(ChangeKind.CREATED, os.path.join(project, "a", "z.txt")))
    assert result.reloaded == []


def test_event_outside_tree_is_ignored(tree):
    result = ChangeRouter(tree).route(ChangeEvent(ChangeKind.CREATED, "/somewhere/else/file"))
    assert result.reloaded == []


@pytest.mark.parametrize("kind", [ChangeKind.MODIFIED, ChangeKind.ACCESSED])
def test_non_structural_events_are_ignored(tree, project, kind):
    open(os.path.join(project, "c.txt"), "w").close()
    result = ChangeRouter(tree).route(ChangeEvent(kind, os.path.join(project, "b.txt")))
    assert result.reloaded == []
    assert tree.find_by_path(os.path.join(project, "c.txt")) is None


def test_deleted_entry_disappears(tree, project):
    os.remove(os.path.join(project, "b.txt"))
    ChangeRouter(tree).route(ChangeEvent(ChangeKind.DELETED, os.path.join(project, "b.txt")))
    assert paths(tree.flatten()) == [os.path.join(project, "a")]


def test_move_reloads_source_and_destination(tree, project):
    a = tree.find_by_path(os.path.join(project, "a"))
    tree.toggle_expand(a)
    src = os.path.join(project, "b.txt")
    dest = os.path.join(project, "a", "b.txt")
    os.rename(src, dest)

    result = ChangeRouter(tree).route(ChangeEvent(ChangeKind.MOVED, src, dest))

    assert result.reloaded == [tree.root, a]
    assert tree.find_by_path(src) is None
    assert tree.find_by_path(dest) is not None


def test_event_for_file_path_itself_is_not_reloaded(tree, project):
    # The parent of /p/b.txt/inner would be a file node
    result = ChangeRouter(tree).route(ChangeEvent(ChangeKind.CREATED, os.path.join(project, "b.txt", "inner")))
    assert result.reloaded == []


def test_unreadable_directory_is_reported(tree, project):
    a = tree.find_by_path(os.path.join(project, "a"))
    tree.toggle_expand(a)
    children = a.children
    os.rename(os.path.join(project, "a"), os.path.join(project, "moved"))

    result = ChangeRouter(tree).route(ChangeEvent(ChangeKind.DELETED, os.path.join(project, "a", "x.txt")))

    assert result.reloaded == []
    assert len(result.errors) == 1
    assert "Cannot read directory" in result.errors[0]
    assert a.children == children
