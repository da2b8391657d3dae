"""Test configuration and fixtures for dir2prompt."""

import os

import pytest

from dir2prompt.exceptions import WatcherError
from dir2prompt.watch.base_watcher import BaseWatcher


class FakeWatcher(BaseWatcher):
    """In-memory watcher: records registrations and hands out queued notifications."""

    def __init__(self):
        self.watched = []
        self.unwatched = []
        self.pending = []
        self.refuse = set()
        self.started = False
        self.stopped = False

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def watch(self, path):
        if path in self.refuse:
            raise WatcherError(f"Cannot watch {path}: limit reached")
        if path not in self.watched:
            self.watched.append(path)

    def unwatch(self, path):
        self.unwatched.append(path)
        prefix = path + os.sep
        self.watched = [p for p in self.watched if p != path and not p.startswith(prefix)]

    def drain(self):
        items, self.pending = self.pending, []
        yield from items


@pytest.fixture
def fake_watcher():
    return FakeWatcher()


@pytest.fixture
def project(tmp_path):
    """Directory with a/x.txt ("hi"), a/y.txt, and b.txt.

    Returns the canonical path of the root as a string.
    """
    root = tmp_path / "p"
    root.mkdir()
    (root / "a").mkdir()
    (root / "a" / "x.txt").write_text("hi")
    (root / "a" / "y.txt").write_text("why")
    (root / "b.txt").write_text("bee\n")
    return os.path.realpath(root)
