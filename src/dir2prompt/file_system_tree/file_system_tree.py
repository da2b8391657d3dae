"""Browsable filesystem tree with lazy loading and selection.

This module provides the FileSystemTree class, which owns the in-memory mirror
of a directory hierarchy. Directories are read only when they are first
expanded or when a change notification invalidates them, and the expand and
selection state of the mirror is projected into a flat list for display.
"""

import os
from collections import namedtuple
from typing import Dict, Iterator, List, Optional

from dir2prompt.exceptions import DirectoryLoadError, WatcherError
from dir2prompt.exclusion_rules.base_rules import BaseExclusionRules
from dir2prompt.file_system_tree.file_system_node import FileSystemNode
from dir2prompt.types import PathType
from dir2prompt.watch.base_watcher import BaseWatcher

ViewRow = namedtuple("ViewRow", ["node", "depth"])


class FileSystemTree:
    """An in-memory mirror of a directory hierarchy that is loaded on demand.

    The root node is created from the given path, is always a directory, is always
    expanded, and is loaded immediately. Every other directory starts unloaded and
    is read the first time it is expanded. A directory whose entries change on
    disk is reloaded as a whole; there is no partial children state.

    Reload State Policy:
        With ``preserve_state`` enabled (default), a reload matches the fresh listing
        against the previous children by path and keeps the previous node, with its
        expand and selection state and its loaded subtree, for every entry that still
        exists with the same type. Entries that appear for the first time start
        collapsed and unselected. With ``preserve_state`` disabled the previous
        children are discarded and every entry is recreated.

    Error Handling:
        A directory that cannot be read is left untouched and DirectoryLoadError is
        raised to the caller. Failures that happen while building the root or while
        registering subdirectories for change notification are recorded in
        ``errors`` instead, so the tree stays usable.

    Attributes:
        root_path (str): Absolute canonical path of the root directory.
        root (FileSystemNode): The root node.
        exclusion_rules (Optional[BaseExclusionRules]): Rules hiding entries.
        watcher (Optional[BaseWatcher]): Where newly discovered directories are registered.
        preserve_state (bool): Whether reloads carry node state forward.
        errors (List[str]): Non-fatal problems recorded while loading.

    Example:
        >>> tree = FileSystemTree("/p")  # doctest: +SKIP
        >>> [row.node.name for row in tree.flatten()]  # doctest: +SKIP
        ['a', 'b.txt']
    """

    def __init__(
        self,
        root_path: PathType,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        watcher: Optional[BaseWatcher] = None,
        preserve_state: bool = True,
    ) -> None:
        """Create the root node and read its entries.

        Args:
            root_path: Path of the directory to browse. Can be any path-like object.
            exclusion_rules: Rules for hiding entries. Defaults to None.
            watcher: Watcher that newly discovered directories are registered with.
                Defaults to None, which disables change notification.
            preserve_state: Whether reloads keep expand and selection state for
                surviving entries. Defaults to True.
        """
        self.root_path = os.path.realpath(os.fspath(root_path))
        self.exclusion_rules = exclusion_rules
        self.watcher = watcher
        self.preserve_state = preserve_state
        self.errors: List[str] = []

        self.root = FileSystemNode(self.root_path, is_dir=True)
        self.root.expanded = True

        if not os.path.isdir(self.root_path):
            self.errors.append(f"Root path is not a readable directory: {self.root_path}")
            return

        self._register(self.root_path)
        try:
            self.load(self.root)
        except DirectoryLoadError as e:
            self.errors.append(str(e))

    def find_by_path(self, path: PathType) -> Optional[FileSystemNode]:
        """Find the node for a path among the materialized nodes.

        The search is depth-first and only descends into loaded directories, so a
        path inside a directory that has never been read is not found.

        Args:
            path: Absolute path to look up.

        Returns:
            The matching node, or None if it is not materialized.

        Example:
            >>> tree = FileSystemTree("/p")  # doctest: +SKIP
            >>> tree.find_by_path("/p/a").is_dir  # doctest: +SKIP
            True
        """
        target = os.path.normpath(os.fspath(path))

        def search(node: FileSystemNode) -> Optional[FileSystemNode]:
            if node.abs_path == target:
                return node
            if node.children_loaded:
                for child in node.children:
                    found = search(child)
                    if found is not None:
                        return found
            return None

        return search(self.root)

    def load(self, node: FileSystemNode) -> None:
        """Read a directory's entries and replace its children with them.

        On success ``children_loaded`` becomes True and every subdirectory is
        registered with the watcher. Directories that are gone, or are no longer
        directories, are unregistered together with everything below them.

        Args:
            node: The directory node to load.

        Raises:
            ValueError: If the node is not a directory.
            DirectoryLoadError: If the directory cannot be read. The node keeps its
                previous children and flags.
        """
        if not node.is_dir:
            raise ValueError(f"Cannot load children of a file: {node.abs_path}")

        try:
            with os.scandir(node.abs_path) as entries:
                listing = []
                for entry in entries:
                    try:
                        is_dir = entry.is_dir(follow_symlinks=False)
                    except OSError:
                        is_dir = False
                    listing.append((entry.name, is_dir))
        except OSError as e:
            raise DirectoryLoadError(node.abs_path, e.strerror or str(e)) from e

        previous: Dict[str, FileSystemNode] = {}
        if self.preserve_state:
            previous = {child.abs_path: child for child in node.children}

        children = []
        for name, is_dir in sorted(listing):
            child_path = os.path.join(node.abs_path, name)
            if self._is_excluded(child_path, is_dir):
                continue
            kept = previous.get(child_path)
            if kept is not None and kept.is_dir == is_dir:
                children.append(kept)
                continue
            children.append(FileSystemNode(child_path, is_dir=is_dir))

        directories = {child.abs_path for child in children if child.is_dir}
        vanished = [
            child.abs_path
            for child in node.children
            if child.is_dir and child.abs_path not in directories
        ]

        node.children = children
        node.children_loaded = True

        for directory in vanished:
            self._unregister(directory)
        for child in children:
            if child.is_dir:
                self._register(child.abs_path)

    def reload(self, node: FileSystemNode) -> None:
        """Reload an already-loaded directory to reflect the current disk state.

        Raises:
            DirectoryLoadError: If the directory cannot be read.
        """
        self.load(node)

    def toggle_expand(self, node: FileSystemNode) -> None:
        """Flip the expanded flag of a directory, loading it on first expansion.

        Files are ignored. The root always stays expanded.

        Raises:
            DirectoryLoadError: If the directory is being expanded for the first time
                and cannot be read. The directory stays collapsed.
        """
        if not node.is_dir or node is self.root:
            return
        if not node.expanded and not node.children_loaded:
            self.load(node)
        node.expanded = not node.expanded

    def set_selected(self, node: FileSystemNode, on: bool) -> None:
        """Select or deselect a node and cascade the change to its materialized descendants.

        The root itself is never selectable; applying a selection to it cascades to
        its children only.
        """
        if node is self.root:
            for child in node.children:
                child.set_selected(on)
            return
        node.set_selected(on)

    def toggle_select(self, node: FileSystemNode) -> None:
        """Invert the selection of a node, cascading the new value to its descendants."""
        self.set_selected(node, not node.selected)

    def flatten(self) -> List[ViewRow]:
        """Project the expand state of the tree into an ordered list of rows.

        The walk is depth-first and pre-order, starts with the root's children at
        depth 0, and only descends into expanded directories. A collapsed directory
        contributes exactly one row. Selection is not part of the rows; it is read
        from the nodes when they are displayed.

        Returns:
            One ViewRow per visible entry.
        """
        rows: List[ViewRow] = []

        def visit(node: FileSystemNode, depth: int) -> None:
            rows.append(ViewRow(node, depth))
            if node.expanded:
                for child in node.children:
                    visit(child, depth + 1)

        for child in self.root.children:
            visit(child, 0)
        return rows

    def has_selected(self, node: FileSystemNode) -> bool:
        """Report whether a node or any of its materialized descendants is selected."""
        if node.selected and node is not self.root:
            return True
        return any(self.has_selected(child) for child in node.children)

    def iter_selected_files(self) -> Iterator[FileSystemNode]:
        """Yield selected files in depth-first order over the materialized tree."""

        def visit(node: FileSystemNode) -> Iterator[FileSystemNode]:
            if node.selected and not node.is_dir:
                yield node
            for child in node.children:
                yield from visit(child)

        for child in self.root.children:
            yield from visit(child)

    def relative_path(self, node: FileSystemNode) -> str:
        """Return a node's path relative to the root, using forward slashes."""
        return os.path.relpath(node.abs_path, self.root_path).replace(os.sep, "/")

    def _is_excluded(self, path: str, is_dir: bool) -> bool:
        if self.exclusion_rules is None:
            return False
        relative = os.path.relpath(path, self.root_path).replace(os.sep, "/")
        if is_dir:
            relative += "/"
        return self.exclusion_rules.exclude(relative)

    def _register(self, path: str) -> None:
        if self.watcher is None:
            return
        try:
            self.watcher.watch(path)
        except WatcherError as e:
            # Refused directories are retried on every load
            if str(e) not in self.errors:
                self.errors.append(str(e))

    def _unregister(self, path: str) -> None:
        if self.watcher is not None:
            self.watcher.unwatch(path)
