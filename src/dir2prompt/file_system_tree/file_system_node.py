"""Node representation for file system entries in the browsable tree."""

import os
from typing import Any, Optional

from anytree import Node


class FileSystemNode(Node):  # type: ignore
    """Node class representing a file or directory in the browsable tree.

    Extends anytree.Node with the state needed for interactive browsing. The
    anytree ``name`` is the final path component; ``abs_path`` is the absolute
    canonical path and is unique within a tree.

    Attributes:
        name (str): The final component of the path.
        abs_path (str): Absolute canonical path of the entry. Not ``path``, which
            anytree reserves for the tuple of nodes from the root.
        parent (Optional[FileSystemNode]): The parent node in the tree.
        is_dir (bool): True if this node represents a directory. Fixed at creation.
        expanded (bool): Whether the children of a directory are shown.
        selected (bool): Whether the entry is part of the selection.
        children_loaded (bool): True once the directory's entries have been read,
            which distinguishes an unread directory from an empty one.

    Example:
        >>> root = FileSystemNode("/p", is_dir=True)
        >>> child = FileSystemNode("/p/b.txt", parent=root)
        >>> child.name
        'b.txt'
        >>> child.is_dir
        False
    """

    def __init__(
        self,
        path: str,
        parent: Optional["FileSystemNode"] = None,
        is_dir: bool = False,
        **kwargs: Any,
    ) -> None:
        """Initialize a FileSystemNode.

        Args:
            path: Absolute canonical path of the entry.
            parent: The parent node. Defaults to None.
            is_dir: Whether this node represents a directory. Defaults to False.
            **kwargs: Additional arguments passed to anytree.Node.
        """
        name = os.path.basename(os.path.normpath(path)) or path
        super().__init__(name, parent, **kwargs)
        self.abs_path = path
        self.is_dir = is_dir
        self.expanded = False
        self.selected = False
        self.children_loaded = False

    def set_selected(self, on: bool) -> None:
        """Set the selection flag on this node and every materialized descendant.

        Descendants are overwritten unconditionally. Ancestors are never touched,
        and entries read by a later load start out unselected.

        Example:
            >>> d = FileSystemNode("/p/a", is_dir=True)
            >>> f = FileSystemNode("/p/a/x.txt", parent=d)
            >>> d.set_selected(True)
            >>> f.selected
            True
        """
        self.selected = on
        if self.is_dir:
            for child in self.children:
                child.set_selected(on)
