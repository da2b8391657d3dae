"""Routing of change notifications to the directories they invalidate."""

from collections import namedtuple

from dir2prompt.exceptions import DirectoryLoadError
from dir2prompt.file_system_tree.file_system_tree import FileSystemTree
from dir2prompt.watch.change_event import ChangeEvent

RouteResult = namedtuple("RouteResult", ["reloaded", "errors"])


class ChangeRouter:
    """Maps change notifications onto the tree and reloads affected directories.

    A notification is applied to the directory containing the changed entry (and,
    for moves, the directory containing the destination). A directory is reloaded
    only when it is materialized, expanded, and the change can add or remove
    entries. Everything else is ignored: nobody is looking at that state, and
    pure content writes leave the listing as it is.

    Attributes:
        tree (FileSystemTree): The tree that notifications are applied to.

    Example:
        >>> router = ChangeRouter(tree)  # doctest: +SKIP
        >>> result = router.route(ChangeEvent(ChangeKind.CREATED, "/p/a/new.txt"))  # doctest: +SKIP
        >>> [node.abs_path for node in result.reloaded]  # doctest: +SKIP
        ['/p/a']
    """

    def __init__(self, tree: FileSystemTree) -> None:
        self.tree = tree

    def route(self, event: ChangeEvent) -> RouteResult:
        """Apply one notification to the tree.

        Args:
            event: The change notification.

        Returns:
            RouteResult: Named tuple containing:
                - reloaded: Directories that were reloaded, in order. Empty when the
                  visible tree is unchanged.
                - errors: Messages for directories that could not be re-read.
        """
        reloaded = []
        errors = []
        if not event.kind.is_structural:
            return RouteResult(reloaded, errors)

        for directory in event.affected_directories():
            node = self.tree.find_by_path(directory)
            if node is None or not node.is_dir or not node.expanded:
                continue
            try:
                self.tree.reload(node)
            except DirectoryLoadError as e:
                errors.append(str(e))
                continue
            reloaded.append(node)
        return RouteResult(reloaded, errors)
