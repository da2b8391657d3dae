from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class ChangeKind(Enum):
    """Kinds of filesystem change notifications consumed by the tree.

    Only kinds that can add or remove directory entries cause a reload.

    Attributes:
        CREATED: An entry was created.
        DELETED: An entry was removed.
        MOVED: An entry was renamed or moved; both ends are affected.
        MODIFIED: Content or metadata of an existing entry was written.
        ACCESSED: An entry was opened or closed without changing the listing.
    """

    CREATED = "created"
    DELETED = "deleted"
    MOVED = "moved"
    MODIFIED = "modified"
    ACCESSED = "accessed"

    @property
    def is_structural(self) -> bool:
        """Whether this kind can change the entries of the containing directory."""
        return self in (ChangeKind.CREATED, ChangeKind.DELETED, ChangeKind.MOVED)
