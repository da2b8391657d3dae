"""Change events delivered from the notification source to the event loop."""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dir2prompt.types import ChangeKind


@dataclass(frozen=True)
class ChangeEvent:
    """A single filesystem change notification.

    Attributes:
        kind: What happened to the entry.
        path: Absolute path of the entry that changed.
        dest_path: New path of a moved entry, None for other kinds.

    Example:
        >>> event = ChangeEvent(ChangeKind.MOVED, "/p/a/old.txt", "/p/b/new.txt")
        >>> event.affected_directories()
        ('/p/a', '/p/b')
    """

    kind: ChangeKind
    path: str
    dest_path: Optional[str] = None

    def affected_directories(self) -> Tuple[str, ...]:
        """Return the directories whose listings this change can alter, without duplicates."""
        directories = [os.path.dirname(os.path.normpath(self.path))]
        if self.dest_path is not None:
            dest_dir = os.path.dirname(os.path.normpath(self.dest_path))
            if dest_dir not in directories:
                directories.append(dest_dir)
        return tuple(directories)
