"""Directory watcher backed by watchdog.

The watchdog observer runs on its own thread and only ever puts ChangeEvent
objects on a queue. The app drains that queue on its own loop, so the tree is never
touched from the observer thread.
"""

import contextlib
import os
import queue
from typing import Any, Callable, Dict, Iterator, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from dir2prompt.exceptions import WatcherError, WatcherStartError
from dir2prompt.types import ChangeKind
from dir2prompt.watch.base_watcher import BaseWatcher, Notification
from dir2prompt.watch.change_event import ChangeEvent

# watchdog event_type values mapped to the kinds the router understands
EVENT_KINDS = {
    "created": ChangeKind.CREATED,
    "deleted": ChangeKind.DELETED,
    "moved": ChangeKind.MOVED,
    "modified": ChangeKind.MODIFIED,
    "opened": ChangeKind.ACCESSED,
    "closed": ChangeKind.ACCESSED,
    "closed_no_write": ChangeKind.ACCESSED,
}


def _decode(path: Any) -> str:
    if isinstance(path, bytes):
        return os.fsdecode(path)
    return str(path)


def to_change_event(event: FileSystemEvent) -> ChangeEvent:
    """Convert a watchdog event into a ChangeEvent.

    Unknown event types are treated as created so that the containing directory
    is re-read rather than silently left stale. Modifications of directories are
    reported as MODIFIED; the entry events they accompany carry the real change.

    Example:
        >>> from watchdog.events import FileMovedEvent
        >>> to_change_event(FileMovedEvent("/p/a.txt", "/p/b.txt")).kind
        <ChangeKind.MOVED: 'moved'>
    """
    kind = EVENT_KINDS.get(event.event_type, ChangeKind.CREATED)
    dest_path: Optional[str] = None
    if kind is ChangeKind.MOVED:
        dest_path = _decode(event.dest_path)
    return ChangeEvent(kind, _decode(event.src_path), dest_path)


class _QueueingHandler(FileSystemEventHandler):  # type: ignore
    """Forwards every watchdog event to a queue as a ChangeEvent."""

    def __init__(self, events: "queue.Queue[Notification]") -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._events.put(to_change_event(event))


class DirectoryWatcher(BaseWatcher):
    """Watches individual directories (non-recursively) with a watchdog observer.

    Each registered directory is scheduled once until it is unwatched, which
    happens when it is reported deleted or moved. If the observer thread dies, the
    next ``drain`` reports a WatcherError, starts a fresh observer, and schedules
    every registered directory again, so listening resumes.

    Attributes:
        watched (List[str]): Directories registered so far, in registration order.

    Example:
        >>> watcher = DirectoryWatcher()  # doctest: +SKIP
        >>> watcher.start()  # doctest: +SKIP
        >>> watcher.watch("/p")  # doctest: +SKIP
        >>> for notification in watcher.drain():  # doctest: +SKIP
        ...     print(notification)
        >>> watcher.stop()  # doctest: +SKIP
    """

    def __init__(self, observer_factory: Callable[[], Any] = Observer) -> None:
        """Initialize the watcher.

        Args:
            observer_factory: Callable creating a watchdog observer. Defaults to the
                platform's native Observer.
        """
        self._observer_factory = observer_factory
        self._events: "queue.Queue[Notification]" = queue.Queue()
        self._handler = _QueueingHandler(self._events)
        self._observer: Optional[Any] = None
        self._watches: Dict[str, Any] = {}
        self.watched: List[str] = []

    def start(self) -> None:
        """Start the observer thread.

        Raises:
            WatcherStartError: If the observer cannot be created or started.
        """
        try:
            self._observer = self._observer_factory()
            self._observer.start()
        except (OSError, RuntimeError) as e:
            self._observer = None
            raise WatcherStartError(str(e)) from e

    def watch(self, path: str) -> None:
        """Schedule a directory for non-recursive notification.

        Raises:
            WatcherError: If the observer has not been started or the directory
                cannot be scheduled (for example when the system watch limit is hit).
        """
        if path in self._watches:
            return
        if self._observer is None:
            raise WatcherError(f"Cannot watch {path}: watcher is not running")
        try:
            self._watches[path] = self._observer.schedule(self._handler, path, recursive=False)
        except OSError as e:
            raise WatcherError(f"Cannot watch {path}: {e.strerror or e}") from e
        self.watched.append(path)

    def unwatch(self, path: str) -> None:
        """Unschedule a directory and every registered directory below it."""
        prefix = path.rstrip(os.sep) + os.sep
        for registered in [p for p in self._watches if p == path or p.startswith(prefix)]:
            watch = self._watches.pop(registered)
            self.watched.remove(registered)
            if self._observer is not None:
                # The emitter may already be gone after the directory was deleted
                with contextlib.suppress(KeyError):
                    self._observer.unschedule(watch)

    def drain(self) -> Iterator[Notification]:
        """Yield pending notifications one at a time without blocking.

        A registered directory that is reported deleted or moved away is unwatched
        before its notification is yielded, so the reload that follows registers
        whatever now exists at that path.
        """
        if self._observer is not None and not self._observer.is_alive():
            yield WatcherError("Filesystem watcher stopped unexpectedly; restarting")
            restart_error = self._restart()
            if restart_error is not None:
                yield restart_error

        # Events arriving while these are handled wait for the next drain
        for _ in range(self._events.qsize()):
            try:
                notification = self._events.get_nowait()
            except queue.Empty:
                return
            if isinstance(notification, ChangeEvent) and notification.kind in (
                ChangeKind.DELETED,
                ChangeKind.MOVED,
            ):
                self.unwatch(notification.path)
            yield notification

    def stop(self) -> None:
        """Stop the observer and release every registered watch."""
        if self._observer is None:
            return
        self._observer.unschedule_all()
        self._observer.stop()
        self._observer.join()
        self._observer = None
        self._watches.clear()

    def _restart(self) -> Optional[WatcherError]:
        paths = list(self._watches)
        self._watches.clear()
        self.watched = []
        try:
            self.start()
        except WatcherStartError as e:
            return e
        failures = []
        for path in paths:
            try:
                self.watch(path)
            except WatcherError as e:
                failures.append(str(e))
        if failures:
            return WatcherError("; ".join(failures))
        return None
