"""Watcher base class defining how the tree registers directories for notification."""

from abc import ABC, abstractmethod
from typing import Iterator, Union

from dir2prompt.exceptions import WatcherError
from dir2prompt.watch.change_event import ChangeEvent

Notification = Union[ChangeEvent, WatcherError]


class BaseWatcher(ABC):
    """Abstract source of directory-level change notifications.

    The directory loader calls ``watch`` for every directory it discovers, and the
    event loop calls ``drain`` to consume pending notifications one at a time.
    Registrations accumulate until the directory disappears (``unwatch``) and are
    released together by ``stop``.
    """

    @abstractmethod
    def watch(self, path: str) -> None:
        """Register a directory so that changes to its entries are reported.

        Registering the same directory twice has no further effect.

        Raises:
            WatcherError: If the directory cannot be registered.
        """
        pass

    @abstractmethod
    def unwatch(self, path: str) -> None:
        """Release the registration of a directory and of every directory below it.

        Used when a directory disappears, so that a directory later created at the
        same path is registered afresh. Unknown paths are ignored.
        """
        pass

    @abstractmethod
    def drain(self) -> Iterator[Notification]:
        """Yield pending notifications without blocking.

        Items are either ChangeEvent instances or WatcherError instances describing
        a failure of the notification mechanism. Listening continues after errors.
        """
        pass

    def start(self) -> None:
        """Begin delivering notifications. The default implementation does nothing."""

    def stop(self) -> None:
        """Release every registration. The default implementation does nothing."""
