"""Signal-aware writing of the document to a file or a descriptor."""

import errno
import os
import types
from pathlib import Path
from typing import IO, Optional, Type, Union

from dir2prompt.cli.signal_handler import signal_handler


class SafeWriter:
    """Writes text to a file path or an open descriptor, stopping on SIGPIPE or SIGINT.

    A path is opened (and truncated) when the writer is created and closed when it
    is closed; a descriptor is only borrowed and stays open.

    Attributes:
        target: The file path or descriptor written to.
        fd (int): The descriptor actually written to.
        encoding (str): Encoding applied to written text.

    Example:
        >>> with SafeWriter(Path("prompt.txt")) as writer:  # doctest: +SKIP
        ...     writer.write(document)
    """

    def __init__(self, target: Union[int, str, "os.PathLike[str]"], encoding: str = "utf-8") -> None:
        """Open the output.

        Args:
            target: A file descriptor, or a path to create or truncate.
            encoding: Encoding applied to written text. Defaults to "utf-8".

        Raises:
            TypeError: If target is neither a descriptor nor a path.
            OSError: If the path cannot be opened for writing.
        """
        self.target = target
        self.encoding = encoding
        self._closed = False
        self._file_obj: Optional[IO[bytes]] = None

        if isinstance(target, int):
            self.fd = target
        elif isinstance(target, (str, os.PathLike)):
            self._file_obj = Path(target).open("wb")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(target).__name__}")

    def write(self, data: str) -> None:
        """Write all of ``data``.

        Raises:
            BrokenPipeError: If SIGPIPE or SIGINT was received, or the pipe is closed.
            OSError: If another I/O error occurs.
            ValueError: If the writer is closed.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        payload = data.encode(self.encoding)
        while payload:
            if signal_handler.interrupted:
                raise BrokenPipeError()
            try:
                written = os.write(self.fd, payload)
            except OSError as e:
                if e.errno == errno.EPIPE:
                    raise BrokenPipeError() from e
                raise
            payload = payload[written:]

    def close(self) -> None:
        """Close the output if this writer opened it. Broken pipes on close are ignored."""
        if self._closed:
            return
        self._closed = True
        if self._file_obj is not None:
            try:
                self._file_obj.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # An exception from the with block takes precedence
            if exc_type is None:
                raise
