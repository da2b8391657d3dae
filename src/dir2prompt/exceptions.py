class DirectoryLoadError(Exception):
    """
    Exception raised when a directory's entries cannot be read.

    The node that was being loaded is left exactly as it was before the attempt.
    Callers record the error and carry on; it is never fatal to a session.

    Attributes:
        path (str): Path of the directory that could not be read.
        reason (str): Description of the underlying failure.

    Example:
        >>> error = DirectoryLoadError("/srv/private", "Permission denied")
        >>> str(error)
        'Cannot read directory /srv/private: Permission denied'
    """

    def __init__(self, path: str, reason: str) -> None:
        """
        Initialize the exception with the directory path and failure reason.

        Args:
            path (str): Path of the directory that could not be read.
            reason (str): Description of the underlying failure.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read directory {path}: {reason}")


class WatcherError(Exception):
    """
    Exception describing a failure of the change-notification mechanism itself.

    These are surfaced to the user but listening continues afterwards.

    Example:
        >>> error = WatcherError("observer thread stopped")
        >>> str(error)
        'observer thread stopped'
    """

    pass


class WatcherStartError(WatcherError):
    """
    Exception raised when the change-notification mechanism cannot be started.

    Unlike other watcher failures this one prevents a session from starting.

    Example:
        >>> error = WatcherStartError("inotify instance limit reached")
        >>> str(error)
        'Cannot start filesystem watcher: inotify instance limit reached'
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Cannot start filesystem watcher: {reason}")


class TokenizerNotAvailableError(Exception):
    """
    Exception raised when attempting to use token counting functionality without the required tokenizer package.

    The tiktoken package is an optional dependency that must be explicitly installed
    using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        self.message = (
            f"{message} To enable token counting, install dir2prompt with the 'token_counting' "
            "extra: 'pip install dir2prompt[token_counting]' or 'poetry install --extras token_counting'."
        )
        super().__init__(self.message)


class TokenizationError(Exception):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass


class ClipboardUnavailableError(Exception):
    """
    Exception raised when the document cannot be copied to the system clipboard.

    Usually means no clipboard mechanism (xclip, xsel, wl-copy, pbcopy) is present.

    Example:
        >>> error = ClipboardUnavailableError("no copy mechanism found")
        >>> str(error)
        'Clipboard is not available: no copy mechanism found'
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Clipboard is not available: {reason}")
