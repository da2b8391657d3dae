"""Clipboard delivery of the finished document."""

import pyperclip

from dir2prompt.exceptions import ClipboardUnavailableError


def copy_to_clipboard(text: str) -> None:
    """Copy text to the system clipboard.

    Raises:
        ClipboardUnavailableError: If no clipboard mechanism is available.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardUnavailableError(str(e)) from e
