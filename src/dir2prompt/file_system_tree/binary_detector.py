"""Binary content detection for selected files."""

# Substituted for file content that cannot be rendered as text
BINARY_PLACEHOLDER = "[Binary file]"


def is_binary_content(data: bytes) -> bool:
    """Detect whether raw file bytes are unsuitable for a text document.

    A null byte anywhere in the content marks it as binary. Empty content is text.

    Args:
        data: The complete content of a file.

    Returns:
        True if the content should be replaced by a placeholder.

    Example:
        >>> is_binary_content(b"hello\\n")
        False
        >>> is_binary_content(b"PK\\x03\\x04\\x00\\x00")
        True
    """
    return b"\0" in data
