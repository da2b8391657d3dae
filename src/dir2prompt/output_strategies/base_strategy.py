"""Output strategy base class defining how prompt document segments are wrapped.

A prompt document has three ordered segments: the pruned tree diagram, the
contents of the selected files, and the user's request. Concrete strategies
decide which markers surround each segment and how text is escaped.
"""

from abc import ABC, abstractmethod


class OutputStrategy(ABC):
    """Abstract base class defining the interface for prompt document formatting.

    The renderer calls the methods in a fixed order, so a strategy may keep state
    between calls:

    1. ``format_start`` once
    2. ``format_tree`` once, with the complete tree diagram
    3. ``format_file`` once per selected file, in tree order
    4. ``format_request`` once, with the user's request
    5. ``format_end`` once

    The concatenation of the returned strings is the document.

    Example:
        >>> class MarkdownStrategy(OutputStrategy):
        ...     def format_start(self) -> str:
        ...         return ""
        ...
        ...     def format_tree(self, tree: str) -> str:
        ...         return "```\\n" + tree + "```\\n"
        ...
        ...     def format_file(self, path: str, content: str, is_placeholder: bool = False) -> str:
        ...         return f"## {path}\\n{content}\\n"
        ...
        ...     def format_request(self, request: str) -> str:
        ...         return request
        ...
        ...     def format_end(self) -> str:
        ...         return ""
    """

    @abstractmethod
    def format_start(self) -> str:
        """Format anything that precedes the tree segment."""
        pass

    @abstractmethod
    def format_tree(self, tree: str) -> str:
        """Wrap the pruned tree diagram.

        Args:
            tree: The diagram, one line per entry, each line ending with a newline.
                Empty when nothing is selected.
        """
        pass

    @abstractmethod
    def format_file(self, path: str, content: str, is_placeholder: bool = False) -> str:
        """Wrap one selected file.

        Args:
            path: The path shown for the file.
            content: The file's text, or the placeholder when it could not be rendered.
            is_placeholder: True when ``content`` is the placeholder.
        """
        pass

    @abstractmethod
    def format_request(self, request: str) -> str:
        """Wrap the user's request, which must be reproduced verbatim."""
        pass

    @abstractmethod
    def format_end(self) -> str:
        """Format anything that follows the request segment."""
        pass
