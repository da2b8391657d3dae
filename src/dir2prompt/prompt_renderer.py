"""Prompt document rendering for a tree selection.

This module turns the selection held by a FileSystemTree into the final prompt
document: a pruned tree diagram of the selected entries, the contents of every
selected file, and the user's request.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

from .file_system_tree.binary_detector import BINARY_PLACEHOLDER, is_binary_content
from .file_system_tree.file_system_node import FileSystemNode
from .file_system_tree.file_system_tree import FileSystemTree
from .output_strategies.base_strategy import OutputStrategy
from .output_strategies.json_strategy import JSONOutputStrategy
from .output_strategies.xml_strategy import XMLOutputStrategy


@dataclass(frozen=True)
class FileIssue:
    """A selected file whose content was replaced by the placeholder.

    Attributes:
        path: The path shown for the file in the document.
        reason: Why the content could not be included.
    """

    path: str
    reason: str


class PromptRenderer:
    """Renders the selection of a tree into a prompt document.

    Rendering reads the tree but never changes it. Problems with individual files
    never abort a render: a file that cannot be read, contains a null byte, or
    cannot be decoded is rendered with a placeholder and recorded in ``issues``.

    Attributes:
        output_strategy (OutputStrategy): Strategy wrapping the document segments.
        encoding (str): The encoding used to decode file contents.
        errors (str): How decode errors are handled.
        relative_paths (bool): Whether file paths are shown relative to the root.
        issues (List[FileIssue]): Files replaced by the placeholder during the last render.

    Example:
        >>> tree = FileSystemTree("/p")  # doctest: +SKIP
        >>> tree.set_selected(tree.find_by_path("/p/b.txt"), True)  # doctest: +SKIP
        >>> print(PromptRenderer().render(tree, "Summarize"))  # doctest: +SKIP
        <file_tree>
        └── b.txt
        </file_tree>
        <file>
        <file_path>/p/b.txt</file_path>
        <file_content>
        ...
        </file_content>
        </file>
        <user_request>
        Summarize
        </user_request>
    """

    def __init__(
        self,
        output_format: Union[str, OutputStrategy] = "xml",
        encoding: str = "utf-8",
        errors: str = "replace",
        relative_paths: bool = False,
    ) -> None:
        """Initialize the PromptRenderer.

        Args:
            output_format: Either a string specifying the format ("xml" or "json")
                or an OutputStrategy instance. Defaults to "xml".
            encoding: The encoding used to decode file contents. Defaults to "utf-8".
            errors: How to handle decode errors. Must be one of "strict" (the file is
                rendered as the placeholder), "ignore", or "replace". Defaults to "replace",
                which keeps the content of text files in another encoding readable.
            relative_paths: Show file paths relative to the tree root instead of as
                absolute paths. Defaults to False.

        Raises:
            ValueError: If output_format string is not "xml" or "json", or if errors
                is not one of "strict", "ignore", or "replace".
            TypeError: If output_format is neither a string nor an OutputStrategy.
            LookupError: If the specified encoding is not available.
        """
        if errors not in ("strict", "ignore", "replace"):
            raise ValueError(f"Invalid error handler '{errors}'. Must be one of: strict, ignore, replace")

        # Validate encoding early to fail fast
        try:
            "test".encode(encoding).decode(encoding)
        except LookupError as e:
            raise LookupError(f"Encoding '{encoding}' is not available") from e

        self.encoding = encoding
        self.errors = errors
        self.relative_paths = relative_paths
        self.issues: List[FileIssue] = []

        if isinstance(output_format, str):
            output_format = output_format.lower()
            if output_format == "xml":
                self.output_strategy: OutputStrategy = XMLOutputStrategy()
            elif output_format == "json":
                self.output_strategy = JSONOutputStrategy()
            else:
                raise ValueError(f"Unsupported output format: {output_format}. Must be one of: xml, json")
        elif isinstance(output_format, OutputStrategy):
            self.output_strategy = output_format
        else:
            raise TypeError("output_format must be either a string ('xml' or 'json') or an OutputStrategy instance")

    def stream_tree(self, tree: FileSystemTree) -> Iterator[str]:
        """Generate the pruned tree diagram one line at a time.

        Only entries that are selected, or that have a selected descendant, are
        drawn. The root is not drawn; its visible children start at column zero.
        Each line ends with a newline.

        Yields:
            Lines of the diagram, including the connecting glyphs.

        Example:
            >>> for line in PromptRenderer().stream_tree(tree):  # doctest: +SKIP
            ...     print(line, end='')
            ├── a
            │   └── x.txt
            └── b.txt
        """

        def write_node(node: FileSystemNode, prefix: str, is_last: bool) -> Iterator[str]:
            connector = "└── " if is_last else "├── "
            yield f"{prefix}{connector}{node.name}\n"
            child_prefix = prefix + ("    " if is_last else "│   ")
            yield from write_children(node, child_prefix)

        def write_children(node: FileSystemNode, prefix: str) -> Iterator[str]:
            shown = [child for child in node.children if tree.has_selected(child)]
            for i, child in enumerate(shown):
                yield from write_node(child, prefix, i == len(shown) - 1)

        yield from write_children(tree.root, "")

    def get_tree_representation(self, tree: FileSystemTree) -> str:
        """Return the complete pruned tree diagram as a string."""
        return "".join(self.stream_tree(tree))

    def read_file(self, node: FileSystemNode, shown_path: str) -> Tuple[str, bool]:
        """Read a selected file for inclusion in the document.

        Args:
            node: The selected file.
            shown_path: The path under which problems are recorded.

        Returns:
            A pair of (content, is_placeholder). When the file cannot be read, holds
            a null byte, or cannot be decoded, the content is the placeholder and the
            problem is recorded in ``issues``.
        """
        try:
            with open(node.abs_path, "rb") as file:
                data = file.read()
        except OSError as e:
            self.issues.append(FileIssue(shown_path, f"cannot read file: {e.strerror or e}"))
            return BINARY_PLACEHOLDER, True

        if is_binary_content(data):
            self.issues.append(FileIssue(shown_path, "binary content"))
            return BINARY_PLACEHOLDER, True

        try:
            return data.decode(self.encoding, errors=self.errors), False
        except UnicodeDecodeError as e:
            self.issues.append(FileIssue(shown_path, f"cannot decode as {self.encoding}: {e.reason}"))
            return BINARY_PLACEHOLDER, True

    def stream_document(self, tree: FileSystemTree, request: str) -> Iterator[str]:
        """Generate the document piece by piece.

        Args:
            tree: The tree whose selection is rendered.
            request: The user's request, reproduced verbatim.

        Yields:
            Consecutive pieces of the document.
        """
        self.issues = []
        strategy = self.output_strategy
        yield strategy.format_start()
        yield strategy.format_tree(self.get_tree_representation(tree))
        for node in tree.iter_selected_files():
            shown_path = self._shown_path(tree, node)
            content, is_placeholder = self.read_file(node, shown_path)
            yield strategy.format_file(shown_path, content, is_placeholder)
        yield strategy.format_request(request)
        yield strategy.format_end()

    def render(self, tree: FileSystemTree, request: str) -> str:
        """Render the complete document for the current selection.

        Args:
            tree: The tree whose selection is rendered.
            request: The user's request, reproduced verbatim.

        Returns:
            The prompt document.
        """
        return "".join(self.stream_document(tree, request))

    def _shown_path(self, tree: FileSystemTree, node: FileSystemNode) -> str:
        if self.relative_paths:
            return tree.relative_path(node)
        return node.abs_path
