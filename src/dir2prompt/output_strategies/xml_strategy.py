"""Tag-delimited output strategy for prompt documents."""

from .base_strategy import OutputStrategy


class XMLOutputStrategy(OutputStrategy):
    """Output strategy that delimits each segment with XML-style tags.

    The document has this structure:

    <file_tree>
    ├── a
    │   └── x.txt
    └── b.txt
    </file_tree>
    <file>
    <file_path>/p/a/x.txt</file_path>
    <file_content>
    hi
    </file_content>
    </file>
    <user_request>
    request text
    </user_request>

    Content is not escaped: file contents and the request appear verbatim, which
    is what a language model reading the prompt expects.

    Example:
        >>> strategy = XMLOutputStrategy()
        >>> print(strategy.format_file("/p/b.txt", "hello"), end='')
        <file>
        <file_path>/p/b.txt</file_path>
        <file_content>
        hello
        </file_content>
        </file>
    """

    def format_start(self) -> str:
        return ""

    def format_tree(self, tree: str) -> str:
        """Wrap the tree diagram in <file_tree> tags.

        Example:
            >>> print(XMLOutputStrategy().format_tree("└── b.txt\\n"), end='')
            <file_tree>
            └── b.txt
            </file_tree>
        """
        return f"<file_tree>\n{tree}</file_tree>\n"

    def format_file(self, path: str, content: str, is_placeholder: bool = False) -> str:
        return f"<file>\n<file_path>{path}</file_path>\n<file_content>\n{content}\n</file_content>\n</file>\n"

    def format_request(self, request: str) -> str:
        """Wrap the request in <user_request> tags. The last segment has no trailing newline.

        Example:
            >>> XMLOutputStrategy().format_request("Explain this")
            '<user_request>\\nExplain this\\n</user_request>'
        """
        return f"<user_request>\n{request}\n</user_request>"

    def format_end(self) -> str:
        return ""
