"""JSON output strategy for prompt documents."""

import json

from .base_strategy import OutputStrategy


class JSONOutputStrategy(OutputStrategy):
    """Output strategy that renders the document as a single JSON object.

    The object has the following structure:
    {
        "file_tree": "├── a\\n│   └── x.txt\\n└── b.txt\\n",
        "files": [
            {"path": "/p/a/x.txt", "content": "hi", "binary": false},
            {"path": "/p/b.txt", "content": "[Binary file]", "binary": true}
        ],
        "user_request": "request text"
    }

    Because the pieces are emitted in order, the strategy tracks whether a file
    entry has already been written so that entries are comma-separated.

    Attributes:
        encoder: JSON encoder instance used for consistent escaping.

    Example:
        >>> strategy = JSONOutputStrategy()
        >>> parts = [
        ...     strategy.format_start(),
        ...     strategy.format_tree("└── b.txt\\n"),
        ...     strategy.format_file("/p/b.txt", "hi"),
        ...     strategy.format_request("why?"),
        ...     strategy.format_end(),
        ... ]
        >>> json.loads("".join(parts))["files"][0]["content"]
        'hi'
    """

    def __init__(self) -> None:
        self.encoder = json.JSONEncoder(ensure_ascii=False)
        self._files_written = 0

    def format_start(self) -> str:
        self._files_written = 0
        return "{"

    def format_tree(self, tree: str) -> str:
        return f'"file_tree": {self.encoder.encode(tree)}, "files": ['

    def format_file(self, path: str, content: str, is_placeholder: bool = False) -> str:
        entry = self.encoder.encode({"path": path, "content": content, "binary": is_placeholder})
        separator = ", " if self._files_written else ""
        self._files_written += 1
        return separator + entry

    def format_request(self, request: str) -> str:
        return f'], "user_request": {self.encoder.encode(request)}'

    def format_end(self) -> str:
        return "}"
