"""Statistics for a rendered prompt document.

Lines and characters are always counted. Tokens are counted with OpenAI's
tiktoken library when it is installed and a model is named, which gives a
useful estimate of how much of a model's context window the prompt uses.
"""

import importlib.util
from collections import namedtuple
from typing import Any, Optional

from dir2prompt.exceptions import TokenizationError, TokenizerNotAvailableError

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])


class TokenCounter:
    """Counter for tokens, lines, and characters in text content.

    Attributes:
        model (Optional[str]): Name of the model whose tokenizer to use, or None if token counting is disabled.
        tiktoken_available (bool): Whether the tiktoken library is available.
        encoder (Optional[Any]): The tiktoken encoder if a model is in use, else None.

    Example:
        >>> counter = TokenCounter()
        >>> result = counter.count("Hello\\nworld!")
        >>> result.lines, result.characters
        (1, 12)
        >>> print(result.tokens)
        None

    Raises:
        ValueError: If the specified model's tokenizer cannot be loaded.
        TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
    """

    def __init__(self, model: Optional[str] = None):
        """Initialize the counter.

        Args:
            model: The model whose tokenizer to use (e.g. "gpt-4"), or None to count
                only lines and characters.
        """
        self.model = model
        self.tiktoken_available = importlib.util.find_spec("tiktoken") is not None
        self.encoder: Optional[Any] = None

        if self.model is not None:
            if not self.tiktoken_available:
                raise TokenizerNotAvailableError()
            self.encoder = self._get_encoder(self.model)

        self._total_tokens: Optional[int] = None if self.encoder is None else 0
        self._total_lines = 0
        self._total_characters = 0

    @staticmethod
    def _get_encoder(model: str) -> Any:
        # Imported here so the package works without the optional dependency
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Consider using a "
                "well-supported model like 'gpt-4' (cl100k_base encoding) for an approximate count."
            )

    def count(self, text: str) -> CountResult:
        """Count lines, tokens, and characters in text and add them to the running totals.

        Returns:
            CountResult: lines (newline count), tokens (None when token counting is
                disabled), and characters.

        Raises:
            TokenizationError: If token counting is enabled but fails.
        """
        lines = text.count("\n")
        chars = len(text)
        tokens = None

        self._total_lines += lines
        self._total_characters += chars

        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {str(e)}")
            self._total_tokens = (self._total_tokens or 0) + tokens

        return CountResult(lines=lines, tokens=tokens, characters=chars)

    def get_total_tokens(self) -> Optional[int]:
        """Total tokens counted so far, or None if token counting is disabled."""
        return self._total_tokens

    def get_total_lines(self) -> int:
        return self._total_lines

    def get_total_characters(self) -> int:
        return self._total_characters
