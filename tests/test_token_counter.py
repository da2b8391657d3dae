from unittest.mock import MagicMock, patch

import pytest

from dir2prompt.exceptions import TokenizationError, TokenizerNotAvailableError
from dir2prompt.token_counter import CountResult, TokenCounter


@pytest.fixture
def mock_tiktoken_available():
    with patch("importlib.util.find_spec", return_value=True):
        yield


@pytest.fixture
def mock_tiktoken_unavailable():
    with patch("importlib.util.find_spec", return_value=None):
        yield


@pytest.fixture
def mock_encoder(mock_tiktoken_available):
    encoder = MagicMock()
    encoder.encode.side_effect = lambda text: [0] * len(text)  # One token per character
    with patch.object(TokenCounter, "_get_encoder", return_value=encoder):
        yield encoder


def test_token_counter_initialization(mock_encoder):
    counter = TokenCounter(model="gpt-4")
    assert counter.tiktoken_available
    assert counter.encoder is mock_encoder

    counter_no_model = TokenCounter()
    assert counter_no_model.tiktoken_available
    assert counter_no_model.encoder is None


def test_token_counter_initialization_tiktoken_unavailable(mock_tiktoken_unavailable):
    counter = TokenCounter()
    assert not counter.tiktoken_available
    assert counter.encoder is None

    with pytest.raises(TokenizerNotAvailableError):
        TokenCounter(model="gpt-4")


def test_count(mock_encoder):
    counter = TokenCounter(model="gpt-4")
    result = counter.count("Hello, world!")
    assert isinstance(result, CountResult)
    assert result == CountResult(lines=0, tokens=13, characters=13)
    assert counter.get_total_tokens() == 13

    counter_no_model = TokenCounter()
    result = counter_no_model.count("Hello, world!")
    assert result.tokens is None
    assert counter_no_model.get_total_tokens() is None
    assert counter_no_model.get_total_characters() == 13


def test_totals_accumulate(mock_encoder):
    counter = TokenCounter(model="gpt-4")
    counter.count("Hello\n")
    counter.count("world\n!")
    assert counter.get_total_tokens() == 13
    assert counter.get_total_lines() == 2
    assert counter.get_total_characters() == 13


def test_count_empty_string(mock_encoder):
    counter = TokenCounter(model="gpt-4")
    assert counter.count("") == CountResult(lines=0, tokens=0, characters=0)
    assert counter.get_total_tokens() == 0


def test_count_unicode(mock_encoder):
    counter = TokenCounter(model="gpt-4")
    text = "Hello 世界! 🌍"
    result = counter.count(text)
    assert result.tokens == len(text)
    assert result.characters == len(text)


def test_tokenization_error(mock_encoder):
    mock_encoder.encode.side_effect = Exception("Tokenization failed")
    counter = TokenCounter(model="gpt-4")
    with pytest.raises(TokenizationError):
        counter.count("Hello, world!")


def test_unknown_model():
    tiktoken = pytest.importorskip("tiktoken")
    with patch.object(tiktoken, "encoding_for_model", side_effect=KeyError("nope")):
        with pytest.raises(ValueError, match="Could not load tokenizer"):
            TokenCounter(model="no-such-model")
