"""Tokenizer for splitting reading text into tokens."""

import re

_WHITESPACE = re.compile(r"\s+")


def tokenize(text: str) -> tuple[str, ...]:
    """
    Split text into reading tokens.

    Tokens are runs of non-whitespace characters in their original order.
    Case, punctuation and diacritics are left untouched.

    Args:
        text: Raw input text

    Returns:
        Tuple of non-empty tokens
    """
    return tuple(token for token in _WHITESPACE.split(text) if token)
