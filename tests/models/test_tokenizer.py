"""Unit tests for the tokenizer."""

from __future__ import annotations

from speedread_cli.models.reader.tokenizer import tokenize


class TestTokenize:
    """Tests for tokenize()."""

    def test_splits_on_whitespace(self) -> None:
        assert tokenize("one two three") == ("one", "two", "three")

    def test_collapses_runs_of_whitespace(self) -> None:
        assert tokenize("  one \t\n two   three  ") == ("one", "two", "three")

    def test_empty_and_blank_text(self) -> None:
        assert tokenize("") == ()
        assert tokenize(" \n\t ") == ()

    def test_keeps_punctuation_and_case(self) -> None:
        assert tokenize("Hello, World!") == ("Hello,", "World!")

    def test_arabic_text_with_diacritics(self) -> None:
        text = "بِسْمِ اللَّهِ الرَّحْمَٰنِ"
        assert tokenize(text) == ("بِسْمِ", "اللَّهِ", "الرَّحْمَٰنِ")

    def test_no_empty_tokens_and_order_preserved(self) -> None:
        text = "a  b\n\nc\td e"
        tokens = tokenize(text)
        assert all(tokens)
        assert list(tokens) == text.split()
