"""Whitespace tokenizer for raw page text."""


def tokenize(raw_text: str) -> list[str]:
    """Split raw text into display tokens.

    Any run of whitespace is a delimiter. Punctuation stays attached to
    the word it touches. Empty input yields an empty list.
    """
    return raw_text.split()
