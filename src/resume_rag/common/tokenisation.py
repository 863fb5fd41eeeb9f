"""resume_rag.common.tokenisation

Lexical tokenisation used by the vector-space retriever.

Tokens are lowercase runs of word characters. Everything else (whitespace,
punctuation, symbols) separates tokens and is discarded. Nothing here depends
on a model tokenizer: retrieval is purely lexical.

Functions
---------
tokenize
    Split text into lowercase word tokens.
count_tokens
    Count token occurrences in a text.
"""

from __future__ import annotations

import re
from collections import Counter

_NON_WORD = re.compile(r"\W+")


def tokenize(text: str) -> list[str]:
    """Return the lowercase word tokens of ``text`` in order of appearance.

    Examples
    --------
    >>> tokenize("Skilled in Go, and Rust!")
    ['skilled', 'in', 'go', 'and', 'rust']
    """
    if not text:
        return []
    return [tok for tok in _NON_WORD.split(text.lower()) if tok]


def count_tokens(text: str) -> Counter:
    """Return a :class:`collections.Counter` of the tokens in ``text``."""
    return Counter(tokenize(text))


__all__ = ["tokenize", "count_tokens"]
