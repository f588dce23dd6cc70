"""Text normalization, tokenization, and per-document frequency tables.

All text is upper-cased before tokenization so that training and scoring
are case-insensitive. The default tokenizer keeps ASCII letters, Cyrillic
letters, digits and underscores, treats everything else as a separator, and
splits on whitespace runs. Any callable with the same shape (or a coroutine
function) can replace it.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from typing import Optional

# Anything that isn't a word character (ASCII, Cyrillic, digit, underscore) or space
_PUNCTUATION_RE = re.compile(r"[^A-Za-z\u0400-\u04FF0-9_\s]")


def normalize_text(text: str) -> str:
    """Return the canonical (upper-case) form of ``text``."""
    return text.upper()


def strip_pattern(text: str, pattern: Optional[re.Pattern[str]]) -> str:
    """Replace every match of ``pattern`` in ``text`` with a single space."""
    if pattern is None:
        return text
    return pattern.sub(" ", text)


def default_tokenizer(text: str) -> list[str]:
    """Split text into word tokens, dropping punctuation."""
    sanitized = _PUNCTUATION_RE.sub(" ", text)
    return sanitized.split()


def remove_empty_tokens(tokens: Iterable[str]) -> list[str]:
    """Drop empty and whitespace-only tokens."""
    return [token for token in tokens if token.strip()]


def frequency_table(tokens: Iterable[str]) -> dict[str, int]:
    """Count how often each token occurs in one document.

    Args:
        tokens: Token sequence for a single document.

    Returns:
        A new dict mapping each distinct token to its occurrence count.
    """
    return dict(Counter(tokens))
