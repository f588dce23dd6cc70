"""Data models for the text classifier: options and ranked results."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Awaitable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

# A tokenizer maps normalized text to tokens, either directly or via a coroutine.
Tokenizer = Callable[[str], Union[Iterable[str], Awaitable[Iterable[str]]]]

# Accepted spellings for option keys in plain mappings and serialized snapshots.
_OPTION_ALIASES: dict[str, str] = {
    "tokenizer": "tokenizer",
    "min_token_size": "min_token_size",
    "minTokenSize": "min_token_size",
    "ignored_tokens": "ignored_tokens",
    "ignoredTokens": "ignored_tokens",
    "ignore_pattern": "ignore_pattern",
    "ignorePattern": "ignore_pattern",
    "ignore_pattern_flags": "ignore_pattern_flags",
    "ignorePatternFlags": "ignore_pattern_flags",
    "verbose": "verbose",
}


@dataclass
class ClassifierOptions:
    """Configuration for a :class:`~textbayes.classifier.NaiveBayes` instance.

    Attributes:
        tokenizer: Custom tokenization callable. ``None`` selects the default
            tokenizer. Never serialized.
        min_token_size: Tokens shorter than this are ignored during training
            and scoring. ``None`` or ``0`` disables the filter.
        ignored_tokens: Tokens excluded from training. Stored upper-cased,
            since all text is upper-cased before tokenization.
        ignore_pattern: Regex whose matches are blanked out of training text
            before tokenization. Accepts a pattern string or compiled pattern.
        ignore_pattern_flags: ``re`` flags used to compile a string
            ``ignore_pattern``. Taken from the pattern when it is already
            compiled, so the flags survive serialization.
        verbose: Emit diagnostic log messages while learning and scoring.
    """

    tokenizer: Optional[Tokenizer] = None
    min_token_size: Optional[int] = None
    ignored_tokens: frozenset[str] = field(default_factory=frozenset)
    ignore_pattern: Optional[re.Pattern[str]] = None
    ignore_pattern_flags: int = 0
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.tokenizer is not None and not callable(self.tokenizer):
            raise TypeError(f"`tokenizer` must be callable, got {self.tokenizer!r}")

        if self.min_token_size is not None:
            if isinstance(self.min_token_size, bool) or not isinstance(self.min_token_size, int):
                raise TypeError(
                    f"`min_token_size` must be an integer, got {self.min_token_size!r}"
                )
            if self.min_token_size < 0:
                raise ValueError(
                    f"`min_token_size` must be non-negative, got {self.min_token_size}"
                )

        if isinstance(self.ignored_tokens, str):
            raise TypeError("`ignored_tokens` must be a collection of strings, not a string")
        self.ignored_tokens = frozenset(str(t).upper() for t in self.ignored_tokens or ())

        if isinstance(self.ignore_pattern_flags, bool) or not isinstance(self.ignore_pattern_flags, int):
            raise TypeError(
                f"`ignore_pattern_flags` must be an integer, got {self.ignore_pattern_flags!r}"
            )

        if isinstance(self.ignore_pattern, str):
            try:
                self.ignore_pattern = re.compile(self.ignore_pattern, self.ignore_pattern_flags)
            except re.error as e:
                raise ValueError(f"Invalid `ignore_pattern`: {e}") from e
        elif self.ignore_pattern is not None and not isinstance(self.ignore_pattern, re.Pattern):
            raise TypeError(
                f"`ignore_pattern` must be a string or compiled pattern, "
                f"got {self.ignore_pattern!r}"
            )
        if self.ignore_pattern is not None:
            self.ignore_pattern_flags = self.ignore_pattern.flags

        self.verbose = bool(self.verbose)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClassifierOptions":
        """Build options from a plain mapping.

        Keys may use snake_case or the camelCase spelling of the serialized
        format. ``None`` values fall back to the defaults.

        Raises:
            TypeError: If a key is not a recognized option.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key)
            if name is None:
                raise TypeError(
                    f"Unknown option `{key}`. Known: {sorted(set(_OPTION_ALIASES.values()))}"
                )
            # Snapshots written elsewhere may carry an empty object for a pattern.
            if value is None or (name == "ignore_pattern" and not value):
                continue
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: Any) -> "ClassifierOptions":
        """Normalize a user-supplied ``options`` argument.

        Raises:
            TypeError: If ``options`` is neither ``None``, a mapping, nor a
                ``ClassifierOptions``.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            # Each classifier owns its options
            return dataclasses.replace(options)
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise TypeError(f"NaiveBayes got invalid `options`: `{options!r}`. Pass in a mapping.")

    def passes_min_size(self, token: str) -> bool:
        """Whether ``token`` is long enough to be used as a feature."""
        return not self.min_token_size or len(token) >= self.min_token_size

    def is_valid_token(self, token: str) -> bool:
        """Whether ``token`` may be learned (size filter and ignore list)."""
        return self.passes_min_size(token) and token not in self.ignored_tokens

    def to_dict(self) -> dict:
        """Serializable options, keyed as in the snapshot format."""
        return {
            "minTokenSize": self.min_token_size,
            "ignoredTokens": sorted(self.ignored_tokens),
            "ignorePattern": self.ignore_pattern.pattern if self.ignore_pattern else None,
            "ignorePatternFlags": self.ignore_pattern_flags if self.ignore_pattern else None,
            "verbose": self.verbose,
        }


@dataclass(frozen=True)
class CategoryScore:
    """A category and its score for one classified text."""

    category: str
    score: float

    def __iter__(self):
        # Unpacks as a ``(category, score)`` pair.
        return iter((self.category, self.score))

    def to_dict(self) -> dict:
        """Serialize as a ``{"category": ..., "score": ...}`` dictionary."""
        return {"category": self.category, "score": self.score}
