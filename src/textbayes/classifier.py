"""Online multinomial Naive Bayes text classifier with Laplace smoothing.

The classifier learns one labeled document at a time, accumulating
per-category word-frequency statistics, and ranks categories for new text.
Pure Python, no external numeric libraries.

Features:
- Incremental training (``learn``), no refitting
- Pluggable tokenizer, synchronous or coroutine-based (``alearn``,
  ``acategorize_multiple``)
- Minimum token size, ignored tokens and an ignore pattern for training text
- Flat JSON snapshot persistence (``to_json`` / ``from_json``)

Scoring note: a category's score is its prior ``P(c)`` plus the sum of
``frequency * P(token | c)`` over the query tokens. The terms are added as
raw probabilities, not logarithms, and rankings depend on that.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional

from .models import CategoryScore, ClassifierOptions
from .preprocessing import (
    default_tokenizer,
    frequency_table,
    normalize_text,
    remove_empty_tokens,
    strip_pattern,
)

logger = logging.getLogger(__name__)

# Keys of a serialized classifier state, in snapshot order.
STATE_KEYS: tuple[str, ...] = (
    "categories",
    "docCount",
    "totalDocuments",
    "vocabulary",
    "vocabularySize",
    "wordCount",
    "wordFrequencyCount",
    "options",
)


class NaiveBayes:
    """Incrementally trained Naive Bayes classifier.

    Example::

        classifier = NaiveBayes({"min_token_size": 2})
        classifier.learn("amazing, awesome movie!! Yeah!!", "positive")
        classifier.learn("terrible, awful thing. Sucks!!", "negative")

        classifier.categorize("awesome, cool, amazing!! Yay.")  # "positive"

        snapshot = classifier.to_json()
        restored = NaiveBayes.from_json(snapshot)

    Instances are not thread-safe. Mutating calls (``learn``/``alearn``)
    on the same instance must not overlap with each other or with scoring;
    callers that train concurrently must serialize access themselves.

    Args:
        options: ``ClassifierOptions`` or a mapping of option names
            (snake_case or camelCase) to values.

    Raises:
        TypeError: If ``options`` is not a mapping or ``ClassifierOptions``.
    """

    def __init__(self, options: ClassifierOptions | Mapping[str, Any] | None = None) -> None:
        self.options = ClassifierOptions.coerce(options)
        self.tokenizer = self.options.tokenizer or default_tokenizer

        # Category names in first-encounter order
        self.categories: list[str] = []

        self.vocabulary: set[str] = set()
        self.vocabulary_size = 0

        # Number of documents learned from, overall and per category
        self.total_documents = 0
        self.doc_count: dict[str, int] = {}

        # Total token occurrences per category
        self.word_count: dict[str, int] = {}

        # Per-category token frequencies
        self.word_frequency_count: dict[str, dict[str, int]] = {}

    def __repr__(self) -> str:
        return (
            f"NaiveBayes(categories={len(self.categories)}, "
            f"documents={self.total_documents}, vocabulary={self.vocabulary_size})"
        )

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def initialize_category(self, category: str) -> "NaiveBayes":
        """Register ``category`` with zeroed counters if it is new."""
        if category not in self.doc_count:
            self.categories.append(category)
            self.doc_count[category] = 0
            self.word_count[category] = 0
            self.word_frequency_count[category] = {}
        return self

    def learn(self, text: str, category: str) -> "NaiveBayes":
        """Train on one document labeled ``category``.

        Args:
            text: Raw document text. May be empty.
            category: Category label. Registered on first use.

        Returns:
            Self (for method chaining).

        Raises:
            TypeError: If the tokenizer is asynchronous (use ``alearn``).
        """
        tokens = self._tokenize(self._training_text(text))
        return self._update(tokens, category)

    async def alearn(self, text: str, category: str) -> "NaiveBayes":
        """Coroutine form of :meth:`learn`; awaits an asynchronous tokenizer."""
        tokens = await self._atokenize(self._training_text(text))
        return self._update(tokens, category)

    def _training_text(self, text: str) -> str:
        text = normalize_text(text)
        return strip_pattern(text, self.options.ignore_pattern)

    def _update(self, tokens: list[str], category: str) -> "NaiveBayes":
        # Tokens are already resolved: nothing below suspends or fails
        # part-way through an update.
        table = frequency_table(tokens)

        self.initialize_category(category)
        self.doc_count[category] += 1
        self.total_documents += 1

        frequencies = self.word_frequency_count[category]
        for token, frequency_in_text in table.items():
            if not self.options.is_valid_token(token):
                continue

            if token not in self.vocabulary:
                self.vocabulary.add(token)
                self.vocabulary_size += 1

            frequencies[token] = frequencies.get(token, 0) + frequency_in_text
            self.word_count[category] += frequency_in_text

        self._log("Learned %d token(s) for category %r", len(table), category)
        return self

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def categorize_multiple(self, text: str, count: int = 3) -> list[CategoryScore]:
        """Return the ``count`` most likely categories for ``text``.

        Args:
            text: Text to classify.
            count: Maximum number of results.

        Returns:
            List of CategoryScore, highest score first. Ties keep the order in
            which categories were first learned. Empty if nothing was learned.
        """
        text = normalize_text(text)
        self._log("Categorizing text %s", text)
        return self._rank(self._tokenize(text), count)

    async def acategorize_multiple(self, text: str, count: int = 3) -> list[CategoryScore]:
        """Coroutine form of :meth:`categorize_multiple`."""
        text = normalize_text(text)
        self._log("Categorizing text %s", text)
        return self._rank(await self._atokenize(text), count)

    def categorize(self, text: str) -> Optional[str]:
        """Return the most likely category for ``text``, or ``None``."""
        return _top_category(self.categorize_multiple(text, 1))

    async def acategorize(self, text: str) -> Optional[str]:
        """Coroutine form of :meth:`categorize`."""
        return _top_category(await self.acategorize_multiple(text, 1))

    def _rank(self, tokens: list[str], count: int) -> list[CategoryScore]:
        self._log("tokens: %s", tokens)
        table = frequency_table(tokens)
        self._log("frequencyTable: %s", table)

        scored: list[CategoryScore] = []
        for category in self.categories:
            category_probability = self.doc_count[category] / self.total_documents
            score = category_probability
            self._log("Category %r probability: %s", category, category_probability)

            for token, frequency_in_text in table.items():
                if not self.options.passes_min_size(token):
                    continue
                token_probability = self.token_probability(token, category)
                self._log(
                    "Token %r probability: %s | frequencyInText: %d",
                    token, token_probability, frequency_in_text,
                )
                score += frequency_in_text * token_probability

            self._log("Category %r final score: %s", category, score)
            scored.append(CategoryScore(category=category, score=score))

        # sorted() is stable, so equal scores keep encounter order
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)
        return ranked[:count]

    def token_probability(self, token: str, category: str) -> float:
        """Laplace-smoothed probability of ``token`` given ``category``.

        ``(count(token, category) + 1) / (words(category) + |vocabulary|)``.
        Returns 0.0 while both the category's word count and the vocabulary
        are empty.
        """
        frequency = self.word_frequency_count[category].get(token, 0)
        denominator = self.word_count[category] + self.vocabulary_size
        if denominator == 0:
            return 0.0
        return (frequency + 1) / denominator

    # ------------------------------------------------------------------
    # Tokenization
    # ------------------------------------------------------------------

    def _tokenize(self, text: str) -> list[str]:
        tokens = self.tokenizer(text)
        if inspect.isawaitable(tokens):
            if inspect.iscoroutine(tokens):
                tokens.close()
            raise TypeError(
                "The configured tokenizer is asynchronous; use alearn() / "
                "acategorize() / acategorize_multiple() instead."
            )
        return remove_empty_tokens(tokens)

    async def _atokenize(self, text: str) -> list[str]:
        tokens = self.tokenizer(text)
        if inspect.isawaitable(tokens):
            tokens = await tokens
        return remove_empty_tokens(tokens)

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    def check_invariants(self) -> None:
        """Verify that the model's counters agree with each other.

        Raises:
            ValueError: Naming the first inconsistency found.
        """
        category_set = set(self.categories)
        for name, table in (
            ("docCount", self.doc_count),
            ("wordCount", self.word_count),
            ("wordFrequencyCount", self.word_frequency_count),
        ):
            if set(table) != category_set:
                raise ValueError(f"`{name}` categories do not match `categories`")

        if self.total_documents != sum(self.doc_count.values()):
            raise ValueError("`totalDocuments` does not equal the sum of `docCount`")

        if self.vocabulary_size != len(self.vocabulary):
            raise ValueError("`vocabularySize` does not equal the size of `vocabulary`")

        for category, frequencies in self.word_frequency_count.items():
            if self.word_count[category] != sum(frequencies.values()):
                raise ValueError(
                    f"`wordCount` for {category!r} does not equal its token frequencies"
                )
            unknown = frequencies.keys() - self.vocabulary
            if unknown:
                raise ValueError(
                    f"Tokens {sorted(unknown)[:5]} of {category!r} are missing from `vocabulary`"
                )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize the model state to a flat dictionary."""
        return {
            "categories": {category: True for category in self.categories},
            "docCount": dict(self.doc_count),
            "totalDocuments": self.total_documents,
            "vocabulary": {token: True for token in sorted(self.vocabulary)},
            "vocabularySize": self.vocabulary_size,
            "wordCount": dict(self.word_count),
            "wordFrequencyCount": {
                category: dict(frequencies)
                for category, frequencies in self.word_frequency_count.items()
            },
            "options": self.options.to_dict(),
        }

    def to_json(self) -> str:
        """Dump the classifier's state as a JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        options: ClassifierOptions | Mapping[str, Any] | None = None,
    ) -> "NaiveBayes":
        """Build a classifier from a state dictionary produced by ``to_dict``.

        The stored fields replace those of a freshly constructed classifier.
        Stored options replace ``options`` except for the tokenizer, which is
        never serialized. Counters are not cross-checked; call
        :meth:`check_invariants` to do so.

        Raises:
            ValueError: If a state key is missing or null, or the stored
                options are invalid.
        """
        for key in STATE_KEYS:
            if data.get(key) is None:
                raise ValueError(
                    f"NaiveBayes.from_json: JSON string is missing an expected property: `{key}`."
                )

        if not isinstance(data["options"], Mapping):
            raise ValueError("NaiveBayes.from_json: `options` must be a JSON object.")

        classifier = cls(options)
        try:
            stored_options = ClassifierOptions.from_mapping(data["options"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"NaiveBayes.from_json: invalid stored `options`: {e}") from e
        stored_options.tokenizer = classifier.options.tokenizer
        classifier.options = stored_options

        classifier.categories = list(_keys(data["categories"]))
        classifier.doc_count = dict(data["docCount"])
        classifier.total_documents = data["totalDocuments"]
        classifier.vocabulary = set(_keys(data["vocabulary"]))
        classifier.vocabulary_size = data["vocabularySize"]
        classifier.word_count = dict(data["wordCount"])
        classifier.word_frequency_count = {
            category: dict(frequencies)
            for category, frequencies in data["wordFrequencyCount"].items()
        }
        return classifier

    @classmethod
    def from_json(
        cls,
        json_str: str | bytes,
        options: ClassifierOptions | Mapping[str, Any] | None = None,
    ) -> "NaiveBayes":
        """Initialize a classifier from a ``to_json`` snapshot.

        Args:
            json_str: State representation obtained from ``to_json()``.
            options: Options for the new instance (its tokenizer is kept).

        Raises:
            ValueError: If the string is not valid JSON or lacks a state key.
        """
        try:
            parsed = json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise ValueError("NaiveBayes.from_json expects a valid JSON string.") from e
        if not isinstance(parsed, Mapping):
            raise ValueError("NaiveBayes.from_json expects a JSON object.")
        return cls.from_dict(parsed, options)

    def save(self, path: str | Path) -> None:
        """Save the model state to a JSON file.

        Args:
            path: File path to save to. Parent directories are created.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json())
        self._log("Saved model to %s", path)

    @classmethod
    def load(
        cls,
        path: str | Path,
        options: ClassifierOptions | Mapping[str, Any] | None = None,
    ) -> "NaiveBayes":
        """Load a model saved with :meth:`save`."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_json(f.read(), options)

    def _log(self, msg: str, *args: Any) -> None:
        if self.options.verbose:
            logger.info(msg, *args)


def from_json(
    json_str: str | bytes,
    options: ClassifierOptions | Mapping[str, Any] | None = None,
) -> NaiveBayes:
    """Shortcut for :meth:`NaiveBayes.from_json`."""
    return NaiveBayes.from_json(json_str, options)


def _keys(value: Iterable[str] | Mapping[str, Any]) -> Iterable[str]:
    # Sets are stored as {name: true} objects; plain lists are accepted too.
    if isinstance(value, Mapping):
        return value.keys()
    return value


def _top_category(ranked: list[CategoryScore]) -> Optional[str]:
    if ranked:
        return ranked[0].category
    return None
