"""textbayes -- online Naive Bayes text classification."""

__version__ = "0.1.0"

from .classifier import STATE_KEYS, NaiveBayes, from_json
from .models import CategoryScore, ClassifierOptions, Tokenizer
from .preprocessing import (
    default_tokenizer,
    frequency_table,
    normalize_text,
    remove_empty_tokens,
    strip_pattern,
)

__all__ = [
    # Core
    "NaiveBayes",
    "from_json",
    "STATE_KEYS",
    # Models
    "ClassifierOptions",
    "CategoryScore",
    "Tokenizer",
    # Preprocessing
    "default_tokenizer",
    "frequency_table",
    "normalize_text",
    "remove_empty_tokens",
    "strip_pattern",
]
