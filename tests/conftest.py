"""Shared test fixtures for textbayes tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from textbayes import NaiveBayes

# Each category has distinctive vocabulary to make classification feasible
SPAM_DOCS = [
    "Buy cheap pills now! Limited offer, click here to win money.",
    "You have won a free prize. Claim your money now, click the link.",
    "Cheap loans approved instantly. Act now, limited time offer!",
]

HAM_DOCS = [
    "Are we still meeting for lunch tomorrow at noon?",
    "Please review the attached report before the meeting on Monday.",
    "Thanks for the dinner yesterday, see you at the office tomorrow.",
]


@pytest.fixture
def corpus() -> list[tuple[str, str]]:
    """Labeled (text, category) pairs."""
    return [(doc, "spam") for doc in SPAM_DOCS] + [(doc, "ham") for doc in HAM_DOCS]


@pytest.fixture
def trained(corpus) -> NaiveBayes:
    """Classifier trained on the spam/ham corpus."""
    classifier = NaiveBayes()
    for text, category in corpus:
        classifier.learn(text, category)
    return classifier


@pytest.fixture
def greetings() -> NaiveBayes:
    """Two-category classifier with one short document each."""
    classifier = NaiveBayes()
    classifier.learn("hello there friend", "greeting")
    classifier.learn("goodbye friend", "farewell")
    return classifier


@pytest.fixture
def jsonl_file(tmp_path: Path, corpus) -> Path:
    """Labeled examples as JSON Lines."""
    file = tmp_path / "examples.jsonl"
    lines = [json.dumps({"text": text, "category": category}) for text, category in corpus]
    file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return file


@pytest.fixture
def tsv_file(tmp_path: Path, corpus) -> Path:
    """Labeled examples as ``category<TAB>text`` lines."""
    file = tmp_path / "examples.tsv"
    lines = [f"{category}\t{text}" for text, category in corpus]
    file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return file
