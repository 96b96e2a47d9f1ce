"""Shared text utilities for the injection engine."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Sequence

from .lexicon import STOPWORDS

_TOKEN_RE = re.compile(r"[\w'][\w'\-]*")
_WHITESPACE_RE = re.compile(r"\s+")
_SUFFIX_RE = re.compile(r"(?:ing|ed|es|s|ly|ment|tion|ness|able|ible|ful|less|ive|al|ous|ious)$")
_PREFIX_RE = re.compile(r"^(?:un|re|de|in|dis|mis|non|pre|post)")
_EDGE_PUNCT = "'\"‘’“”.,;:!?()[]{}"


def tokenize(text: str) -> List[str]:
    """Return lower-cased word tokens from the provided text."""

    return [token.lower().strip("'-") for token in _TOKEN_RE.findall(text) if token.strip("'-")]


def normalize_phrase(phrase: str) -> str:
    """Lowercase with single spaces; the key used for anchor uniqueness."""

    return _WHITESPACE_RE.sub(" ", phrase.strip()).lower()


def split_words(phrase: str) -> List[str]:
    """Whitespace split with edge punctuation removed from every word."""

    words = []
    for raw in phrase.split():
        word = raw.strip(_EDGE_PUNCT)
        if word:
            words.append(word)
    return words


@lru_cache(maxsize=4096)
def suffix_stem(word: str) -> str:
    """Strip one inflectional suffix; the result still prefixes the word."""

    lowered = word.lower()
    stemmed = _SUFFIX_RE.sub("", lowered)
    return stemmed if len(stemmed) >= 3 else lowered


@lru_cache(maxsize=4096)
def stem(word: str) -> str:
    """Crude stem: one suffix and one prefix removed."""

    stemmed = _PREFIX_RE.sub("", suffix_stem(word))
    return stemmed if len(stemmed) >= 3 else suffix_stem(word)


def significant_words(words: Iterable[str], min_length: int = 4) -> List[str]:
    """Words at least ``min_length`` long that are not stopwords, in order."""

    return [word for word in words if len(word) >= min_length and word.lower() not in STOPWORDS]


def stem_overlap(text_words: Sequence[str], pattern_words: Sequence[str]) -> float:
    """Fraction of pattern stems found (by containment) among the text stems."""

    pattern_stems = [stem(word) for word in pattern_words if len(word) > 2 and word.lower() not in STOPWORDS]
    if not pattern_stems:
        return 0.0
    text_stems = {stem(word) for word in text_words if len(word) > 2 and word.lower() not in STOPWORDS}
    matched = 0
    for pattern_stem in pattern_stems:
        if any(pattern_stem in text_stem or text_stem in pattern_stem for text_stem in text_stems):
            matched += 1
    return matched / len(pattern_stems)


def is_word_char(char: str) -> bool:
    return char.isalnum()


def at_word_boundary(text: str, start: int, end: int) -> bool:
    """True when the characters around ``text[start:end]`` are not alphanumeric."""

    if start > 0 and is_word_char(text[start - 1]):
        return False
    if end < len(text) and is_word_char(text[end]):
        return False
    return True


def phrase_pattern(phrase: str) -> re.Pattern[str]:
    """Case-insensitive pattern for ``phrase`` tolerating any run of whitespace."""

    words = phrase.split()
    return re.compile(r"\s+".join(re.escape(word) for word in words), re.IGNORECASE)
