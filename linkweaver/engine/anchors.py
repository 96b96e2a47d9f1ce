"""Anchor text quality validation.

``validate_anchor`` is the single gate every anchor passes through: the
candidate generator uses it to discard phrases, the matcher uses it on the
final (possibly widened) document text, and the bridge fallback uses it on
synthesised anchors. It is pure and cheap to call repeatedly.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .config import InjectionConfig
from .lexicon import BANNED_PATTERNS, POWER_WORDS, STOPWORDS, WEAK_STARTERS, is_meaningful
from .text import split_words
from .types import AnchorValidation

_DEFAULT_CONFIG = InjectionConfig()
_PROPER_NOUN_RE = re.compile(r"^[A-Z][a-z]")
_WHITESPACE_RE = re.compile(r"\s+")


def validate_anchor(
    phrase: str | None,
    target_title: str | None = None,
    config: InjectionConfig | None = None,
) -> AnchorValidation:
    """Score ``phrase`` as anchor text and assign a quality tier."""

    settings = config or _DEFAULT_CONFIG
    if not phrase or not isinstance(phrase, str) or not phrase.strip():
        return _rejected(0, 0, "Empty or invalid input")

    trimmed = _WHITESPACE_RE.sub(" ", phrase.strip())
    raw_words = trimmed.split(" ")
    words = split_words(trimmed)
    word_count = len(raw_words)

    if word_count < settings.min_word_count:
        fix = None
        if target_title:
            fix = f'Try: "{" ".join(target_title.split()[:5])}"'
        return _rejected(
            word_count,
            0,
            f"Only {word_count} word(s), minimum is {settings.min_word_count}",
            fix,
        )

    if word_count > settings.max_word_count:
        return _rejected(
            word_count,
            0,
            f"{word_count} words, maximum is {settings.max_word_count}",
            f'Shorten to: "{" ".join(raw_words[:5])}"',
        )

    lowered = trimmed.lower()
    for pattern in BANNED_PATTERNS:
        if pattern.search(lowered):
            return _rejected(word_count, 0, f"Matches banned pattern /{pattern.pattern}/")

    if not words:
        return _rejected(word_count, 0, "No words left after removing punctuation")

    first = words[0].lower()
    if first in WEAK_STARTERS:
        return _rejected(
            word_count,
            0,
            f'Starts with weak word: "{words[0]}"',
            f'Remove "{words[0]}": "{" ".join(raw_words[1:])}"',
        )

    last = words[-1].lower()
    if last in STOPWORDS:
        return _rejected(
            word_count,
            0,
            f'Ends with stopword: "{words[-1]}"',
            f'Remove trailing: "{" ".join(raw_words[:-1])}"',
        )

    meaningful = [word for word in words if is_meaningful(word)]
    if len(meaningful) < 2:
        return _rejected(
            word_count,
            len(meaningful),
            f"Only {len(meaningful)} meaningful word(s), need at least 2",
        )

    score = _score(words, meaningful, word_count, target_title)
    tier = tier_for_score(score, settings.min_quality_score)
    return AnchorValidation(
        valid=tier != "rejected",
        score=score,
        tier=tier,
        word_count=word_count,
        meaningful_word_count=len(meaningful),
        reason=None if tier != "rejected" else f"Score {score} below {settings.min_quality_score}",
    )


def tier_for_score(score: int, min_quality_score: int = 50) -> str:
    if score >= 85:
        return "excellent"
    if score >= 70:
        return "good"
    if score >= min_quality_score:
        return "acceptable"
    return "rejected"


def title_keywords(target_title: str | None) -> List[str]:
    """Significant lower-case title words used for the overlap bonus."""

    if not target_title:
        return []
    return [word.lower() for word in split_words(target_title) if len(word) > 3 and word.lower() not in STOPWORDS]


def _score(words: List[str], meaningful: List[str], word_count: int, target_title: Optional[str]) -> int:
    score = 50

    if word_count in (4, 5):
        score += 25
    elif word_count in (3, 6):
        score += 15
    else:
        score += 5

    score += round(len(meaningful) / word_count * 20)

    average_length = sum(len(word) for word in meaningful) / len(meaningful)
    if average_length >= 6:
        score += 5

    if any(_PROPER_NOUN_RE.match(word) for word in words[1:]):
        score += 5

    keywords = title_keywords(target_title)
    if keywords:
        overlapping = 0
        for word in meaningful:
            lowered = word.lower()
            if any(lowered in keyword or keyword in lowered for keyword in keywords):
                overlapping += 1
        score += min(overlapping * 4, 15)

    if any(word.lower() in POWER_WORDS for word in words):
        score += 3

    return min(score, 100)


def _rejected(
    word_count: int,
    meaningful_word_count: int,
    reason: str,
    suggested_fix: str | None = None,
) -> AnchorValidation:
    return AnchorValidation(
        valid=False,
        score=0,
        tier="rejected",
        word_count=word_count,
        meaningful_word_count=meaningful_word_count,
        reason=reason,
        suggested_fix=suggested_fix,
    )
