"""Title cleaning for link targets."""

from __future__ import annotations

import re
from typing import List

_SUFFIX_PATTERNS = (
    # "- Guide", "| Complete Guide", "— The Ultimate Guide"
    re.compile(r"\s*[-–—|:]\s*(?:the\s+|a\s+)?(?:complete\s+|ultimate\s+|definitive\s+)?guide\s*$", re.IGNORECASE),
    # trailing year: "... 2026", "... (2026)", "... - 2026"
    re.compile(r"\s*[-–—|:,]?\s*[(\[]?\b(?:19|20)\d{2}\b[)\]]?\s*$"),
    # "| Site Name"
    re.compile(r"\s+\|\s+[^|]{1,60}$"),
    # "- Some Blog", "— The Running Blog"
    re.compile(r"\s+[-–—]\s+[\w\s'&.]{0,40}\bblog\s*$", re.IGNORECASE),
)

_PUNCT_RE = re.compile(r"[|–—:;\[\](){}\"“”«»<>!?,/\\]+")
_DOT_RE = re.compile(r"\.(?=\s|$)")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_title_suffixes(title: str) -> str:
    """Remove site-name, year and "Guide" tails until the title is stable."""

    current = title.strip()
    while True:
        previous = current
        for pattern in _SUFFIX_PATTERNS:
            stripped = pattern.sub("", current).strip()
            if stripped:
                current = stripped
        if current == previous:
            return current


def clean_title(title: str) -> str:
    """Return the title without suffix noise or punctuation, lower-cased."""

    if not title:
        return ""
    stripped = strip_title_suffixes(title)
    stripped = _PUNCT_RE.sub(" ", stripped)
    stripped = _DOT_RE.sub(" ", stripped)
    words = title_words_from_clean(stripped)
    return " ".join(words)


def title_words_from_clean(text: str) -> List[str]:
    words = []
    for raw in _WHITESPACE_RE.split(text.strip()):
        word = raw.strip("'‘’-").lower()
        if len(word) >= 2:
            words.append(word)
    return words


def title_words(title: str) -> List[str]:
    """Ordered lower-case words of the cleaned title, tokens under 2 chars dropped."""

    cleaned = clean_title(title)
    return cleaned.split() if cleaned else []
