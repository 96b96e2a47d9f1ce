"""Anchor candidate generation from link target titles."""

from __future__ import annotations

import re
from typing import List, Tuple

from .anchors import validate_anchor
from .config import InjectionConfig
from .lexicon import CORE_EXPANSIONS, STOPWORDS, TOPIC_VARIANTS
from .normalizer import title_words
from .types import AnchorCandidate, LinkTarget

_TOPIC_PATTERNS: Tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"(?:complete|ultimate|essential|comprehensive|definitive)\s+(?:guide\s+(?:to|for|on)\s+)?(.{15,60})",
        r"(?:guide|tutorial|introduction)\s+(?:to|for|on)\s+(.{10,50})",
        r"how\s+to\s+(.{15,50})",
        r"(?:best|top)\s+(.{15,50})\s+(?:tips|strategies|methods)",
        r"(.{15,40})\s+for\s+(?:beginners|experts|professionals)",
        r"understanding\s+(.{10,40})",
        r"mastering\s+(.{10,40})",
    )
)

# Longer windows read more like natural noun phrases.
_WINDOW_BONUSES: Tuple[Tuple[int, int], ...] = ((5, 15), (4, 12), (6, 8), (3, 5))

_SUBCLAUSE_RE = re.compile(r"\s*[-–—|:]\s*.{0,30}$")

_KEYWORD_BONUS = 22
_WHOLE_TITLE_BONUS = 25
_HEAD_CLAUSE_BONUS = 18
_CORE_BONUS = 10
_SLUG_BONUS = 10


class _CandidatePool:
    """Deduplicating, validating accumulator for one target."""

    def __init__(self, title: str, config: InjectionConfig) -> None:
        self.title = title
        self.config = config
        self.seen: set[str] = set()
        self.items: List[AnchorCandidate] = []

    def add(self, phrase: str, bonus: float, strategy: str, derived_from_title: bool = True) -> None:
        clean = " ".join(phrase.split())
        key = clean.lower()
        if not clean or key in self.seen:
            return
        validation = validate_anchor(clean, self.title, self.config)
        if not validation.valid:
            return
        self.seen.add(key)
        self.items.append(
            AnchorCandidate(
                phrase=clean,
                derived_from_title=derived_from_title,
                heuristic_score=bonus,
                validation_score=validation.score,
                strategy=strategy,
            )
        )


def generate_candidates(
    target: LinkTarget,
    config: InjectionConfig | None = None,
    limit: int | None = None,
) -> List[AnchorCandidate]:
    """Return ranked, validated anchor candidates for ``target``.

    Titles with fewer than three usable words yield nothing; callers treat
    that as a skip, not an error.
    """

    settings = config or InjectionConfig()
    max_items = settings.max_candidates if limit is None else limit
    words = title_words(target.title)
    if len(words) < 3 or max_items <= 0:
        return []

    clean = " ".join(words)
    pool = _CandidatePool(target.title, settings)

    for keyword in target.keywords:
        pool.add(keyword, _KEYWORD_BONUS, "keyword", derived_from_title=False)

    for pattern in _TOPIC_PATTERNS:
        match = pattern.search(clean)
        if not match:
            continue
        topic = match.group(1).strip()
        for template, bonus in TOPIC_VARIANTS:
            pool.add(template.format(topic=topic), bonus, "topic")

    for size, bonus in _WINDOW_BONUSES:
        for index in range(len(words) - size + 1):
            pool.add(" ".join(words[index:index + size]), bonus, "window")

    core_words = [
        word for word in words
        if len(word) > 3 and word not in STOPWORDS and not word.isdigit()
    ]
    if len(core_words) >= 2:
        core = " ".join(core_words[:3])
        for template in CORE_EXPANSIONS:
            pool.add(template.format(core=core), _CORE_BONUS, "core")

    if 3 <= len(words) <= 6:
        pool.add(clean, _WHOLE_TITLE_BONUS, "title")

    head = _head_clause(target.title)
    if head:
        pool.add(head, _HEAD_CLAUSE_BONUS, "title")

    slug_phrase = target.effective_slug.replace("-", " ").replace("_", " ").strip()
    if slug_phrase:
        pool.add(slug_phrase.lower(), _SLUG_BONUS, "slug", derived_from_title=False)

    ranked = sorted(pool.items, key=lambda item: item.total_score, reverse=True)
    return ranked[:max_items]


def _head_clause(title: str) -> str:
    """Title with its trailing ": sub clause" removed, cleaned."""

    stripped = _SUBCLAUSE_RE.sub("", title.strip()).strip()
    if len(stripped) < 15 or stripped == title.strip():
        return ""
    return " ".join(title_words(stripped))
