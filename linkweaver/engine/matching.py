"""Locate anchor phrases inside a document.

Matches are produced lazily so the scheduler can reject a hit that breaks a
placement constraint and keep searching without paying for strategies it
never reaches. Within a strategy the better hits come first.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .anchors import validate_anchor
from .config import InjectionConfig
from .document import Document, Span
from .lexicon import AUDIENCE_TAILS, CONTEXTUAL_TEMPLATES, LEADING_QUALIFIERS, STOPWORDS, TRAILING_NOUNS
from .normalizer import title_words
from .text import (
    at_word_boundary,
    phrase_pattern,
    significant_words,
    split_words,
    stem,
    stem_overlap,
    suffix_stem,
    tokenize,
)
from .types import AnchorValidation, MatchResult

STRATEGIES = ("exact", "semantic", "contextual")

CONTEXT_RADIUS = 80
CONTEXTUAL_WEIGHT = 0.8

_WORD_RE = re.compile(r"[\w][\w'\-]*")
_PRECEDING_WORD_RE = re.compile(r"([\w][\w\-]*)[ \t\r\n]+$")
_TRAILING_NOUN_RE = re.compile(r"^[ \t\r\n]+([\w][\w\-]*)")
_AUDIENCE_RE = re.compile(r"^[ \t\r\n]+(?:for|to|of)[ \t\r\n]+([\w][\w\-]*)", re.IGNORECASE)
_GAP_RE = re.compile(r"^[ \t\r\n]+$")

_QUALIFIERS = frozenset(LEADING_QUALIFIERS)
_NOUNS = frozenset(TRAILING_NOUNS)
_AUDIENCES = frozenset(AUDIENCE_TAILS)


def find_match(
    document: Document,
    phrase: str,
    target_title: str | None = None,
    config: InjectionConfig | None = None,
    strategies: Sequence[str] = STRATEGIES,
) -> Optional[MatchResult]:
    """Return the first admissible match for ``phrase`` or ``None``."""

    return next(iter_matches(document, phrase, target_title, config, strategies), None)


def iter_matches(
    document: Document,
    phrase: str,
    target_title: str | None = None,
    config: InjectionConfig | None = None,
    strategies: Sequence[str] = STRATEGIES,
) -> Iterator[MatchResult]:
    """Yield matches for ``phrase`` strategy by strategy.

    Every yielded match sits inside a single linkable text run and its final
    text has passed anchor validation.
    """

    settings = config or InjectionConfig()
    seen: set[Tuple[int, int]] = set()
    for strategy in strategies:
        if strategy == "exact":
            found = _exact_matches(document, phrase, target_title, settings)
        elif strategy == "semantic":
            found = _semantic_matches(document, phrase, target_title, settings)
        elif strategy == "contextual":
            found = _contextual_matches(document, target_title, settings)
        else:
            raise ValueError(f"unknown match strategy: {strategy}")
        for match in found:
            key = (match.start, match.end)
            if key in seen:
                continue
            seen.add(key)
            yield match


def _exact_matches(
    document: Document,
    phrase: str,
    target_title: str | None,
    config: InjectionConfig,
) -> Iterator[MatchResult]:
    for start, end in _literal_hits(document, phrase):
        widened = expand_match(document, start, end, target_title, config)
        if widened is None:
            continue
        new_start, new_end, validation = widened
        yield MatchResult(
            start=new_start,
            end=new_end,
            text=document.html[new_start:new_end],
            match_type="exact",
            relevance=validation.score / 100,
            validation=validation,
            expanded=(new_start, new_end) != (start, end),
        )


def _literal_hits(document: Document, phrase: str) -> Iterator[Tuple[int, int]]:
    if not phrase or not phrase.strip():
        return
    html = document.html
    for hit in phrase_pattern(phrase).finditer(html):
        start, end = hit.span()
        if at_word_boundary(html, start, end) and document.is_linkable(start, end):
            yield start, end


def expand_match(
    document: Document,
    start: int,
    end: int,
    target_title: str | None,
    config: InjectionConfig,
) -> Optional[Tuple[int, int, AnchorValidation]]:
    """Widen ``[start, end)`` with a qualifier and/or trailing noun.

    A widened span is kept only when it validates with a score of at least
    ``min_quality_score``; otherwise the raw span is returned if it validates
    on its own, else ``None``.
    """

    html = document.html
    run = document.run_at(start)
    if run is None:
        return None

    before = _leading_qualifier(html, run, start)
    after = _trailing_tail(html, run, end)

    options: List[Tuple[int, int]] = []
    if before is not None and after is not None:
        options.append((before, after))
    if after is not None:
        options.append((start, after))
    if before is not None:
        options.append((before, end))

    for option_start, option_end in options:
        if not document.is_linkable(option_start, option_end):
            continue
        validation = validate_anchor(html[option_start:option_end], target_title, config)
        if validation.valid and validation.score >= config.min_quality_score:
            return option_start, option_end, validation

    validation = validate_anchor(html[start:end], target_title, config)
    if validation.valid:
        return start, end, validation
    return None


def _leading_qualifier(html: str, run: Span, start: int) -> Optional[int]:
    match = _PRECEDING_WORD_RE.search(html, run.start, start)
    if match and match.group(1).lower() in _QUALIFIERS:
        return match.start(1)
    return None


def _trailing_tail(html: str, run: Span, end: int) -> Optional[int]:
    segment = html[end:run.end]
    audience = _AUDIENCE_RE.match(segment)
    if audience and audience.group(1).lower() in _AUDIENCES:
        return end + audience.end()
    noun = _TRAILING_NOUN_RE.match(segment)
    if noun and noun.group(1).lower() in _NOUNS:
        return end + noun.end()
    return None


def _semantic_matches(
    document: Document,
    phrase: str,
    target_title: str | None,
    config: InjectionConfig,
) -> Iterator[MatchResult]:
    """Stem-based fallback anchored on the longest significant word."""

    pattern_words = split_words(phrase)
    significant = significant_words(pattern_words)
    if not significant:
        return
    longest = max(significant, key=len)
    key = suffix_stem(longest)
    pattern_stems = {stem(word) for word in pattern_words if len(word) > 2 and word.lower() not in STOPWORDS}
    html = document.html

    hits: List[Tuple[float, int, int]] = []
    for hit in re.finditer(r"\b" + re.escape(key) + r"[\w\-]*", html, re.IGNORECASE):
        start, end = hit.span()
        if not at_word_boundary(html, start, end) or not document.is_linkable(start, end):
            continue
        context = document.visible_text(max(0, start - CONTEXT_RADIUS), end + CONTEXT_RADIUS)
        overlap = round(stem_overlap(tokenize(context), pattern_words), 4)
        if overlap < config.fuzzy_overlap_threshold:
            continue
        hits.append((overlap, start, end))

    # Grow and widen lazily, best context first.
    hits.sort(key=lambda item: item[0], reverse=True)
    run_tokens: Dict[int, List[Tuple[int, int]]] = {}
    for overlap, start, end in hits:
        grown = _grow(document, start, end, pattern_stems, config, run_tokens)
        if grown is None:
            continue
        widened = expand_match(document, grown[0], grown[1], target_title, config)
        if widened is None:
            continue
        new_start, new_end, validation = widened
        yield MatchResult(
            start=new_start,
            end=new_end,
            text=html[new_start:new_end],
            match_type="semantic",
            relevance=overlap,
            validation=validation,
            expanded=(new_start, new_end) != grown,
        )


def _grow(
    document: Document,
    start: int,
    end: int,
    pattern_stems: set[str],
    config: InjectionConfig,
    run_tokens: Dict[int, List[Tuple[int, int]]] | None = None,
) -> Optional[Tuple[int, int]]:
    """Extend a single-word hit over neighbouring words into a phrase.

    ``run_tokens`` caches word spans per text run across calls.
    """

    run = document.run_at(start)
    if run is None:
        return None
    html = document.html
    cache = {} if run_tokens is None else run_tokens
    tokens = cache.get(run.start)
    if tokens is None:
        tokens = [(m.start(), m.end()) for m in _WORD_RE.finditer(html, run.start, run.end)]
        cache[run.start] = tokens
    index = bisect_left(tokens, (start, -1))
    if index >= len(tokens) or tokens[index][0] != start:
        return None

    def related(i: int) -> bool:
        word = html[tokens[i][0]:tokens[i][1]].lower()
        if word in STOPWORDS or len(word) <= 2:
            return False
        word_stem = stem(word)
        return any(p in word_stem or word_stem in p for p in pattern_stems)

    def joined(left: int, right: int) -> bool:
        return bool(_GAP_RE.match(html[tokens[left][1]:tokens[right][0]]))

    def is_connector(i: int) -> bool:
        return html[tokens[i][0]:tokens[i][1]].lower() in STOPWORDS

    first = last = index
    limit = config.max_word_count
    while last + 1 < len(tokens) and last - first + 1 < limit and joined(last, last + 1):
        if related(last + 1):
            last += 1
        elif (
            is_connector(last + 1)
            and last + 2 < len(tokens)
            and last - first + 2 < limit
            and joined(last + 1, last + 2)
            and related(last + 2)
        ):
            last += 2
        else:
            break
    while first > 0 and last - first + 1 < limit and joined(first - 1, first):
        if related(first - 1):
            first -= 1
        elif (
            is_connector(first - 1)
            and first > 1
            and last - first + 2 < limit
            and joined(first - 2, first - 1)
            and related(first - 2)
        ):
            first -= 2
        else:
            break

    if last - first + 1 < config.min_word_count:
        # Borrow one neighbouring content word, the following one first.
        if last + 1 < len(tokens) and joined(last, last + 1) and not is_connector(last + 1):
            last += 1
        elif first > 0 and joined(first - 1, first) and not is_connector(first - 1):
            first -= 1

    return tokens[first][0], tokens[last][1]


def _contextual_matches(
    document: Document,
    target_title: str | None,
    config: InjectionConfig,
) -> Iterator[MatchResult]:
    """Templated phrases ("guide to X", "X strategies") around a title term."""

    if not target_title:
        return
    words = title_words(target_title)
    title_terms = [word for word in significant_words(words) if not word.isdigit()]
    for term in distinctive_terms(words):
        for template in CONTEXTUAL_TEMPLATES:
            phrase = template.format(term=term)
            for start, end in _literal_hits(document, phrase):
                validation = validate_anchor(document.html[start:end], target_title, config)
                if not validation.valid:
                    continue
                context = document.visible_text(max(0, start - CONTEXT_RADIUS), end + CONTEXT_RADIUS)
                overlap = stem_overlap(tokenize(context), title_terms) if title_terms else 0.0
                yield MatchResult(
                    start=start,
                    end=end,
                    text=document.html[start:end],
                    match_type="contextual",
                    relevance=round(overlap * CONTEXTUAL_WEIGHT, 4),
                    validation=validation,
                )


def distinctive_terms(words: Sequence[str]) -> List[str]:
    """Title bigrams then single words, longest first."""

    usable = [
        word for word in words
        if len(word) >= 4 and word not in STOPWORDS and not word.isdigit()
    ]
    bigrams = []
    for left, right in zip(words, words[1:]):
        if left in usable and right in usable:
            bigrams.append(f"{left} {right}")
    singles = list(dict.fromkeys(usable))
    ordered = sorted(dict.fromkeys(bigrams), key=len, reverse=True)
    ordered.extend(sorted(singles, key=len, reverse=True))
    return ordered
