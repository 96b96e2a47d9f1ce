"""Bridge sentences for targets the prose never mentions."""

from __future__ import annotations

import html as html_lib
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .anchors import validate_anchor
from .config import InjectionConfig
from .document import Document, escape_attribute, render_link
from .lexicon import BRIDGE_TEMPLATES, STOPWORDS, WEAK_STARTERS
from .normalizer import title_words
from .state import InjectionState
from .text import significant_words, stem_overlap, tokenize
from .types import AnchorCandidate, AnchorValidation, LinkTarget, PlacementRecord

logger = logging.getLogger(__name__)

CONTEXT_WINDOW = 500
MIDDLE_BAND = (0.2, 0.8)
MAX_TITLE_ANCHOR_WORDS = 5


def bridge_links(
    document: Document,
    pending: Sequence[Tuple[LinkTarget, List[AnchorCandidate]]],
    config: InjectionConfig,
    state: InjectionState,
    skipped: Dict[str, str],
) -> List[PlacementRecord]:
    """Insert bridge sentences until the run reaches ``min_links``.

    Placed targets are removed from ``skipped``; failures extend the
    target's existing reason.
    """

    goal = min(config.min_links, config.max_links)
    if not config.enable_bridge_sentences or state.link_count >= goal:
        return []

    points = insertion_points(document)
    added: List[PlacementRecord] = []

    for target, candidates in pending:
        if state.link_count >= goal:
            break
        url = target.url

        phrase, validation = bridge_anchor(target, candidates, config, state)
        if not validation.valid:
            _extend_reason(skipped, url, f"bridge anchor rejected: {validation.reason}")
            state.rejected_urls.add(url)
            continue
        if state.anchor_used(phrase):
            _extend_reason(skipped, url, "bridge anchor already used")
            continue

        point, relevance = choose_point(document, points, target, config, state)
        if point is None:
            _extend_reason(skipped, url, "no bridge insertion point")
            continue

        record = PlacementRecord(
            url=url,
            anchor_text=phrase,
            start_offset=point,
            end_offset=point,
            match_type="bridge",
            score=validation.score,
            tier=validation.tier,
            relevance=round(relevance, 4),
            section=document.section_of(point),
        )
        sentence = render_bridge(len(added), target, phrase, config)
        state.commit(record)
        state.insertions.append((point, sentence))
        state.rejected_urls.discard(url)
        skipped.pop(url, None)
        added.append(record)
        logger.debug("Bridged %s with %r after offset %d", url, phrase, point)

    return added


def insertion_points(document: Document) -> List[int]:
    """Paragraph ends inside the middle band of the document."""

    length = len(document)
    low, high = MIDDLE_BAND
    return [offset for offset in document.paragraph_ends if low * length <= offset <= high * length]


def bridge_anchor(
    target: LinkTarget,
    candidates: Sequence[AnchorCandidate],
    config: InjectionConfig,
    state: InjectionState,
) -> Tuple[str, AnchorValidation]:
    """First unused candidate, else a trimmed version of the title.

    The title fallback may itself be in use already; callers check.
    """

    for candidate in candidates:
        if not state.anchor_used(candidate.phrase):
            return candidate.phrase, validate_anchor(candidate.phrase, target.title, config)
    phrase = title_anchor(target.title)
    return phrase, validate_anchor(phrase, target.title, config)


def title_anchor(title: str) -> str:
    words = title_words(title)
    while words and (words[0] in WEAK_STARTERS or words[0] in STOPWORDS):
        words = words[1:]
    words = words[:MAX_TITLE_ANCHOR_WORDS]
    while words and words[-1] in STOPWORDS:
        words = words[:-1]
    return " ".join(words)


def choose_point(
    document: Document,
    points: Sequence[int],
    target: LinkTarget,
    config: InjectionConfig,
    state: InjectionState,
) -> Tuple[Optional[int], float]:
    """Admissible point whose preceding text best overlaps the title."""

    keywords = significant_words(title_words(target.title))
    best: Optional[int] = None
    best_score = -1.0
    for point in points:
        if state.too_close(point, config.min_distance_between_links):
            continue
        if state.section_full(document.section_of(point), config.max_links_per_section):
            continue
        if any(offset == point for offset, _html in state.insertions):
            continue
        context = document.visible_text(max(0, point - CONTEXT_WINDOW), point)
        score = stem_overlap(tokenize(context), keywords) if keywords else 0.0
        if score > best_score:
            best, best_score = point, score
    return best, max(best_score, 0.0)


def render_bridge(index: int, target: LinkTarget, phrase: str, config: InjectionConfig) -> str:
    """Bridge paragraph markup; the template rotates with ``index``."""

    link = render_link(target.url, target.title, html_lib.escape(phrase, quote=False), config.link_class)
    template = BRIDGE_TEMPLATES[index % len(BRIDGE_TEMPLATES)]
    opening = f'<p class="{escape_attribute(config.bridge_class)}">' if config.bridge_class else "<p>"
    return "\n" + opening + template.format(anchor=link) + "</p>"


def _extend_reason(skipped: Dict[str, str], url: str, reason: str) -> None:
    previous = skipped.get(url)
    skipped[url] = f"{previous}; {reason}" if previous else reason
