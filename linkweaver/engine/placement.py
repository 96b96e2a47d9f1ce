"""Greedy placement of matched anchors under the run constraints."""

from __future__ import annotations

import html as html_lib
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from .candidates import generate_candidates
from .config import InjectionConfig
from .document import Document
from .matching import iter_matches
from .state import InjectionState
from .types import AnchorCandidate, LinkTarget, MatchResult, PlacementRecord

logger = logging.getLogger(__name__)

NATURAL_STRATEGIES = ("exact", "semantic")
FALLBACK_STRATEGIES = ("contextual",)

Pending = List[Tuple[LinkTarget, List[AnchorCandidate]]]


def order_targets(targets: Sequence[LinkTarget]) -> List[LinkTarget]:
    """Longest titles first; equal lengths keep their catalog order."""

    return sorted(targets, key=lambda target: len(target.title or ""), reverse=True)


def same_page(url: str, current_url: str | None) -> bool:
    """True when ``url`` points at the page being written."""

    if not current_url:
        return False
    left, right = urlparse(url), urlparse(current_url)
    if left.netloc and right.netloc and left.netloc.lower() != right.netloc.lower():
        return False
    return left.path.rstrip("/") == right.path.rstrip("/")


def schedule_links(
    document: Document,
    targets: Sequence[LinkTarget],
    config: InjectionConfig,
    state: InjectionState,
    skipped: Dict[str, str],
    current_url: str | None = None,
) -> Pending:
    """Commit natural matches into ``state``.

    Returns the targets that were considered but not placed, with their
    candidates, for the bridge fallback. Every target that is not placed
    gets a reason in ``skipped``.
    """

    pending: Pending = []
    seen_urls: set[str] = set()

    for target in order_targets(targets):
        url = target.url
        if url in seen_urls:
            logger.debug("Ignoring repeated target url %s", url)
            continue
        seen_urls.add(url)

        if same_page(url, current_url):
            skipped[url] = "target is the current page"
            continue
        if state.link_count >= config.max_links:
            skipped[url] = f"link budget exhausted ({config.max_links} links)"
            continue

        candidates = generate_candidates(target, config)
        if not candidates:
            skipped[url] = "no candidates: title too short or no valid anchor phrases"
            state.rejected_urls.add(url)
            logger.debug("No anchor candidates for %s (%r)", url, target.title)
            pending.append((target, candidates))
            continue

        match, reason = best_match(document, target, candidates, config, state)
        if match is None:
            skipped[url] = reason
            logger.debug("Skipping %s: %s", url, reason)
            pending.append((target, candidates))
            continue

        record = make_record(target, match, document.section_of(match.start))
        state.commit(record)
        logger.debug("Linked %s with %r at %d (%s)", url, record.anchor_text, record.start_offset, record.match_type)

    return pending


def best_match(
    document: Document,
    target: LinkTarget,
    candidates: Sequence[AnchorCandidate],
    config: InjectionConfig,
    state: InjectionState,
) -> Tuple[Optional[MatchResult], str]:
    """Pick the most relevant admissible match across ``candidates``.

    Each candidate contributes its first admissible match; the contextual
    strategy only runs when no candidate produced one.
    """

    best: Optional[MatchResult] = None
    reason = "no match in document"

    for candidate in candidates:
        match, violation = _first_admissible(document, candidate.phrase, target.title, config, state, NATURAL_STRATEGIES)
        if violation:
            reason = violation
        if match is None:
            continue
        if best is None or match.relevance > best.relevance:
            best = match
        if best.match_type == "exact" and best.validation.tier == "excellent":
            break

    if best is None:
        match, violation = _first_admissible(document, "", target.title, config, state, FALLBACK_STRATEGIES)
        if violation:
            reason = violation
        best = match

    return best, reason


def _first_admissible(
    document: Document,
    phrase: str,
    title: str,
    config: InjectionConfig,
    state: InjectionState,
    strategies: Sequence[str],
) -> Tuple[Optional[MatchResult], Optional[str]]:
    violation: Optional[str] = None
    for match in iter_matches(document, phrase, title, config, strategies):
        problem = state.violation(
            match.start,
            match.end,
            anchor_text(match.text),
            document.section_of(match.start),
            config,
        )
        if problem is None:
            return match, None
        violation = problem
    return None, violation


def anchor_text(raw: str) -> str:
    """Visible anchor text for a span of the original markup."""

    return " ".join(html_lib.unescape(raw).split())


def make_record(target: LinkTarget, match: MatchResult, section: int) -> PlacementRecord:
    return PlacementRecord(
        url=target.url,
        anchor_text=anchor_text(match.text),
        start_offset=match.start,
        end_offset=match.end,
        match_type=match.match_type,
        score=match.validation.score,
        tier=match.validation.tier,
        relevance=match.relevance,
        section=section,
    )
