"""Coordinator for the link injection pipeline."""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Dict, Iterable, List, Sequence, Tuple

from . import bridge as bridge_module
from . import placement as placement_module
from . import report as report_module
from .config import InjectionConfig
from .document import Document
from .state import InjectionState
from .types import InjectionResult, LinkTarget

logger = logging.getLogger(__name__)


def inject_links(
    document: str,
    targets: Sequence[LinkTarget],
    config: InjectionConfig | None = None,
    *,
    current_url: str | None = None,
) -> InjectionResult:
    """Return ``document`` with internal links spliced in.

    Raises :class:`~linkweaver.engine.errors.StructuralError` when the
    document is empty or a link attribute cannot be quoted safely. Anything
    target specific is reported through ``skipped`` instead.
    """

    settings = config or InjectionConfig()
    parsed = Document(document)
    state = InjectionState()
    skipped: Dict[str, str] = {}

    pending = placement_module.schedule_links(parsed, targets, settings, state, skipped, current_url=current_url)
    natural = state.link_count
    bridged = bridge_module.bridge_links(parsed, pending, settings, state, skipped)

    titles = {target.url: target.title for target in targets}
    result = report_module.build_result(document, state, skipped, titles, settings)
    logger.info(
        "Injected %d links (%d natural, %d bridge) for %d targets; %d skipped",
        len(result.links_added),
        natural,
        len(bridged),
        len(targets),
        len(result.skipped),
    )
    return result


def dry_run(
    jobs: Iterable[Tuple[str, Sequence[LinkTarget]]],
    config: InjectionConfig | None = None,
) -> Dict[str, float | Dict[str, int]]:
    """Return diagnostic metrics for a batch of ``(document, targets)`` jobs."""

    settings = config or InjectionConfig()

    total_documents = 0
    documents_with_links = 0
    documents_meeting_minimum = 0
    total_links = 0
    bridge_links = 0
    match_types: Counter = Counter()
    skip_reasons: Counter = Counter()
    scores: List[int] = []

    for document, targets in jobs:
        total_documents += 1
        result = inject_links(document, targets, settings)
        links = result.links_added
        if links:
            documents_with_links += 1
        if len(links) >= min(settings.min_links, settings.max_links):
            documents_meeting_minimum += 1
        total_links += len(links)
        for record in links:
            match_types[record.match_type] += 1
            scores.append(record.score)
            if record.match_type == "bridge":
                bridge_links += 1
        for reason in result.skipped.values():
            skip_reasons[_reason_key(reason)] += 1

    documents = total_documents or 1
    return {
        "coverage": documents_with_links / documents,
        "minimum_met_rate": documents_meeting_minimum / documents,
        "avg_links_per_document": total_links / documents,
        "bridge_rate": bridge_links / total_links if total_links else 0.0,
        "match_type_diversity_index": _shannon_entropy(match_types),
        "mean_anchor_score": sum(scores) / len(scores) if scores else 0.0,
        "match_type_counts": dict(match_types),
        "skip_reason_counts": dict(skip_reasons),
    }


def _reason_key(reason: str) -> str:
    """Collapse a skip reason to its leading clause."""

    head = reason.split(";")[0].split(":")[0].split("(")[0]
    return head.strip()


def _shannon_entropy(counter: Counter) -> float:
    total = sum(counter.values())
    if total == 0:
        return 0.0
    entropy = 0.0
    for count in counter.values():
        probability = count / total
        entropy -= probability * math.log(probability)
    if len(counter) <= 1:
        return 0.0
    return entropy / math.log(len(counter))
