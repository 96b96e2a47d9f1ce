"""Turn the committed placements into the final document and report."""

from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

from .config import InjectionConfig
from .document import apply_splices, render_link
from .state import InjectionState
from .types import InjectionResult, QualityReport


def build_result(
    original: str,
    state: InjectionState,
    skipped: Dict[str, str],
    titles: Mapping[str, str],
    config: InjectionConfig,
) -> InjectionResult:
    """Apply every splice in one pass and summarise the run.

    Natural links wrap the original markup of their span; bridge records
    contribute a paragraph inserted at their offset.
    """

    splices: List[Tuple[int, int, str]] = []
    for record in state.records:
        if record.match_type == "bridge":
            continue
        inner = original[record.start_offset:record.end_offset]
        title = titles.get(record.url, record.anchor_text)
        splices.append((record.start_offset, record.end_offset, render_link(record.url, title, inner, config.link_class)))
    for offset, markup in state.insertions:
        splices.append((offset, offset, markup))

    records = sorted(state.records, key=lambda record: record.start_offset)
    return InjectionResult(
        document=apply_splices(original, splices),
        links_added=records,
        skipped=dict(skipped),
        quality_report=quality_report(state),
    )


def quality_report(state: InjectionState) -> QualityReport:
    counts = {"excellent": 0, "good": 0, "acceptable": 0}
    for record in state.records:
        if record.tier in counts:
            counts[record.tier] += 1
    scores = [record.score for record in state.records]
    return QualityReport(
        excellent_count=counts["excellent"],
        good_count=counts["good"],
        acceptable_count=counts["acceptable"],
        rejected_count=len(state.rejected_urls),
        avg_score=round(sum(scores) / len(scores), 2) if scores else 0.0,
    )
