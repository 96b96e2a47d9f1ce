"""Per-run bookkeeping for the scheduler and the bridge fallback."""

from __future__ import annotations

from bisect import bisect_left, insort
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .config import InjectionConfig
from .text import normalize_phrase
from .types import PlacementRecord


@dataclass
class InjectionState:
    """Mutable state owned by exactly one injection run.

    Created at the start of a run and discarded with it; nothing here is
    shared between documents.
    """

    used_urls: Set[str] = field(default_factory=set)
    used_anchors: Set[str] = field(default_factory=set)
    used_offsets: List[int] = field(default_factory=list)
    section_counts: Dict[int, int] = field(default_factory=dict)
    records: List[PlacementRecord] = field(default_factory=list)
    spans: List[Tuple[int, int]] = field(default_factory=list)
    rejected_urls: Set[str] = field(default_factory=set)
    insertions: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def link_count(self) -> int:
        return len(self.records)

    def too_close(self, offset: int, min_distance: int) -> bool:
        """True when a committed offset lies within ``min_distance`` of ``offset``."""

        if not self.used_offsets or min_distance <= 0:
            return False
        index = bisect_left(self.used_offsets, offset)
        for neighbour in self.used_offsets[max(index - 1, 0):index + 1]:
            if abs(neighbour - offset) < min_distance:
                return True
        return False

    def overlaps(self, start: int, end: int) -> bool:
        for used_start, used_end in self.spans:
            if start < used_end and used_start < end:
                return True
            if start == end and used_start < start < used_end:
                return True
        return False

    def section_full(self, section: int, cap: int) -> bool:
        return self.section_counts.get(section, 0) >= cap

    def anchor_used(self, anchor_text: str) -> bool:
        return normalize_phrase(anchor_text) in self.used_anchors

    def violation(
        self,
        start: int,
        end: int,
        anchor_text: str,
        section: int,
        config: InjectionConfig,
    ) -> Optional[str]:
        """Return why a placement would break a run constraint, or None."""

        if self.anchor_used(anchor_text):
            return "anchor already used"
        if self.overlaps(start, end):
            return "overlaps an existing link"
        if self.too_close(start, config.min_distance_between_links):
            return f"within {config.min_distance_between_links} characters of another link"
        if self.section_full(section, config.max_links_per_section):
            return f"section already has {config.max_links_per_section} links"
        return None

    def commit(self, record: PlacementRecord) -> None:
        self.records.append(record)
        self.used_urls.add(record.url)
        self.used_anchors.add(normalize_phrase(record.anchor_text))
        insort(self.used_offsets, record.start_offset)
        self.section_counts[record.section] = self.section_counts.get(record.section, 0) + 1
        self.spans.append((record.start_offset, record.end_offset))
