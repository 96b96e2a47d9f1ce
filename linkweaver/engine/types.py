"""Typed data structures used by the injection pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

MATCH_TYPES = ("exact", "semantic", "contextual", "bridge")
TIERS = ("excellent", "good", "acceptable", "rejected")


@dataclass(frozen=True)
class LinkTarget:
    """Internal page a document may link to. Identity is the url."""

    url: str
    title: str
    slug: Optional[str] = None
    keywords: Tuple[str, ...] = ()

    @property
    def effective_slug(self) -> str:
        """Return the slug, deriving it from the url path when missing."""

        if self.slug:
            return self.slug
        path = urlparse(self.url).path.rstrip("/")
        return path.split("/")[-1] if path else ""


@dataclass(frozen=True)
class AnchorCandidate:
    """Provisional anchor phrase generated for a target."""

    phrase: str
    derived_from_title: bool
    heuristic_score: float
    validation_score: int
    strategy: str

    @property
    def total_score(self) -> float:
        return self.heuristic_score + self.validation_score


@dataclass(frozen=True)
class AnchorValidation:
    """Quality verdict for an anchor phrase."""

    valid: bool
    score: int
    tier: str
    word_count: int
    meaningful_word_count: int
    reason: Optional[str] = None
    suggested_fix: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    """A validated insertion span found in the document."""

    start: int
    end: int
    text: str
    match_type: str
    relevance: float
    validation: AnchorValidation
    expanded: bool = False


@dataclass(frozen=True)
class PlacementRecord:
    """A committed link. Offsets refer to the original document."""

    url: str
    anchor_text: str
    start_offset: int
    end_offset: int
    match_type: str
    score: int
    tier: str
    relevance: float
    section: int


@dataclass(frozen=True)
class QualityReport:
    """Tier histogram for a run."""

    excellent_count: int = 0
    good_count: int = 0
    acceptable_count: int = 0
    rejected_count: int = 0
    avg_score: float = 0.0


@dataclass(frozen=True)
class InjectionResult:
    """Modified document plus the report of what happened to each target."""

    document: str
    links_added: List[PlacementRecord]
    skipped: Dict[str, str]
    quality_report: QualityReport = field(default_factory=QualityReport)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document": self.document,
            "links_added": [asdict(record) for record in self.links_added],
            "skipped": dict(self.skipped),
            "quality_report": asdict(self.quality_report),
        }
