"""Semantic internal-link injection engine."""

from .anchors import validate_anchor
from .candidates import generate_candidates
from .config import DEFAULTS, InjectionConfig, load_config
from .errors import ConfigError, LinkweaverError, StructuralError
from .index import dry_run, inject_links
from .normalizer import clean_title, title_words
from .types import (
    AnchorCandidate,
    AnchorValidation,
    InjectionResult,
    LinkTarget,
    PlacementRecord,
    QualityReport,
)

__all__ = [
    "AnchorCandidate",
    "AnchorValidation",
    "ConfigError",
    "DEFAULTS",
    "InjectionConfig",
    "InjectionResult",
    "LinkTarget",
    "LinkweaverError",
    "PlacementRecord",
    "QualityReport",
    "StructuralError",
    "clean_title",
    "dry_run",
    "generate_candidates",
    "inject_links",
    "load_config",
    "title_words",
    "validate_anchor",
]
