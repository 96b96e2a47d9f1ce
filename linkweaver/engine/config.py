"""Configuration helpers for the injection engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError


@dataclass(frozen=True)
class InjectionConfig:
    """Every option recognised by a link injection run."""

    min_links: int = 12
    max_links: int = 25
    min_distance_between_links: int = 400
    max_links_per_section: int = 2
    min_word_count: int = 3
    max_word_count: int = 7
    min_quality_score: int = 50
    max_candidates: int = 20
    fuzzy_overlap_threshold: float = 0.5
    enable_bridge_sentences: bool = True
    link_class: Optional[str] = None
    bridge_class: str = "bridge-sentence"

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if item.type == "int" and (isinstance(value, bool) or not isinstance(value, int)):
                raise ConfigError(f"{item.name} must be an integer, got {value!r}")
        for name in (
            "min_links",
            "max_links",
            "min_distance_between_links",
            "max_links_per_section",
            "max_candidates",
        ):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.min_word_count < 1:
            raise ConfigError("min_word_count must be at least 1")
        if self.min_word_count > self.max_word_count:
            raise ConfigError("min_word_count cannot exceed max_word_count")
        if not 0 <= self.min_quality_score <= 100:
            raise ConfigError("min_quality_score must be between 0 and 100")
        if not 0.0 <= self.fuzzy_overlap_threshold <= 1.0:
            raise ConfigError("fuzzy_overlap_threshold must be between 0 and 1")

    def replace(self, **changes: Any) -> "InjectionConfig":
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULTS: Dict[str, Any] = InjectionConfig().as_dict()


def load_config(path: str | Path | None = None, **overrides: Any) -> InjectionConfig:
    """Load configuration from YAML, merging with defaults.

    Keys the engine does not recognise are ignored so a shared settings file
    can carry options for other tools. Explicit ``overrides`` win over the
    file; ``None`` values in ``overrides`` are skipped.
    """

    data: Dict[str, Any] = dict(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        if not isinstance(user, dict):
            raise ConfigError(f"{path} must contain a mapping of options")
        section = user.get("linkweaver", user)
        merge_into(data, section)

    merge_into(data, {key: value for key, value in overrides.items() if value is not None})

    known = {item.name for item in fields(InjectionConfig)}
    return InjectionConfig(**{key: value for key, value in data.items() if key in known})


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
