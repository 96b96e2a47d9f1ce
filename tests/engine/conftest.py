"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import pytest

from linkweaver.engine.config import load_config
from linkweaver.engine.types import LinkTarget

# Neutral prose used to push phrases far enough apart; about 510 characters.
FILLER = (
    "Steady effort builds a durable aerobic base over many months of consistent running. " * 6
).strip()


@pytest.fixture()
def injection_config():
    """Provide the default injection configuration."""

    return load_config(None)


def make_target(
    url: str,
    title: str,
    *,
    slug: str | None = None,
    keywords: Iterable[str] = (),
) -> LinkTarget:
    return LinkTarget(url=url, title=title, slug=slug, keywords=tuple(keywords))


def make_article(
    *sections: Tuple[str, Sequence[str]],
    intro: str | None = None,
) -> str:
    """Build an article from ``(heading, paragraphs)`` pairs."""

    parts = []
    if intro:
        parts.append(f"<p>{intro}</p>")
    for heading, paragraphs in sections:
        parts.append(f"<h2>{heading}</h2>")
        parts.extend(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    return "\n".join(parts)


TOPICS = (
    "hill", "tempo", "fartlek", "threshold", "recovery", "interval",
    "sprint", "ladder", "pyramid", "cadence", "stride", "treadmill",
    "track", "trail", "mobility", "plyometric", "core", "balance",
    "stretching", "foam", "yoga", "pilates", "cycling", "swimming",
    "rowing", "elliptical", "stair", "kettlebell", "barbell", "dumbbell",
)


def workout_target(topic: str) -> LinkTarget:
    return make_target(f"/workouts/{topic}/", f"Weekly {topic.title()} Workout Plan Ideas")


def workout_paragraph(topic: str) -> str:
    return f"This section explains a simple {topic} workout plan in detail. {FILLER}"


def workout_article(topics: Sequence[str], per_section: int = 1) -> str:
    """One ``<h2>`` section per ``per_section`` topics, one paragraph per topic."""

    sections = []
    for index in range(0, len(topics), per_section):
        chunk = topics[index:index + per_section]
        sections.append((f"Part {index // per_section + 1}", [workout_paragraph(topic) for topic in chunk]))
    return make_article(*sections)
