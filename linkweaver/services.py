"""Service functions sitting between the views and the injection engine.

These helpers prepare user supplied content for the engine (wrapping plain
text, removing links that are already present), run an injection with the
configured options and check the engine's output with an independent HTML
parser so the views can report whether the prose survived untouched.
"""

from __future__ import annotations

import html as html_lib
import re
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup  # type: ignore

from .engine import InjectionConfig, InjectionResult, LinkTarget, inject_links, load_config


@dataclass(frozen=True)
class InjectionOutcome:
    """Engine result plus the text preservation check."""

    result: InjectionResult
    text_preserved: bool

    def to_dict(self) -> Dict[str, Any]:
        payload = self.result.to_dict()
        payload['text_preserved'] = self.text_preserved
        return payload


def _soup(html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html, 'lxml')
    except Exception:
        # Fallback to html.parser if lxml isn't installed
        return BeautifulSoup(html, 'html.parser')


def _fragment(soup: BeautifulSoup) -> str:
    """Serialise ``soup`` without the ``<html><body>`` wrapper lxml adds."""

    body = soup.body
    if body is not None:
        return body.decode_contents()
    return str(soup)


def normalize_slug_from_url(url: str) -> Tuple[str, str]:
    """Derive a raw and normalized slug from a URL path segment.

    The raw slug is the final non-empty segment of the URL path with
    trailing slashes removed. The normalised slug converts hyphens and
    underscores to spaces and lowercases the string.
    """

    parsed = urlparse(url)
    path = parsed.path.rstrip('/')
    raw = path.split('/')[-1] if path else ''
    normalized = raw.replace('-', ' ').replace('_', ' ').lower()
    return raw, normalized


def build_targets(pairs: Sequence[Tuple[str, str]]) -> list[LinkTarget]:
    """Turn ``(title, url)`` pairs into engine targets with url slugs."""

    targets: list[LinkTarget] = []
    for title, url in pairs:
        raw_slug, _ = normalize_slug_from_url(url)
        targets.append(LinkTarget(url=url, title=title, slug=raw_slug or None))
    return targets


def wrap_plain_text(text: str) -> str:
    """Wrap each non-empty line of plain text in an escaped ``<p>``."""

    paragraphs = [line.strip() for line in text.splitlines() if line.strip()]
    return ''.join(f'<p>{html_lib.escape(line, quote=False)}</p>' for line in paragraphs)


def strip_existing_links_from_html(html: str) -> str:
    """Remove anchor tags from ``html`` while preserving their inner content."""

    if not html:
        return html

    soup = _soup(html)
    for anchor in soup.find_all('a'):
        anchor.unwrap()

    return _fragment(soup)


def text_content(html: str) -> str:
    """Visible text of ``html`` with whitespace collapsed."""

    if not html:
        return ''
    soup = _soup(html)
    for element in soup.find_all(['script', 'style']):
        element.decompose()
    return re.sub(r'\s+', ' ', soup.get_text('')).strip()


def remove_bridge_paragraphs(html: str, bridge_class: str) -> str:
    """Drop the paragraphs the engine added to host bridge links."""

    if not html or not bridge_class:
        return html
    soup = _soup(html)
    for paragraph in soup.find_all('p', class_=bridge_class):
        paragraph.decompose()
    return _fragment(soup)


def verify_text_preserved(original: str, linked: str, bridge_class: str = 'bridge-sentence') -> bool:
    """True when injection only added link wrappers and bridge paragraphs.

    Whitespace is ignored: bridge paragraphs are separated from their
    neighbours by a newline that stays behind when they are removed.
    """

    before = re.sub(r'\s+', '', text_content(original))
    after = re.sub(r'\s+', '', text_content(remove_bridge_paragraphs(linked, bridge_class)))
    return before == after


def run_injection(
    content: str,
    pairs: Sequence[Tuple[str, str]],
    *,
    is_html: bool = True,
    strip_links: bool = False,
    current_url: str | None = None,
    config_path: str | None = None,
    overrides: Dict[str, Any] | None = None,
) -> InjectionOutcome:
    """Prepare ``content``, inject links for ``pairs`` and verify the output.

    Options come from the YAML file at ``config_path`` (when it exists) with
    ``overrides`` applied on top. Raises the engine's ``StructuralError`` for
    documents that cannot be processed.
    """

    html_input = content if is_html else wrap_plain_text(content)
    if strip_links:
        html_input = strip_existing_links_from_html(html_input)

    config: InjectionConfig = load_config(config_path, **(overrides or {}))
    result = inject_links(html_input, build_targets(pairs), config, current_url=current_url or None)
    preserved = verify_text_preserved(html_input, result.document, config.bridge_class)
    return InjectionOutcome(result=result, text_preserved=preserved)
