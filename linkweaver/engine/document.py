"""Tokenized view of an HTML fragment with stable character offsets.

The document is split once into an ordered list of spans: text runs and
markup (opening tags, closing tags, comments, doctype/processing
instructions). Every "can a link go here" question the engine asks is
answered against these spans rather than with regex lookarounds over the raw
string, so a phrase that happens to occur inside an attribute value or an
existing anchor is never a match.

Offsets always refer to the original string. The document is never mutated;
edits are collected and applied in one pass by :func:`apply_splices`.
"""

from __future__ import annotations

import html as html_lib
import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import StructuralError

# Text inside these elements is never linked.
SKIP_TAGS = frozenset(
    {"a", "code", "pre", "script", "style", "textarea", "button", "h1", "h2", "h3", "h4", "h5", "h6"}
)
RAW_TEXT_TAGS = frozenset({"script", "style", "textarea"})
VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)

_TAG_NAME_RE = re.compile(r"</?\s*([a-zA-Z][\w:-]*)")
_UNSAFE_ATTRIBUTE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


@dataclass(frozen=True)
class Span:
    """A contiguous piece of the document."""

    kind: str
    start: int
    end: int
    tag: str = ""
    linkable: bool = False


class Document:
    """Immutable, tokenized HTML document."""

    def __init__(self, html: str) -> None:
        if html is None or not isinstance(html, str) or not html.strip():
            raise StructuralError("document is empty")
        self.html = html
        self.spans: List[Span] = []
        self.text_runs: List[Span] = []
        self.h2_offsets: List[int] = []
        self.paragraph_ends: List[int] = []
        self._parse()
        self._run_starts = [run.start for run in self.text_runs]

    def __len__(self) -> int:
        return len(self.html)

    # Parsing

    def _parse(self) -> None:
        html = self.html
        length = len(html)
        depth: Dict[str, int] = {}
        position = 0
        text_start = 0

        while position < length:
            lt = html.find("<", position)
            if lt == -1:
                break
            following = html[lt + 1:lt + 2]
            if html.startswith("<!--", lt):
                close = html.find("-->", lt + 4)
                end = length if close == -1 else close + 3
                kind = "comment"
            elif following and (following.isalpha() or following in "/!?"):
                end = _tag_end(html, lt)
                if following == "/":
                    kind = "close"
                elif following in "!?":
                    kind = "doctype"
                else:
                    kind = "open"
            else:
                position = lt + 1
                continue

            self._add_text(text_start, lt, depth)
            markup = html[lt:end]
            name_match = _TAG_NAME_RE.match(markup)
            tag = name_match.group(1).lower() if name_match else ""
            self.spans.append(Span(kind=kind, start=lt, end=end, tag=tag))
            position = text_start = end

            if kind == "open" and tag:
                if tag == "h2":
                    self.h2_offsets.append(lt)
                if tag in VOID_TAGS or markup.rstrip(">").rstrip().endswith("/"):
                    continue
                if tag in SKIP_TAGS:
                    depth[tag] = depth.get(tag, 0) + 1
                if tag in RAW_TEXT_TAGS:
                    close_at = _find_closing(html, tag, end)
                    self._add_text(end, close_at, depth)
                    position = text_start = close_at
            elif kind == "close" and tag:
                if tag in SKIP_TAGS and depth.get(tag):
                    depth[tag] -= 1
                if tag == "p" and not any(depth.values()):
                    self.paragraph_ends.append(end)

        self._add_text(text_start, length, depth)

    def _add_text(self, start: int, end: int, depth: Dict[str, int]) -> None:
        if end <= start:
            return
        run = Span(kind="text", start=start, end=end, linkable=not any(depth.values()))
        self.spans.append(run)
        self.text_runs.append(run)

    # Queries

    def run_at(self, offset: int) -> Optional[Span]:
        """Return the text run containing ``offset``, if any."""

        index = bisect_right(self._run_starts, offset) - 1
        if index < 0:
            return None
        run = self.text_runs[index]
        if run.start <= offset < run.end:
            return run
        return None

    def is_linkable(self, start: int, end: int) -> bool:
        """True when ``[start, end)`` sits inside one linkable text run.

        This rejects spans that touch markup, fall inside an attribute,
        inside an existing ``<a>`` (or heading, code block...) or cut through
        a character reference such as ``&amp;``.
        """

        if start < 0 or end <= start or end > len(self.html):
            return False
        run = self.run_at(start)
        if run is None or not run.linkable or end > run.end:
            return False
        return not self._cuts_entity(run, start, end)

    def section_of(self, offset: int) -> int:
        """Index of the ``<h2>`` section holding ``offset``; -1 before the first."""

        return bisect_right(self.h2_offsets, offset) - 1

    def linkable_runs(self) -> Iterator[Span]:
        return (run for run in self.text_runs if run.linkable)

    def visible_text(self, start: int = 0, end: Optional[int] = None) -> str:
        """Unescaped text of the runs overlapping ``[start, end)``."""

        stop = len(self.html) if end is None else end
        pieces = []
        first = max(bisect_right(self._run_starts, start) - 1, 0)
        for index in range(first, len(self.text_runs)):
            run = self.text_runs[index]
            if run.end <= start:
                continue
            if run.start >= stop:
                break
            pieces.append(self.html[max(run.start, start):min(run.end, stop)])
        return html_lib.unescape(" ".join(pieces))

    def _cuts_entity(self, run: Span, start: int, end: int) -> bool:
        before = self.html[run.start:start]
        amp = before.rfind("&")
        if amp != -1 and not re.search(r"[;\s]", before[amp:]):
            return True
        inside = self.html[start:end]
        amp = inside.rfind("&")
        if amp != -1 and not re.search(r"[;\s]", inside[amp:]):
            return re.match(r"&#?\w+;", self.html[start + amp:start + amp + 12]) is not None
        return False


def escape_attribute(value: str) -> str:
    """Quote-safe attribute value; refuses values that cannot be made safe."""

    if not isinstance(value, str):
        raise StructuralError(f"attribute value must be text, got {type(value).__name__}")
    if _UNSAFE_ATTRIBUTE_RE.search(value):
        raise StructuralError(f"attribute value contains control characters: {value!r}")
    return html_lib.escape(value, quote=True)


def render_link(url: str, title: str, inner_html: str, css_class: Optional[str] = None) -> str:
    """Return the ``<a>`` wrapper for ``inner_html``."""

    attributes = [f'href="{escape_attribute(url)}"', f'title="{escape_attribute(title)}"']
    if css_class:
        attributes.append(f'class="{escape_attribute(css_class)}"')
    return f"<a {' '.join(attributes)}>{inner_html}</a>"


def apply_splices(html: str, splices: Iterable[Tuple[int, int, str]]) -> str:
    """Replace each ``[start, end)`` with its text, highest offset first.

    Working right to left keeps every pending offset valid against the
    original string. Overlapping splices are a programming error.
    """

    ordered: Sequence[Tuple[int, int, str]] = sorted(splices, key=lambda item: (item[0], item[1]), reverse=True)
    result = html
    boundary = len(html)
    for start, end, replacement in ordered:
        if end > boundary or start > end:
            raise StructuralError(f"overlapping edit at {start}-{end}")
        result = result[:start] + replacement + result[end:]
        boundary = start
    return result


def _tag_end(html: str, lt: int) -> int:
    """Index just past the ``>`` closing the tag at ``lt``, honouring quotes."""

    quote = ""
    index = lt + 1
    length = len(html)
    while index < length:
        char = html[index]
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index + 1
        index += 1
    return length


def _find_closing(html: str, tag: str, start: int) -> int:
    match = re.compile(rf"</\s*{tag}\b", re.IGNORECASE).search(html, start)
    return match.start() if match else len(html)
