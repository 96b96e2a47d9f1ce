"""Bridge sentence fallback tests."""

from __future__ import annotations

from itertools import combinations

from linkweaver.engine.bridge import insertion_points, title_anchor
from linkweaver.engine.document import Document
from linkweaver.engine.index import inject_links
from linkweaver.engine.lexicon import BRIDGE_TEMPLATES

from .conftest import FILLER, make_article, make_target

UNMENTIONED = [
    make_target("/taper/", "Marathon Taper Week Checklist"),
    make_target("/carbon-shoes/", "Choosing Carbon Plated Racing Shoes"),
    make_target("/injury-drills/", "Strength Drills for Injury Prevention"),
]


def filler_article(sections: int = 5) -> str:
    return make_article(*[(f"Part {index + 1}", [FILLER, FILLER]) for index in range(sections)])


def test_bridges_fill_up_to_min_links(injection_config):
    html = filler_article()
    config = injection_config.replace(min_links=3)

    result = inject_links(html, UNMENTIONED, config)

    assert len(result.links_added) == 3
    assert all(record.match_type == "bridge" for record in result.links_added)
    assert result.skipped == {}
    assert result.document.count('<p class="bridge-sentence">') == 3

    document = Document(html)
    low, high = 0.2 * len(html), 0.8 * len(html)
    for record in result.links_added:
        assert record.start_offset == record.end_offset
        assert record.start_offset in document.paragraph_ends
        assert low <= record.start_offset <= high
    for left, right in combinations(result.links_added, 2):
        assert abs(left.start_offset - right.start_offset) >= config.min_distance_between_links


def test_bridge_sentence_markup(injection_config):
    html = filler_article()
    config = injection_config.replace(min_links=1)

    result = inject_links(html, UNMENTIONED[:1], config)

    record = result.links_added[0]
    link = f'<a href="/taper/" title="Marathon Taper Week Checklist">{record.anchor_text}</a>'
    sentence = BRIDGE_TEMPLATES[0].format(anchor=link)
    assert f'\n<p class="bridge-sentence">{sentence}</p>' in result.document


def test_bridges_can_be_disabled(injection_config):
    html = filler_article()
    config = injection_config.replace(enable_bridge_sentences=False)

    result = inject_links(html, UNMENTIONED, config)

    assert result.links_added == []
    assert result.document == html
    assert set(result.skipped) == {target.url for target in UNMENTIONED}


def test_bridges_stop_when_max_links_is_lower(injection_config):
    config = injection_config.replace(min_links=3, max_links=1)

    result = inject_links(filler_article(), UNMENTIONED, config)

    assert len(result.links_added) == 1


def test_bridge_failure_extends_reason(injection_config):
    short = make_target("/shoes/", "Trail Shoes")

    result = inject_links(filler_article(), [short], injection_config)

    reason = result.skipped["/shoes/"]
    assert reason.startswith("no candidates")
    assert "bridge anchor rejected" in reason
    assert result.quality_report.rejected_count == 1


def test_no_bridge_outside_the_middle_band(injection_config):
    html = make_article(("Only", [FILLER]))

    assert insertion_points(Document(html)) == []


def test_title_anchor_drops_weak_words():
    assert title_anchor("The Complete Guide to Tempo Runs and Threshold Work") == "complete guide to tempo runs"
    assert title_anchor("How to Pace a Half Marathon for Beginners") == "pace half marathon for beginners"


def test_bridge_never_reuses_an_anchor(injection_config):
    twins = [
        make_target("/taper-a/", "Marathon Taper Week Checklist"),
        make_target("/taper-b/", "Marathon Taper Week Checklist"),
    ]
    config = injection_config.replace(min_links=2, max_candidates=1)

    result = inject_links(filler_article(), twins, config)

    anchors = [record.anchor_text.lower() for record in result.links_added]
    assert len(anchors) == len(set(anchors)) == 1
    assert result.links_added[0].url == "/taper-a/"
    assert "bridge anchor already used" in result.skipped["/taper-b/"]
