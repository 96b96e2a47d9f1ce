"""Anchor validation tests."""

from __future__ import annotations

import pytest

from linkweaver.engine.anchors import tier_for_score, validate_anchor


def test_empty_and_non_text_input_is_rejected():
    for phrase in ("", "   ", None):
        result = validate_anchor(phrase)
        assert not result.valid
        assert result.score == 0
        assert result.tier == "rejected"
        assert result.reason == "Empty or invalid input"


def test_too_short_suggests_title_prefix():
    result = validate_anchor("running shoes", "Trail Running Shoes for Wide Feet")

    assert not result.valid
    assert result.word_count == 2
    assert "minimum is 3" in result.reason
    assert result.suggested_fix == 'Try: "Trail Running Shoes for Wide"'


def test_too_long_is_rejected():
    result = validate_anchor("one two three four five six seven eight")

    assert not result.valid
    assert "maximum is 7" in result.reason
    assert result.suggested_fix.startswith("Shorten to:")


@pytest.mark.parametrize(
    "phrase",
    [
        "click here for running plans",
        "read more about running",
        "visit our training page",
        "www example running guide",
    ],
)
def test_banned_patterns(phrase):
    result = validate_anchor(phrase)

    assert not result.valid
    assert "banned pattern" in result.reason


def test_weak_starter_is_rejected():
    result = validate_anchor("the best running plans")

    assert not result.valid
    assert result.reason.startswith("Starts with weak word")
    assert result.suggested_fix == 'Remove "the": "best running plans"'


def test_stopword_ending_is_rejected():
    result = validate_anchor("running plans for the")

    assert not result.valid
    assert result.reason.startswith("Ends with stopword")


def test_needs_two_meaningful_words():
    result = validate_anchor("ab cd running")

    assert not result.valid
    assert result.meaningful_word_count == 1
    assert "meaningful" in result.reason


def test_score_breakdown_without_title():
    result = validate_anchor("running for weight loss")

    assert result.valid
    assert result.word_count == 4
    assert result.meaningful_word_count == 3
    assert result.score == 90
    assert result.tier == "excellent"


def test_title_overlap_is_capped_at_one_hundred():
    result = validate_anchor("running for weight loss", "Running for Weight Loss Plan")

    assert result.score == 100


def test_capitalised_word_after_first_scores_higher():
    proper = validate_anchor("guide to Boston marathon")
    plain = validate_anchor("guide to boston marathon")

    assert plain.score == 95
    assert proper.score == 100


def test_power_word_bonus():
    assert validate_anchor("proven training plans").score == 93
    assert validate_anchor("steady training plans").score == 90


def test_word_count_bounds_follow_config(injection_config):
    relaxed = injection_config.replace(min_word_count=2)

    result = validate_anchor("running shoes", config=relaxed)

    assert result.valid
    assert result.score == 80
    assert result.tier == "good"


@pytest.mark.parametrize(
    "score, expected",
    [(100, "excellent"), (85, "excellent"), (84, "good"), (70, "good"), (69, "acceptable"), (50, "acceptable"), (49, "rejected")],
)
def test_tier_boundaries(score, expected):
    assert tier_for_score(score) == expected


def test_tier_respects_quality_floor():
    assert tier_for_score(55, min_quality_score=60) == "rejected"


def test_validation_is_pure():
    first = validate_anchor("marathon pacing strategy", "Marathon Pacing Strategy")
    second = validate_anchor("marathon pacing strategy", "Marathon Pacing Strategy")

    assert first == second


def test_title_overlap_counts_only_meaningful_words():
    # "for" is a substring of "comfortable" but earns no overlap bonus.
    validation = validate_anchor("shoes for runners", "Comfortable Running Shoes")

    assert validation.score == 87
