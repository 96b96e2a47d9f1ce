"""Title cleaning tests."""

from __future__ import annotations

import pytest

from linkweaver.engine.normalizer import clean_title, strip_title_suffixes, title_words


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Marathon Training Basics - Guide", "marathon training basics"),
        ("Best Trail Shoes (2025)", "best trail shoes"),
        ("Hydration Tips for Runners | Acme Running", "hydration tips for runners"),
        ("Recovery Days Explained - The Running Blog", "recovery days explained"),
        ("Interval Workouts That Work - Complete Guide | Acme 2024", "interval workouts that work"),
    ],
)
def test_clean_title_strips_suffix_noise(title, expected):
    assert clean_title(title) == expected


def test_clean_title_keeps_inner_numbers_and_hyphens():
    cleaned = clean_title("Ultimate 2026 Running for Weight Loss Plan: 8-Week Proven Results")

    assert cleaned == "ultimate 2026 running for weight loss plan 8-week proven results"


def test_suffix_stripping_never_empties_a_title():
    assert strip_title_suffixes("2024") == "2024"
    assert clean_title("") == ""


def test_title_words_drop_single_characters():
    assert title_words("A Running Plan: 5 Steps") == ["running", "plan", "steps"]
    assert title_words("Trail Shoes") == ["trail", "shoes"]
