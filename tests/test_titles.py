"""
Tests for the membership card title classifier.

Run with: pytest tests/test_titles.py -v
"""
from __future__ import annotations

import pytest

from stackdaily.titles import (
    EXCEPTIONAL_KEYWORDS,
    TITLE_DESCRIPTIONS,
    Title,
    calculate_title,
    classify,
    has_exceptional_signal,
)


def test_three_plus_with_funding_is_legend():
    info = calculate_title("3+", "we raised funding and scaled revenue")
    assert info.title == "Legend"
    assert info.description == "The one projects fight over"


def test_personal_is_always_apprentice():
    assert calculate_title("personal", "built a hobby app").title == "Apprentice"
    assert calculate_title("personal", "nothing yet").title == "Apprentice"


def test_one_to_two_with_growth_is_og():
    assert calculate_title("1-2", "grew community").title == "OG"


def test_under_one_year_without_signal_is_builder():
    info = calculate_title("less-1", "no notable results")
    assert info.title == "Builder"
    assert info.description == "Putting in the reps"


@pytest.mark.parametrize(
    "experience, plain, exceptional",
    [
        ("personal", "Apprentice", "Apprentice"),
        ("less-1", "Builder", "Operator"),
        ("1-2", "Operator", "OG"),
        ("3+", "OG", "Legend"),
        ("ten-years", "Builder", "Builder"),
        ("", "Builder", "Builder"),
    ],
)
def test_decision_table(experience, plain, exceptional):
    assert calculate_title(experience, "helped out").title == plain
    assert calculate_title(experience, "went viral").title == exceptional


def test_keyword_match_is_case_insensitive():
    assert has_exceptional_signal("Co-Founder of a startup")
    assert has_exceptional_signal("10X growth")


def test_keyword_match_is_substring():
    # Accepted heuristic: "lead" matches inside "misleading"
    assert has_exceptional_signal("a misleading headline")


def test_no_signal_for_plain_text():
    assert not has_exceptional_signal("helped out with posts")
    assert not has_exceptional_signal("")


def test_every_keyword_triggers():
    for keyword in EXCEPTIONAL_KEYWORDS:
        assert has_exceptional_signal(f"we {keyword} it"), keyword


def test_tiers_are_ordered():
    assert Title.APPRENTICE < Title.BUILDER < Title.OPERATOR < Title.OG < Title.LEGEND
    assert [t.label for t in sorted(Title)] == ["Apprentice", "Builder", "Operator", "OG", "Legend"]


def test_every_tier_has_description():
    assert set(TITLE_DESCRIPTIONS) == set(Title)


def test_classification_is_deterministic():
    first = calculate_title("1-2", "launched a product")
    second = calculate_title("1-2", "launched a product")
    assert first == second
    assert classify("1-2", "launched a product") is Title.OG


@pytest.mark.parametrize(
    "experience, biggest_win",
    [
        (["3+"], "raised"),
        ({"level": "3+"}, "raised"),
        (3, "raised"),
        (None, None),
        ("3+", 5),
        ("3+", ["raised"]),
    ],
)
def test_non_string_inputs_never_raise(experience, biggest_win):
    info = calculate_title(experience, biggest_win)
    if isinstance(experience, str):
        assert info.title == "OG"
    else:
        assert info.title == "Builder"


def test_other_experience_is_builder():
    assert calculate_title("other", "scaled revenue 10x").title == "Builder"
