"""
Tests for the input sanitization and validation gate.

Run with: pytest tests/test_sanitize.py -v
"""
from __future__ import annotations

import pytest

from stackdaily.catalogs import EXPERTISE_OPTIONS
from stackdaily.security.sanitize import (
    extract_x_handle,
    sanitize_display_string,
    sanitize_string,
    sanitize_url,
    sanitize_username,
    validate_allowed_value,
    validate_array_values,
    validate_submission,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _raw(**overrides) -> dict:
    raw = {
        "name": "Ada Lovelace",
        "telegram": "@ada_l",
        "xProfile": "https://x.com/ada_l",
        "expertise": ["Sales", "Ghostwriting"],
        "experienceLevel": "1-2",
        "monthlyRate": "500-1000",
        "biggestWin": "Grew a community to 20k members",
        "portfolio": "https://ada.dev",
    }
    raw.update(overrides)
    return raw


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value", [None, 42, 3.5, ["a"], {"a": 1}, b"bytes", True])
def test_non_string_input_yields_empty(value):
    assert sanitize_display_string(value) == ""
    assert sanitize_username(value) == ""
    assert sanitize_string(value) == ""
    assert sanitize_url(value) == ""


def test_display_string_trims_and_truncates():
    assert sanitize_display_string("   hello   ") == "hello"
    assert len(sanitize_display_string("x" * 900, 100)) == 100


def test_display_string_strips_control_chars_but_keeps_newlines_and_tabs():
    value = "a\x00b\x07c\x1bd\x7fe\nf\tg"
    assert sanitize_display_string(value) == "abcde\nf\tg"


def test_display_string_does_not_escape_markup():
    assert sanitize_display_string("<b>Tom & Jerry</b>") == "<b>Tom & Jerry</b>"


def test_sanitize_string_escapes_markup():
    assert sanitize_string("<b>") == "&lt;b&gt;"
    assert sanitize_string("\"it's\" & more") == "&quot;it&#x27;s&quot; &amp; more"


def test_username_keeps_only_word_characters():
    assert sanitize_username("a!@# b_2") == "ab_2"
    assert sanitize_username("@handle") == "handle"


def test_username_respects_max_length():
    assert len(sanitize_username("a" * 80, 50)) <= 50


@pytest.mark.parametrize(
    "value, expected",
    [
        ("@ada_l", "ada_l"),
        ("ada_l", "ada_l"),
        ("https://x.com/ada_l", "ada_l"),
        ("https://www.twitter.com/ada_l/", "ada_l"),
        ("x.com/ada_l?s=20", "ada_l"),
    ],
)
def test_extract_x_handle(value, expected):
    assert extract_x_handle(value) == expected


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

def test_url_rejects_garbage():
    assert sanitize_url("not a url") == ""


def test_url_rejects_other_schemes():
    assert sanitize_url("ftp://x.com") == ""
    assert sanitize_url("javascript:alert(1)") == ""


def test_url_requires_scheme():
    assert sanitize_url("example.com") == ""


def test_url_accepts_https():
    assert sanitize_url("https://example.com/x") == "https://example.com/x"


def test_url_is_trimmed_and_canonicalized():
    assert sanitize_url("  HTTP://Example.COM  ") == "http://example.com/"


def test_url_empty_string():
    assert sanitize_url("   ") == ""


# ---------------------------------------------------------------------------
# Allow-lists
# ---------------------------------------------------------------------------

def test_allowed_value():
    assert validate_allowed_value("3+", ("personal", "3+")) == "3+"
    assert validate_allowed_value("10+", ("personal", "3+")) == ""
    assert validate_allowed_value(3, ("3",)) == ""


def test_array_values_filter_and_preserve_order():
    result = validate_array_values(["Sales", "Hacking", 7, "Clipping"], EXPERTISE_OPTIONS)
    assert result == ["Sales", "Clipping"]


def test_array_values_cap_at_ten():
    allowed = [f"tag{i}" for i in range(20)]
    result = validate_array_values(list(reversed(allowed)), allowed)
    assert result == list(reversed(allowed))[:10]


def test_array_values_non_list():
    assert validate_array_values("Sales", EXPERTISE_OPTIONS) == []
    assert validate_array_values(None, EXPERTISE_OPTIONS) == []


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------

def test_valid_submission_is_normalised():
    sub = validate_submission(_raw())
    assert sub is not None
    assert sub.name == "Ada Lovelace"
    assert sub.telegram == "ada_l"
    assert sub.x_profile == "ada_l"
    assert sub.expertise == ("Sales", "Ghostwriting")
    assert sub.portfolio == "https://ada.dev/"


def test_submission_is_immutable():
    sub = validate_submission(_raw())
    with pytest.raises(Exception):
        sub.name = "Mallory"


def test_missing_experience_level_rejected():
    assert validate_submission(_raw(experienceLevel="")) is None
    raw = _raw()
    del raw["experienceLevel"]
    assert validate_submission(raw) is None


def test_unknown_experience_level_rejected():
    assert validate_submission(_raw(experienceLevel="ten-years")) is None


def test_no_valid_skill_tags_rejected():
    assert validate_submission(_raw(expertise=[])) is None
    assert validate_submission(_raw(expertise=["Astrology"])) is None


@pytest.mark.parametrize("field", ["name", "telegram", "xProfile", "biggestWin"])
def test_required_text_fields(field):
    assert validate_submission(_raw(**{field: "   "})) is None


def test_telegram_of_symbols_only_rejected():
    assert validate_submission(_raw(telegram="@@!!")) is None


def test_optional_fields_may_be_missing_or_invalid():
    sub = validate_submission(_raw(monthlyRate="a lot", portfolio="ftp://files"))
    assert sub is not None
    assert sub.monthly_rate == ""
    assert sub.portfolio == ""


def test_non_mapping_payload_rejected():
    assert validate_submission(None) is None
    assert validate_submission(["name"]) is None
    assert validate_submission("name=ada") is None


def test_display_string_retrims_after_control_chars():
    assert sanitize_display_string("\x00   \x00") == ""
    assert validate_submission(_raw(name="\x00   \x00")) is None


# ---------------------------------------------------------------------------
# "Other" free-text options
# ---------------------------------------------------------------------------

def test_other_experience_with_description_accepted():
    sub = validate_submission(_raw(experienceLevel="other", otherExperience="5 years agency"))
    assert sub is not None
    assert sub.experience_level == "other"
    assert sub.other_experience == "5 years agency"


def test_other_experience_requires_description():
    assert validate_submission(_raw(experienceLevel="other")) is None
    assert validate_submission(_raw(experienceLevel="other", otherExperience="  \x07 ")) is None


def test_other_experience_text_ignored_for_catalog_level():
    sub = validate_submission(_raw(experienceLevel="3+", otherExperience="stray"))
    assert sub.other_experience == ""


def test_other_expertise_extends_tags():
    sub = validate_submission(_raw(otherExpertise="  Copywriting "))
    assert sub.expertise == ("Sales", "Ghostwriting", "Copywriting")


def test_other_expertise_alone_satisfies_skill_requirement():
    sub = validate_submission(_raw(expertise=[], otherExpertise="Copywriting"))
    assert sub is not None
    assert sub.expertise == ("Copywriting",)


def test_other_expertise_respects_cap_and_length():
    sub = validate_submission(_raw(expertise=list(EXPERTISE_OPTIONS), otherExpertise="Copywriting"))
    assert len(sub.expertise) == 10
    assert "Copywriting" not in sub.expertise
    sub = validate_submission(_raw(otherExpertise="x" * 300))
    assert len(sub.expertise[-1]) == 100


def test_other_monthly_rate():
    sub = validate_submission(_raw(monthlyRate="other", otherMonthlyRate="$5k"))
    assert sub.monthly_rate == "other"
    assert sub.other_monthly_rate == "$5k"
    sub = validate_submission(_raw(monthlyRate="other"))
    assert sub is not None
    assert sub.monthly_rate == ""
