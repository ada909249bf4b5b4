"""
sanitize.py — Input sanitization and validation gate
=====================================================
Converts untrusted form input into a well-formed Submission or rejects
it. Helpers never raise: anything unusable collapses to an empty value,
and callers treat "empty after sanitization" as a validation failure.
"""
from __future__ import annotations

import html
import logging
import re
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from pydantic import HttpUrl, TypeAdapter, ValidationError

from ..catalogs import EXPERIENCE_VALUES, EXPERTISE_OPTIONS, MONTHLY_RATE_VALUES, OTHER
from ..schemas import Submission

logger = logging.getLogger("stackdaily.sanitize")

MAX_ARRAY_ITEMS = 10
MAX_URL_LENGTH = 500

# Field limits for the onboarding form
NAME_MAX = 100
HANDLE_MAX = 50
BIGGEST_WIN_MAX = 1000
OTHER_TEXT_MAX = 100

# Control characters except \t (0x09), \n (0x0a) and \r (0x0d)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_NON_USERNAME = re.compile(r"[^A-Za-z0-9_]")
_X_PROFILE_PREFIX = re.compile(r"^(https?://)?(www\.)?(twitter\.com|x\.com)/", re.IGNORECASE)

_http_url = TypeAdapter(HttpUrl)


def sanitize_display_string(value: Any, max_length: int = 500) -> str:
    """Trim, truncate and strip control characters. No markup escaping."""
    if not isinstance(value, str):
        return ""
    # Trim again: removed control chars can expose whitespace-only text
    return _CONTROL_CHARS.sub("", value.strip()[:max_length]).strip()


def sanitize_string(value: Any, max_length: int = 500) -> str:
    """Like sanitize_display_string, then HTML-escape for markup embedding."""
    return html.escape(sanitize_display_string(value, max_length), quote=True)


def sanitize_username(value: Any, max_length: int = 50) -> str:
    """Keep only [A-Za-z0-9_] characters."""
    if not isinstance(value, str):
        return ""
    return _NON_USERNAME.sub("", value.strip()[:max_length])


def extract_x_handle(value: Any, max_length: int = HANDLE_MAX) -> str:
    """Accept '@handle', 'handle' or an x.com / twitter.com profile URL."""
    if not isinstance(value, str):
        return ""
    text = _X_PROFILE_PREFIX.sub("", value.strip())
    text = text.split("?", 1)[0].rstrip("/")
    return sanitize_username(text, max_length)


def sanitize_url(value: Any) -> str:
    """
    Strictly parse an http(s) URL and return its canonical form.

    Anything else (relative references, other schemes, garbage) yields "".
    """
    if not isinstance(value, str):
        return ""
    trimmed = value.strip()[:MAX_URL_LENGTH]
    if not trimmed:
        return ""
    try:
        url = _http_url.validate_python(trimmed)
    except ValidationError:
        return ""
    if url.scheme not in ("http", "https") or not url.host:
        return ""
    return str(url)


def validate_allowed_value(value: Any, allowed: Iterable[str]) -> str:
    if not isinstance(value, str):
        return ""
    return value if value in allowed else ""


def validate_array_values(value: Any, allowed: Iterable[str]) -> List[str]:
    """Keep allow-listed strings in their original order, at most 10."""
    if not isinstance(value, (list, tuple)):
        return []
    allowed = set(allowed)
    return [item for item in value if isinstance(item, str) and item in allowed][:MAX_ARRAY_ITEMS]


def validate_submission(raw: Any) -> Optional[Submission]:
    """
    Build a Submission from a raw form payload (camelCase keys).

    Returns None when any required field is missing or empty after
    sanitization. No partial record is ever produced.
    """
    if not isinstance(raw, Mapping):
        return None

    name = sanitize_display_string(raw.get("name"), NAME_MAX)
    telegram = sanitize_username(raw.get("telegram"), HANDLE_MAX)
    x_profile = extract_x_handle(raw.get("xProfile"), HANDLE_MAX)
    expertise = validate_array_values(raw.get("expertise"), EXPERTISE_OPTIONS)
    experience_level = validate_allowed_value(raw.get("experienceLevel"), EXPERIENCE_VALUES)
    monthly_rate = validate_allowed_value(raw.get("monthlyRate"), MONTHLY_RATE_VALUES)
    other_expertise = sanitize_display_string(raw.get("otherExpertise"), OTHER_TEXT_MAX)
    other_experience = sanitize_display_string(raw.get("otherExperience"), OTHER_TEXT_MAX)
    other_monthly_rate = sanitize_display_string(raw.get("otherMonthlyRate"), OTHER_TEXT_MAX)
    biggest_win = sanitize_display_string(raw.get("biggestWin"), BIGGEST_WIN_MAX)
    portfolio = sanitize_url(raw.get("portfolio"))

    # Free-text skill extends the catalog selection, still capped
    if other_expertise and other_expertise not in expertise:
        expertise = (expertise + [other_expertise])[:MAX_ARRAY_ITEMS]
    # "other" needs its description; an undescribed "other" rate is dropped
    if experience_level == OTHER and not other_experience:
        experience_level = ""
    if experience_level != OTHER:
        other_experience = ""
    if monthly_rate == OTHER and not other_monthly_rate:
        monthly_rate = ""
    if monthly_rate != OTHER:
        other_monthly_rate = ""

    missing = [
        field
        for field, present in (
            ("name", name),
            ("telegram", telegram),
            ("xProfile", x_profile),
            ("expertise", expertise),
            ("experienceLevel", experience_level),
            ("biggestWin", biggest_win),
        )
        if not present
    ]
    if missing:
        logger.info("Submission rejected; invalid fields: %s", ", ".join(missing))
        return None

    return Submission(
        name=name,
        telegram=telegram,
        x_profile=x_profile,
        expertise=tuple(expertise),
        experience_level=experience_level,
        monthly_rate=monthly_rate,
        biggest_win=biggest_win,
        portfolio=portfolio,
        other_experience=other_experience,
        other_monthly_rate=other_monthly_rate,
    )
