"""
catalogs.py — Closed option lists offered by the onboarding form
=================================================================
Submitted tags are validated against these tuples; anything else is
dropped by the sanitization gate.
"""
from __future__ import annotations

from typing import Dict, Tuple

EXPERTISE_OPTIONS: Tuple[str, ...] = (
    "Social Media Management",
    "Community Management",
    "Project Management",
    "Business Development",
    "Ghostwriting",
    "Graphic Design",
    "Video Editing",
    "Clipping",
    "Sales",
    "Vibe Coding",
)

# value -> label, in display order
EXPERIENCE_OPTIONS: Dict[str, str] = {
    "personal": "Worked only on personal projects",
    "less-1": "< 1 year",
    "1-2": "1-2 years",
    "3+": "3+ years",
}

MONTHLY_RATE_OPTIONS: Dict[str, str] = {
    "under-500": "Under $500",
    "500-1000": "$500 - $1,000",
    "1000-2000": "$1,000 - $2,000",
    "2000-2500": "$2,000 - $2,500",
}

# Tag sent when the applicant picks "Other" and describes it in free text
OTHER = "other"
OTHER_LABEL = "Other"

EXPERIENCE_VALUES: Tuple[str, ...] = tuple(EXPERIENCE_OPTIONS) + (OTHER,)
MONTHLY_RATE_VALUES: Tuple[str, ...] = tuple(MONTHLY_RATE_OPTIONS) + (OTHER,)


def _label(options: Dict[str, str], value: str, other_text: str) -> str:
    if value == OTHER:
        return f"{OTHER_LABEL}: {other_text}" if other_text else OTHER_LABEL
    return options.get(value, value)


def experience_label(value: str, other_text: str = "") -> str:
    return _label(EXPERIENCE_OPTIONS, value, other_text)


def monthly_rate_label(value: str, other_text: str = "") -> str:
    return _label(MONTHLY_RATE_OPTIONS, value, other_text)
