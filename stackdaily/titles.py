"""
titles.py — Membership card title tiers
========================================
Maps an applicant's experience tag and free-text "biggest win" to one of
five ordered tiers shown on the card. Keyword matching is a plain
substring test on the lower-cased text, so "lead" also matches inside
words such as "misleading".
"""
from __future__ import annotations

from enum import IntEnum
from typing import Dict, Tuple

from .schemas import TitleInfo


class Title(IntEnum):
    """Card tiers, lowest to highest."""

    APPRENTICE = 1
    BUILDER = 2
    OPERATOR = 3
    OG = 4
    LEGEND = 5

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: Dict[Title, str] = {
    Title.APPRENTICE: "Apprentice",
    Title.BUILDER: "Builder",
    Title.OPERATOR: "Operator",
    Title.OG: "OG",
    Title.LEGEND: "Legend",
}

TITLE_DESCRIPTIONS: Dict[Title, str] = {
    Title.APPRENTICE: "Learning the game",
    Title.BUILDER: "Putting in the reps",
    Title.OPERATOR: "Battle-tested and shipping",
    Title.OG: "Been here since the early days",
    Title.LEGEND: "The one projects fight over",
}

# Terms indicating scale, funding, leadership or shipped results
EXCEPTIONAL_KEYWORDS: Tuple[str, ...] = (
    "million", "viral", "100k", "500k", "1m", "10x", "100x",
    "raised", "funded", "acquired", "exit", "sold", "grew",
    "lead", "head", "director", "founder", "co-founder",
    "launched", "built", "scaled", "revenue", "profit",
)

# experience tag -> (without signal, with signal)
_DECISION_TABLE: Dict[str, Tuple[Title, Title]] = {
    "personal": (Title.APPRENTICE, Title.APPRENTICE),
    "less-1": (Title.BUILDER, Title.OPERATOR),
    "1-2": (Title.OPERATOR, Title.OG),
    "3+": (Title.OG, Title.LEGEND),
}

DEFAULT_TITLE = Title.BUILDER


def has_exceptional_signal(biggest_win: str) -> bool:
    if not isinstance(biggest_win, str):
        return False
    text = biggest_win.lower()
    return any(keyword in text for keyword in EXCEPTIONAL_KEYWORDS)


def classify(experience_level: str, biggest_win: str) -> Title:
    if not isinstance(experience_level, str):
        return DEFAULT_TITLE
    row = _DECISION_TABLE.get(experience_level)
    if row is None:
        return DEFAULT_TITLE
    plain, exceptional = row
    return exceptional if has_exceptional_signal(biggest_win) else plain


def calculate_title(experience_level: str, biggest_win: str) -> TitleInfo:
    """Return the card title and its description. Never raises."""
    title = classify(experience_level, biggest_win)
    return TitleInfo(title=title.label, description=TITLE_DESCRIPTIONS[title])
