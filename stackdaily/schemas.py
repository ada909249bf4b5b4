from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

class Submission(BaseModel):
    """A validated applicant record. Built only by the sanitization gate."""

    model_config = ConfigDict(frozen=True)

    name: str
    telegram: str
    x_profile: str
    expertise: Tuple[str, ...]
    experience_level: str
    monthly_rate: str = ""
    biggest_win: str
    portfolio: str = ""
    # Free text accompanying an "other" experience or rate tag
    other_experience: str = ""
    other_monthly_rate: str = ""


class TitleInfo(BaseModel):
    """Card tier label and its one-line description."""

    title: str = Field(..., description="Apprentice | Builder | Operator | OG | Legend.")
    description: str


class SubmitResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    title: Optional[TitleInfo] = None


# ---------------------------------------------------------------------------
# Title preview
# ---------------------------------------------------------------------------

class TitleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    experience_level: str = Field(default="", alias="experienceLevel")
    biggest_win: str = Field(default="", alias="biggestWin")


# ---------------------------------------------------------------------------
# Form options
# ---------------------------------------------------------------------------

class OptionItem(BaseModel):
    value: str
    label: str


class OptionsResponse(BaseModel):
    expertise: List[str]
    experience: List[OptionItem]
    monthly_rate: List[OptionItem]
