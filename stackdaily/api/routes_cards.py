from __future__ import annotations

from fastapi import APIRouter

from ..catalogs import EXPERIENCE_OPTIONS, EXPERTISE_OPTIONS, MONTHLY_RATE_OPTIONS, OTHER, OTHER_LABEL
from ..schemas import OptionItem, OptionsResponse, TitleInfo, TitleRequest
from ..security.sanitize import sanitize_display_string
from ..titles import calculate_title

router = APIRouter(prefix="/api", tags=["cards"])


@router.post("/title", response_model=TitleInfo)
def preview_title(body: TitleRequest) -> TitleInfo:
    """Compute the card title for the form's final step."""
    return calculate_title(
        sanitize_display_string(body.experience_level, 32),
        sanitize_display_string(body.biggest_win, 1000),
    )


def _items(options) -> list:
    return [OptionItem(value=value, label=label) for value, label in options.items()] + [
        OptionItem(value=OTHER, label=OTHER_LABEL)
    ]


@router.get("/options", response_model=OptionsResponse)
def list_options() -> OptionsResponse:
    """Closed option lists the onboarding form renders."""
    return OptionsResponse(
        expertise=list(EXPERTISE_OPTIONS),
        experience=_items(EXPERIENCE_OPTIONS),
        monthly_rate=_items(MONTHLY_RATE_OPTIONS),
    )
