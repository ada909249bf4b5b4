from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, Response

from ..avatar import CACHE_CONTROL, fetch_avatar
from ..config import settings
from ..rate_limit import limiter
from ..security.sanitize import sanitize_username

router = APIRouter(prefix="/api", tags=["avatar"])


@router.get("/avatar")
@limiter.limit(lambda: settings.avatar_rate_limit)
def get_avatar(request: Request, username: str = Query(default="")) -> Response:
    """Proxy an X profile picture, or a generated placeholder on failure."""
    if not sanitize_username(username):
        return JSONResponse(status_code=400, content={"error": "Username required"})

    image = fetch_avatar(username)
    headers = {"Cache-Control": CACHE_CONTROL}
    if image.fallback:
        headers["X-Avatar-Fallback"] = "1"
    return Response(content=image.content, media_type=image.media_type, headers=headers)
