"""
avatar.py — Profile picture proxy for the membership card
==========================================================
Fetches the applicant's X avatar from unavatar with a bounded timeout.
Any failure (timeout, non-success status, network error) falls back to a
locally generated SVG placeholder showing the user's initials.
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .config import settings
from .security.sanitize import sanitize_username

logger = logging.getLogger("stackdaily.avatar")

CACHE_CONTROL = "public, max-age=86400"
PLACEHOLDER_BACKGROUND = "#18181b"
PLACEHOLDER_FOREGROUND = "#ffffff"
PLACEHOLDER_SIZE = 128


@dataclass(frozen=True)
class AvatarImage:
    content: bytes
    media_type: str
    fallback: bool = False


def _initials(name: str) -> str:
    parts = [p for p in name.replace("_", " ").split() if p]
    if not parts:
        return "?"
    if len(parts) == 1:
        return parts[0][:2].upper()
    return (parts[0][0] + parts[1][0]).upper()


def placeholder_avatar(name: str) -> AvatarImage:
    """Square SVG with the name's initials on the card background colour."""
    size = PLACEHOLDER_SIZE
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}">'
        f'<rect width="100%" height="100%" fill="{PLACEHOLDER_BACKGROUND}"/>'
        f'<text x="50%" y="50%" dy=".35em" text-anchor="middle" '
        f'font-family="Helvetica, Arial, sans-serif" font-size="{size // 2 - 8}" '
        f'fill="{PLACEHOLDER_FOREGROUND}">{html.escape(_initials(name))}</text>'
        f"</svg>"
    )
    return AvatarImage(content=svg.encode("utf-8"), media_type="image/svg+xml", fallback=True)


def fetch_avatar(username: str, client: Optional[httpx.Client] = None) -> AvatarImage:
    """Resolve an avatar for ``username``. Never raises."""
    handle = sanitize_username(username)
    if not handle:
        return placeholder_avatar(username or "")

    url = f"{settings.avatar_base_url.rstrip('/')}/{handle}"
    try:
        if client is None:
            with httpx.Client(timeout=settings.avatar_timeout_seconds, follow_redirects=True) as c:
                resp = c.get(url)
        else:
            resp = client.get(url, timeout=settings.avatar_timeout_seconds)
    except Exception as exc:
        logger.warning("Avatar fetch for %r failed: %s", handle, exc)
        return placeholder_avatar(handle)

    if resp.status_code >= 400 or not resp.content:
        logger.info("Avatar fetch for %r returned %d; using placeholder", handle, resp.status_code)
        return placeholder_avatar(handle)

    media_type = resp.headers.get("content-type", "image/png").split(";")[0].strip()
    if not media_type.startswith("image/"):
        logger.info("Avatar fetch for %r returned %s; using placeholder", handle, media_type)
        return placeholder_avatar(handle)
    return AvatarImage(content=resp.content, media_type=media_type)
