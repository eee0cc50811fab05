"""Utilities to extract a YouTube video ID from a user-supplied URL.

Two URL shapes are recognized: ``https://youtu.be/<id>`` and
``https://www.youtube.com/watch?v=<id>``. Everything else yields ``""``.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

SHORT_LINK_HOST = "youtu.be"
LONG_FORM_HOST = "www.youtube.com"


def extract_video_id(url: str) -> str:
    """Return the video ID carried by ``url`` or ``""`` when there is none.

    Never raises: inputs that do not parse as an absolute URL simply give an
    empty identifier.
    """

    try:
        p = urlparse(url.strip())
        host = (p.hostname or "").lower()
    except (AttributeError, ValueError):
        return ""

    if not p.scheme or not host:
        return ""

    # youtu.be/<id>
    if host == SHORT_LINK_HOST:
        return p.path[1:] if p.path.startswith("/") else p.path

    # www.youtube.com/...?v=<id>
    if host == LONG_FORM_HOST:
        return parse_qs(p.query).get("v", [""])[0]

    return ""


__all__ = [
    "extract_video_id",
    "LONG_FORM_HOST",
    "SHORT_LINK_HOST",
]
