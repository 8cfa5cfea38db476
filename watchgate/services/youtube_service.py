"""
YouTube URL helpers.

Turns the share links kept in the catalog into the bare video id the embed
and thumbnail endpoints expect.
"""
from __future__ import annotations

import re

# Basic YouTube URL patterns we accept
_YT_PATTERNS = [
    re.compile(r"^https?://(www\.)?youtube\.com/watch\?.*v=[\w-]+"),
    re.compile(r"^https?://youtu\.be/[\w-]+"),
    re.compile(r"^https?://(www\.)?youtube\.com/embed/[\w-]+"),
]

THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"


def is_valid_youtube_url(url: str) -> bool:
    return any(p.match(url.strip()) for p in _YT_PATTERNS)


def extract_video_id(url: str) -> str | None:
    """Return the video id for youtu.be, watch?v= and /embed/ links.

    Query strings (``?si=...``) and extra parameters (``&t=...``) are dropped.
    Returns ``None`` for anything else.
    """
    url = url.strip()
    if "youtu.be/" in url:
        video_id = url.split("youtu.be/", 1)[1].split("?")[0]
    elif "youtube.com/watch?" in url and "v=" in url:
        video_id = url.split("v=", 1)[1].split("&")[0]
    elif "youtube.com/embed/" in url:
        video_id = url.split("embed/", 1)[1].split("?")[0]
    else:
        return None
    video_id = video_id.strip("/")
    return video_id or None


def embed_url(video_id: str, base_url: str = "https://www.youtube.com/embed") -> str:
    # enablejsapi=1 makes the iframe emit onReady/onStateChange messages
    return f"{base_url.rstrip('/')}/{video_id}?enablejsapi=1"


def thumbnail_url(video_id: str) -> str:
    return THUMBNAIL_URL.format(video_id=video_id)
