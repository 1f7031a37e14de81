"""Helpers for exercise demo videos and dates shown next to them."""

import re
from datetime import datetime

_YOUTUBE_RE = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
_SHORTS_RE = re.compile(r"^.*(youtube\.com/shorts/)([^#&?]*).*")
_VIDEO_ID_LENGTH = 11


def youtube_video_id(url: str) -> str | None:
    """
    Extract the 11-character video id from a YouTube URL.

    Handles watch, embed, youtu.be and shorts links.

    Returns:
        Video id, or None when the URL is empty or not recognised
    """
    if not url:
        return None
    for pattern in (_YOUTUBE_RE, _SHORTS_RE):
        match = pattern.match(url)
        if match and len(match.group(2)) == _VIDEO_ID_LENGTH:
            return match.group(2)
    return None


def format_day_date(date_str: str) -> str:
    """Short display form of an ISO date, e.g. 'Mon, Mar 2'."""
    dt = datetime.strptime(date_str[:10], "%Y-%m-%d")
    return f"{dt:%a}, {dt:%b} {dt.day}"
