"""Resolve YouTube URLs and bare IDs into canonical video IDs.

Functions:
    resolve_video_id(reference: str) -> str:
        Return the 11-character video ID for a watch, short-link,
        embed URL or a bare ID.  Raises ``InvalidReferenceError`` when
        nothing matches.
"""

from __future__ import annotations

import re

from utils.errors import InvalidReferenceError

# Exactly eleven ID characters, not followed by another ID character.
_ID = r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"

# Patterns to match typical YouTube URL formats, in priority order.
_PATTERNS = [
    re.compile(r"youtube\.com/watch/?\?(?:[^#]*&)?v=" + _ID),
    re.compile(r"youtu\.be/" + _ID),
    re.compile(r"youtube(?:-nocookie)?\.com/(?:embed|shorts|live)/" + _ID),
]

_BARE_ID = re.compile(r"[A-Za-z0-9_-]{11}")


def resolve_video_id(reference: str) -> str:
    """Extract the YouTube video ID from a URL or bare ID.

    Args:
        reference: A watch URL, a ``youtu.be`` short link, an embed
            URL, or an 11-character video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidReferenceError: If no recognised shape matches.

    Examples::

        >>> resolve_video_id("https://www.youtube.com/watch?v=abc123def45")
        'abc123def45'
        >>> resolve_video_id("https://youtu.be/abc123def45")
        'abc123def45'
        >>> resolve_video_id("abc123def45")
        'abc123def45'
    """
    candidate = (reference or "").strip()
    for pat in _PATTERNS:
        match = pat.search(candidate)
        if match:
            return match.group(1)
    if _BARE_ID.fullmatch(candidate):
        return candidate
    raise InvalidReferenceError(
        reference,
        hint="Use a youtube.com/watch?v=, youtu.be/ or /embed/ link, or the 11-character video ID.",
    )
