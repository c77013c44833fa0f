"""
Serialize caption segments into SRT, WebVTT, plain text or JSON.

All converters take the same list of :class:`TranscriptSegment`
objects and return a string.  ``format_subtitles`` dispatches on a
format tag, matched case-insensitively.  Nothing here does I/O.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Union

from utils.errors import UnsupportedFormatError


@dataclass(frozen=True)
class TranscriptSegment:
    """One caption unit with millisecond timing."""

    text: str
    offset_ms: int
    duration_ms: int

    @property
    def end_ms(self) -> int:
        return self.offset_ms + self.duration_ms


class SubtitleFormat(str, Enum):
    SRT = "SRT"
    VTT = "VTT"
    TXT = "TXT"
    JSON = "JSON"

    @classmethod
    def parse(cls, tag: Union[str, "SubtitleFormat"]) -> "SubtitleFormat":
        """Look up a format tag regardless of case.

        Raises:
            UnsupportedFormatError: If ``tag`` names no known format.
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().upper())
        except ValueError:
            raise UnsupportedFormatError(str(tag)) from None


def _format_timestamp(ms: int, separator: str) -> str:
    """Render ``ms`` as ``HH:MM:SS<sep>mmm``.  Hours are never truncated."""
    if ms < 0:
        raise ValueError(f"Time code must not be negative: {ms}")
    hours = ms // 3_600_000
    minutes = (ms % 3_600_000) // 60_000
    seconds = (ms % 60_000) // 1000
    millis = ms % 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}{separator}{millis:03d}"


def format_srt_time(ms: int) -> str:
    return _format_timestamp(ms, ",")


def format_vtt_time(ms: int) -> str:
    return _format_timestamp(ms, ".")


def to_srt(segments: Sequence[TranscriptSegment]) -> str:
    """Numbered SubRip blocks separated by blank lines."""
    blocks: List[str] = []
    for index, seg in enumerate(segments, start=1):
        start = format_srt_time(seg.offset_ms)
        end = format_srt_time(seg.end_ms)
        blocks.append(f"{index}\n{start} --> {end}\n{seg.text}\n\n")
    return "".join(blocks).strip()


def to_vtt(segments: Sequence[TranscriptSegment]) -> str:
    """WebVTT with the ``WEBVTT`` header and no cue numbers."""
    cues = ["WEBVTT\n\n"]
    for seg in segments:
        start = format_vtt_time(seg.offset_ms)
        end = format_vtt_time(seg.end_ms)
        cues.append(f"{start} --> {end}\n{seg.text}\n\n")
    return "".join(cues).strip()


def to_txt(segments: Sequence[TranscriptSegment]) -> str:
    return "\n".join(seg.text for seg in segments)


def to_json(segments: Sequence[TranscriptSegment]) -> str:
    items = [
        {
            "text": seg.text,
            "start": seg.offset_ms,
            "end": seg.end_ms,
            "duration": seg.duration_ms,
        }
        for seg in segments
    ]
    return json.dumps(items, indent=2, ensure_ascii=False)


_CONVERTERS: Dict[SubtitleFormat, Callable[[Sequence[TranscriptSegment]], str]] = {
    SubtitleFormat.SRT: to_srt,
    SubtitleFormat.VTT: to_vtt,
    SubtitleFormat.TXT: to_txt,
    SubtitleFormat.JSON: to_json,
}


def format_subtitles(
    segments: Sequence[TranscriptSegment],
    fmt: Union[str, SubtitleFormat],
) -> str:
    """Serialize ``segments`` in the requested format.

    Args:
        segments: Caption segments in playback order.
        fmt: ``SRT``, ``VTT``, ``TXT`` or ``JSON`` in any casing.

    Returns:
        The serialized subtitles.

    Raises:
        UnsupportedFormatError: If ``fmt`` is not one of the four tags.
    """
    return _CONVERTERS[SubtitleFormat.parse(fmt)](segments)
