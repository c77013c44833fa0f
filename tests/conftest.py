"""Shared pytest fixtures for the subtitle server test suite.

Guidelines
----------
* No internet access in any test.
* The caption provider is faked at the ``fetch_transcript`` boundary,
  and ``requests`` is mocked for the Innertube client itself.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from utils.subtitle_formats import TranscriptSegment
from utils.video_transcript import VideoTranscript


class FakeProvider:
    """Records calls and returns a canned transcript or raises."""

    def __init__(self, result: Any) -> None:
        self.result = result
        self.calls: List[tuple] = []

    def fetch_transcript(
        self, video_id: str, language: Optional[str] = None
    ) -> VideoTranscript:
        self.calls.append((video_id, language))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def raw_segment(text: Optional[str], start_ms: Optional[int], end_ms: Optional[int]) -> Dict[str, Any]:
    return {"text": text, "start_ms": start_ms, "end_ms": end_ms}


@pytest.fixture
def segments() -> List[TranscriptSegment]:
    return [
        TranscriptSegment(text="Hello", offset_ms=0, duration_ms=1500),
        TranscriptSegment(text="world", offset_ms=1500, duration_ms=2250),
        TranscriptSegment(text="", offset_ms=3_725_042, duration_ms=958),
    ]


@pytest.fixture
def transcript() -> VideoTranscript:
    return VideoTranscript(
        video_id="dQw4w9WgXcQ",
        title="Sample Video",
        language_code="en",
        language_label="English",
        available_languages=["en", "de"],
        segments=[
            raw_segment("Hello", 0, 1500),
            raw_segment("world", 1500, 3750),
        ],
    )
