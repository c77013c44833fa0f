"""Tests for utils/subtitle_formats.py."""

from __future__ import annotations

import json
import re
from typing import List

import pytest

from utils.errors import UnsupportedFormatError
from utils.subtitle_formats import (
    SubtitleFormat,
    TranscriptSegment,
    format_srt_time,
    format_subtitles,
    format_vtt_time,
    to_json,
    to_srt,
    to_txt,
    to_vtt,
)


def _code_to_ms(code: str) -> int:
    hours, minutes, rest = code.split(":")
    seconds, millis = re.split(r"[,.]", rest)
    return ((int(hours) * 60 + int(minutes)) * 60 + int(seconds)) * 1000 + int(millis)


# ---------------------------------------------------------------------------
# Time codes
# ---------------------------------------------------------------------------

class TestTimeCodes:
    @pytest.mark.parametrize(
        "ms, expected",
        [
            (0, "00:00:00,000"),
            (1500, "00:00:01,500"),
            (59_999, "00:00:59,999"),
            (60_000, "00:01:00,000"),
            (3_725_042, "01:02:05,042"),
            (360_000_000, "100:00:00,000"),
        ],
    )
    def test_srt_time(self, ms: int, expected: str) -> None:
        assert format_srt_time(ms) == expected

    def test_vtt_uses_period(self) -> None:
        assert format_vtt_time(3_725_042) == "01:02:05.042"

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            format_srt_time(-1)


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------

class TestSRT:
    def test_single_segment_block(self) -> None:
        out = to_srt([TranscriptSegment("Hello", 0, 1500)])
        assert out == "1\n00:00:00,000 --> 00:00:01,500\nHello"

    def test_numbered_blocks_match_segments(self, segments: List[TranscriptSegment]) -> None:
        out = to_srt(segments)
        blocks = out.split("\n\n")
        assert len(blocks) == len(segments)
        for number, (block, seg) in enumerate(zip(blocks, segments), start=1):
            lines = block.split("\n")
            assert lines[0] == str(number)
            start, end = lines[1].split(" --> ")
            assert _code_to_ms(start) == seg.offset_ms
            assert _code_to_ms(end) - _code_to_ms(start) == seg.duration_ms

    def test_no_trailing_whitespace(self, segments: List[TranscriptSegment]) -> None:
        out = to_srt(segments[:2])
        assert out == out.rstrip()
        assert out.endswith("world")


class TestVTT:
    def test_header_and_first_cue(self) -> None:
        out = to_vtt([TranscriptSegment("Hello", 0, 1500)])
        assert out == "WEBVTT\n\n00:00:00.000 --> 00:00:01.500\nHello"

    def test_no_index_lines(self, segments: List[TranscriptSegment]) -> None:
        out = to_vtt(segments[:2])
        assert out.startswith("WEBVTT\n\n")
        assert not any(line.strip().isdigit() for line in out.splitlines())
        assert out.count(" --> ") == 2
        assert out.endswith("world")


class TestTXT:
    def test_texts_joined_with_newline(self, segments: List[TranscriptSegment]) -> None:
        assert to_txt(segments) == "Hello\nworld\n"

    def test_no_timestamps(self, segments: List[TranscriptSegment]) -> None:
        assert "-->" not in to_txt(segments)


class TestJSON:
    def test_parses_back_in_order(self, segments: List[TranscriptSegment]) -> None:
        items = json.loads(to_json(segments))
        assert [i["text"] for i in items] == [s.text for s in segments]
        for item, seg in zip(items, segments):
            assert item == {
                "text": seg.text,
                "start": seg.offset_ms,
                "end": seg.offset_ms + seg.duration_ms,
                "duration": seg.duration_ms,
            }
            assert item["end"] == item["start"] + item["duration"]

    def test_two_space_indentation(self) -> None:
        out = to_json([TranscriptSegment("Hi", 0, 10)])
        assert out == (
            '[\n'
            '  {\n'
            '    "text": "Hi",\n'
            '    "start": 0,\n'
            '    "end": 10,\n'
            '    "duration": 10\n'
            '  }\n'
            ']'
        )

    def test_non_ascii_kept_verbatim(self) -> None:
        out = to_json([TranscriptSegment("你好", 0, 10)])
        assert "你好" in out


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestDispatch:
    @pytest.mark.parametrize("tag", ["srt", "SRT", "Srt"])
    def test_case_insensitive(self, tag: str, segments: List[TranscriptSegment]) -> None:
        assert format_subtitles(segments, tag) == to_srt(segments)

    @pytest.mark.parametrize(
        "fmt, converter",
        [("VTT", to_vtt), ("txt", to_txt), ("Json", to_json), (SubtitleFormat.SRT, to_srt)],
    )
    def test_routes_to_converter(self, fmt, converter, segments: List[TranscriptSegment]) -> None:
        assert format_subtitles(segments, fmt) == converter(segments)

    @pytest.mark.parametrize("tag", ["ass", "XML", "", "sr t"])
    def test_unsupported_format(self, tag: str, segments: List[TranscriptSegment]) -> None:
        with pytest.raises(UnsupportedFormatError) as info:
            format_subtitles(segments, tag)
        assert info.value.format == tag
        assert "Supported formats: SRT, VTT, TXT, JSON" in str(info.value)

    def test_idempotent(self, segments: List[TranscriptSegment]) -> None:
        for fmt in SubtitleFormat:
            assert format_subtitles(segments, fmt) == format_subtitles(segments, fmt)


class TestSegment:
    def test_end_ms(self) -> None:
        assert TranscriptSegment("x", 1000, 250).end_ms == 1250

    def test_frozen(self) -> None:
        seg = TranscriptSegment("x", 0, 0)
        with pytest.raises(AttributeError):
            seg.text = "y"  # type: ignore[misc]
