"""MCP tool for retrieving YouTube subtitles in several formats.

This module exposes a single tool, ``fetch_youtube_subtitles``, that
accepts a YouTube URL (or bare video ID) and returns the video's
caption track as SRT, WebVTT, plain text or JSON.  It uses
``utils.video_reference`` to extract the video ID,
``utils.video_transcript`` to download the captions and
``utils.subtitle_formats`` to serialise them.

On success the tool output is a Markdown summary followed by the
subtitles, with a structured copy of the result:

* ``success`` – ``True``.
* ``videoId`` – The extracted 11‑character video ID.
* ``format`` – The requested format, echoed as given.
* ``language`` – The selected caption track, the requested language,
  or ``"auto"``.
* ``subtitleCount`` – Number of caption segments.
* ``content`` – The serialised subtitles.

Failures never raise through the MCP session; they come back as an
error-flagged text block explaining what went wrong and what to try,
with a structured copy whose ``success`` is ``False`` and whose
``content`` is empty.  Both shapes follow :class:`SubtitlePayload`,
which is also published as the tool's output schema.

Example call:

.. code-block:: json

    {
      "url": "https://www.youtube.com/watch?v=DFlm3_EIbko",
      "format": "SRT",
      "lang": "en"
    }
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Iterable, List, Optional

from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel, Field

from config import settings
from server import mcp  # Shared FastMCP instance
from utils.errors import NoSubtitlesError, ProviderError, SubtitleError
from utils.subtitle_formats import SubtitleFormat, TranscriptSegment, format_subtitles
from utils.video_reference import resolve_video_id
from utils.video_transcript import InnertubeTranscriptClient, TranscriptProvider

logger = logging.getLogger(__name__)

TOOL_DESCRIPTION = (
    "Fetch subtitles/transcripts from YouTube videos. Supports multiple output "
    "formats (SRT, VTT, TXT, JSON) and language selection. Returns complete "
    "subtitle content with timestamps."
)


class SubtitlePayload(BaseModel):
    """Structured output of ``fetch_youtube_subtitles``."""

    success: bool
    videoId: str
    format: str
    language: str
    subtitleCount: int = Field(ge=0)
    content: str


@dataclass(frozen=True)
class SubtitleResult:
    """A successfully formatted caption track."""

    video_id: str
    title: Optional[str]
    format: str
    language: str
    subtitle_count: int
    content: str

    def to_payload(self) -> Dict[str, Any]:
        return SubtitlePayload(
            success=True,
            videoId=self.video_id,
            format=self.format,
            language=self.language,
            subtitleCount=self.subtitle_count,
            content=self.content,
        ).model_dump()


def get_provider() -> TranscriptProvider:
    return InnertubeTranscriptClient(timeout=settings.REQUEST_TIMEOUT)


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def to_segments(raw_segments: Iterable[Dict[str, Any]]) -> List[TranscriptSegment]:
    """Normalise raw provider segments into :class:`TranscriptSegment`.

    Missing text becomes ``""`` and missing times become ``0``.  An end
    time earlier than its start yields a zero duration.
    """
    segments: List[TranscriptSegment] = []
    for raw in raw_segments:
        start = max(_as_int(raw.get("start_ms")), 0)
        end = _as_int(raw.get("end_ms"))
        duration = end - start
        if duration < 0:
            logger.warning(
                "Caption segment ends before it starts (%d < %d); clamping duration to 0",
                end, start,
            )
            duration = 0
        segments.append(TranscriptSegment(
            text=raw.get("text") or "",
            offset_ms=start,
            duration_ms=duration,
        ))
    return segments


def fetch_subtitles(
    url: str,
    format: str = "JSON",
    lang: Optional[str] = None,
    provider: Optional[TranscriptProvider] = None,
) -> SubtitleResult:
    """Resolve, download and format the subtitles of one video.

    Args:
        url: YouTube URL or bare video ID.
        format: ``SRT``, ``VTT``, ``TXT`` or ``JSON`` in any casing.
        lang: Optional caption language code hint.
        provider: Caption source; defaults to the Innertube client.

    Returns:
        The formatted subtitles and their metadata.

    Raises:
        SubtitleError: ``InvalidReferenceError``,
            ``UnsupportedFormatError`` or ``NoSubtitlesError``.
    """
    if not url or not url.strip():
        raise SubtitleError("Parameter 'url' is required")
    fmt = format or "JSON"
    lang = lang or None
    # Reject a bad format before touching the network.
    SubtitleFormat.parse(fmt)

    video_id = resolve_video_id(url)
    provider = provider or get_provider()
    try:
        transcript = provider.fetch_transcript(video_id, lang)
    except ProviderError as exc:
        raise NoSubtitlesError(f"No subtitle data found: {exc}", hint=exc.hint) from exc
    except Exception as exc:
        raise NoSubtitlesError(f"No subtitle data found: {exc}") from exc

    if transcript is None or not transcript.segments:
        raise NoSubtitlesError("No subtitle segments found")

    segments = to_segments(transcript.segments)
    content = format_subtitles(segments, fmt)
    return SubtitleResult(
        video_id=video_id,
        title=transcript.title,
        format=fmt,
        language=transcript.language_label or lang or "auto",
        subtitle_count=len(segments),
        content=content,
    )


def render_success(result: SubtitleResult) -> CallToolResult:
    text = (
        "# YouTube Subtitle Extraction Result\n\n"
        f"**Video ID**: {result.video_id}\n"
        f"**Video Title**: {result.title or 'N/A'}\n"
        f"**Format**: {result.format}\n"
        f"**Language**: {result.language}\n"
        f"**Subtitle Count**: {result.subtitle_count}\n\n"
        "---\n\n"
        f"{result.content}"
    )
    return CallToolResult(
        content=[TextContent(type="text", text=text)],
        structuredContent=result.to_payload(),
    )


def render_failure(
    error: Exception, *, format: str = "JSON", language: str = "auto"
) -> CallToolResult:
    """Error-flagged result.  The structured copy reports ``success=False`` and no content."""
    hint = getattr(error, "hint", None)
    text = f"❌ Failed to fetch subtitles: {error}\n\n"
    if hint:
        text += f"**Hint**: {hint}\n\n"
    text += (
        "**Possible reasons**:\n"
        "- Video has no available subtitles\n"
        "- Video is private or restricted\n"
        "- Specified language code does not exist\n"
        "- Network connection issue\n\n"
        "**Tips**:\n"
        "- Try without specifying language code (auto-detect)\n"
        "- Verify the video URL is correct\n"
        "- Check if the video has public subtitles"
    )
    payload = SubtitlePayload(
        success=False, videoId="", format=format, language=language, subtitleCount=0, content="",
    )
    return CallToolResult(
        content=[TextContent(type="text", text=text)],
        structuredContent=payload.model_dump(),
        isError=True,
    )


@mcp.tool(
    name="fetch_youtube_subtitles",
    title="Fetch YouTube Subtitles",
    description=TOOL_DESCRIPTION,
)
async def fetch_youtube_subtitles(
    url: Annotated[str, Field(description=(
        "YouTube video URL or video ID. Supported formats: "
        "https://www.youtube.com/watch?v=xxx, https://youtu.be/xxx, or direct video ID"
    ))],
    format: Annotated[str, Field(examples=["SRT", "VTT", "TXT", "JSON"], description=(
        "Output format, one of SRT, VTT, TXT or JSON (case-insensitive). "
        "SRT: subtitle file format (with sequence numbers), "
        "VTT: WebVTT format, TXT: plain text (text only), "
        "JSON: structured JSON (with timestamps)"
    ))] = "JSON",
    lang: Annotated[Optional[str], Field(description=(
        "Subtitle language code (optional). Examples: zh-Hans (Simplified Chinese), "
        "zh-Hant (Traditional Chinese), en (English). Auto-detect if not specified"
    ))] = None,
) -> Annotated[CallToolResult, SubtitlePayload]:
    """Fetch a YouTube video's subtitles as SRT, VTT, TXT or JSON."""
    try:
        # The provider does blocking HTTP; keep the event loop free.
        result = await asyncio.to_thread(fetch_subtitles, url, format, lang)
    except Exception as exc:
        logger.warning("fetch_youtube_subtitles failed for %r: %s", url, exc)
        return render_failure(exc, format=format or "JSON", language=lang or "auto")
    logger.info(
        "Served %d %s subtitles for %s", result.subtitle_count, result.format, result.video_id,
    )
    return render_success(result)
