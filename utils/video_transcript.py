"""Download YouTube caption tracks through the Innertube API.

This module fetches the caption track of a YouTube video the same way
the YouTube Android app does: it reads the Innertube API key from the
watch page, asks the ``player`` endpoint for the video's caption
tracks, picks one and downloads its timedtext XML.

The result is returned as raw data (a :class:`VideoTranscript` whose
``segments`` are plain dictionaries) so that callers decide how to
normalise missing fields.  Errors are raised as subclasses of
:class:`~utils.errors.ProviderError`; ``requests`` exceptions never
escape this module.

Classes:
    TranscriptProvider:
        Protocol for anything that can fetch a transcript by video ID.

    InnertubeTranscriptClient:
        The default provider, backed by ``requests``.
"""

from __future__ import annotations

import html
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

import requests

from utils.errors import (
    ProviderError,
    TranscriptUnavailableError,
    VideoUnavailableError,
)

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
PLAYER_URL = "https://www.youtube.com/youtubei/v1/player?key={api_key}"

# Client identity sent to the player endpoint.
INNERTUBE_CLIENT = {
    "clientName": "ANDROID",
    "clientVersion": "20.10.38",
}


@dataclass
class VideoTranscript:
    """Raw caption data for one video.

    ``segments`` holds dictionaries with ``text``, ``start_ms`` and
    ``end_ms`` keys.  Any of these may be missing or ``None`` when the
    timedtext document omits them.
    """

    video_id: str
    title: Optional[str] = None
    language_code: Optional[str] = None
    language_label: Optional[str] = None
    available_languages: List[str] = field(default_factory=list)
    segments: List[Dict[str, Any]] = field(default_factory=list)


class TranscriptProvider(Protocol):
    def fetch_transcript(
        self, video_id: str, language: Optional[str] = None
    ) -> VideoTranscript:
        ...  # pragma: no cover


def _track_label(track: Dict[str, Any]) -> Optional[str]:
    """Return the human-readable name of a caption track."""
    name = track.get("name") or {}
    if name.get("simpleText"):
        return name["simpleText"]
    runs = name.get("runs") or []
    text = "".join(run.get("text", "") for run in runs)
    return text or None


def select_track(
    tracks: List[Dict[str, Any]], language: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """Choose a caption track.

    With a language hint, an exact ``languageCode`` match wins (case is
    ignored), then a track sharing the hint's base language, so ``zh``
    selects ``zh-Hans``.  Without a hint, manually created tracks are
    preferred over auto-generated (``kind == "asr"``) ones.

    Returns:
        The chosen track, or ``None`` if nothing matches the hint.
    """
    if not tracks:
        return None
    if language:
        wanted = language.strip().lower()
        for track in tracks:
            if (track.get("languageCode") or "").lower() == wanted:
                return track
        base = wanted.split("-")[0]
        for track in tracks:
            if (track.get("languageCode") or "").lower().split("-")[0] == base:
                return track
        return None
    for track in tracks:
        if track.get("kind") != "asr":
            return track
    return tracks[0]


def _ms(value: Optional[str], scale: float) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(round(float(value) * scale))
    except ValueError:
        return None


def parse_timedtext(xml_text: str) -> List[Dict[str, Any]]:
    """Parse a timedtext document into raw segment dictionaries.

    Two layouts are understood: the classic ``<text start= dur=>``
    form with times in seconds, and the ``srv3`` ``<p t= d=>`` form
    with times in milliseconds.

    Raises:
        TranscriptUnavailableError: If the document is not valid XML.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise TranscriptUnavailableError(f"Malformed caption document: {exc}") from exc

    segments: List[Dict[str, Any]] = []
    for item in root.iter("text"):
        start_ms = _ms(item.get("start"), 1000)
        duration_ms = _ms(item.get("dur"), 1000)
        segments.append({
            "text": html.unescape(item.text or ""),
            "start_ms": start_ms,
            "end_ms": start_ms + duration_ms if start_ms is not None and duration_ms is not None else None,
        })
    if segments:
        return segments
    for item in root.iter("p"):
        start_ms = _ms(item.get("t"), 1)
        duration_ms = _ms(item.get("d"), 1)
        text = html.unescape("".join(item.itertext())).strip()
        # srv3 uses empty paragraphs as line-break markers.
        if not text:
            continue
        segments.append({
            "text": text,
            "start_ms": start_ms,
            "end_ms": start_ms + duration_ms if start_ms is not None and duration_ms is not None else None,
        })
    return segments


class InnertubeTranscriptClient:
    """Fetch transcripts from YouTube with plain HTTP requests.

    Args:
        timeout: Seconds to wait for each HTTP request.
        session: Optional ``requests.Session`` to reuse.  A new one
            is created per call when omitted.
    """

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self._session = session

    def fetch_transcript(
        self, video_id: str, language: Optional[str] = None
    ) -> VideoTranscript:
        """Download the caption track of ``video_id``.

        Args:
            video_id: The 11-character YouTube video ID.
            language: Optional language code hint such as ``en`` or
                ``zh-Hans``.

        Returns:
            The selected track's raw segments plus video metadata.

        Raises:
            VideoUnavailableError: If YouTube reports the video as not
                playable.
            TranscriptUnavailableError: If there is no caption track,
                or none in the requested language.
            ProviderError: On network or decoding failures.
        """
        session = self._session or requests.Session()
        try:
            return self._fetch(session, video_id, language)
        except requests.RequestException as exc:
            raise ProviderError(f"Network error while contacting YouTube: {exc}") from exc
        finally:
            if self._session is None:
                session.close()

    def _fetch(
        self, session: requests.Session, video_id: str, language: Optional[str]
    ) -> VideoTranscript:
        api_key = self._get_api_key(session, video_id)
        data = self._get_player_response(session, video_id, api_key)

        status = data.get("playabilityStatus") or {}
        if status.get("status", "OK") != "OK":
            reason = status.get("reason") or status.get("status")
            raise VideoUnavailableError(f"Video {video_id} is unavailable: {reason}")

        title = (data.get("videoDetails") or {}).get("title")
        renderer = (data.get("captions") or {}).get("playerCaptionsTracklistRenderer") or {}
        tracks = renderer.get("captionTracks") or []
        available = [t.get("languageCode") for t in tracks if t.get("languageCode")]
        if not tracks:
            raise TranscriptUnavailableError(f"Video {video_id} has no caption tracks")

        track = select_track(tracks, language)
        if track is None:
            raise TranscriptUnavailableError(
                f"No captions in language {language!r}. Available: {', '.join(available)}",
                hint="Try again without a language code.",
            )
        base_url = track.get("baseUrl")
        if not base_url:
            raise TranscriptUnavailableError(f"Caption track for {video_id} has no download URL")
        logger.debug(
            "Selected caption track %s (%s) for %s",
            track.get("languageCode"), track.get("kind") or "manual", video_id,
        )

        # Remove fmt parameter if present to get XML
        base_url = re.sub(r"&fmt=\w+", "", base_url)
        resp = session.get(base_url, timeout=self.timeout)
        resp.raise_for_status()
        segments = parse_timedtext(resp.text)
        logger.info("Fetched %d caption segments for %s", len(segments), video_id)

        return VideoTranscript(
            video_id=video_id,
            title=title,
            language_code=track.get("languageCode"),
            language_label=_track_label(track),
            available_languages=available,
            segments=segments,
        )

    def _get_api_key(self, session: requests.Session, video_id: str) -> str:
        """Retrieve the Innertube API key embedded in the watch page."""
        resp = session.get(WATCH_URL.format(video_id=video_id), timeout=self.timeout)
        resp.raise_for_status()
        match = re.search(r'"INNERTUBE_API_KEY":"([^"]+)"', resp.text)
        if not match:
            raise ProviderError(
                f"Could not find the Innertube API key for {video_id}",
                hint="YouTube may be rate limiting or showing a consent page.",
            )
        return match.group(1)

    def _get_player_response(
        self, session: requests.Session, video_id: str, api_key: str
    ) -> Dict[str, Any]:
        body = {
            "context": {"client": INNERTUBE_CLIENT},
            "videoId": video_id,
        }
        resp = session.post(PLAYER_URL.format(api_key=api_key), json=body, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()
