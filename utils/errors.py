"""
Exception hierarchy for the YouTube subtitle server.

Every failure that can reach the tool boundary is a subclass of
:class:`SubtitleError`.  The tool layer turns these into an
error-flagged MCP result, so the message should read well on its own.
Provider errors are wrapped as :class:`NoSubtitlesError` by the
orchestration before they get there.

Hierarchy::

    SubtitleError
    ├── InvalidReferenceError
    ├── UnsupportedFormatError
    ├── NoSubtitlesError
    └── ProviderError
        ├── VideoUnavailableError
        └── TranscriptUnavailableError
"""

from __future__ import annotations

from typing import Optional


class SubtitleError(Exception):
    """Base class for all subtitle server errors."""

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint: Optional[str] = hint


class InvalidReferenceError(SubtitleError):
    """Raised when a string cannot be resolved to a YouTube video ID."""

    def __init__(self, reference: str, *, hint: Optional[str] = None) -> None:
        super().__init__(f"Invalid YouTube URL or video ID: {reference!r}", hint=hint)
        self.reference = reference


class UnsupportedFormatError(SubtitleError):
    """Raised for a format tag outside SRT, VTT, TXT and JSON."""

    def __init__(self, fmt: str) -> None:
        super().__init__(
            f"Unsupported format: {fmt}. Supported formats: SRT, VTT, TXT, JSON"
        )
        self.format = fmt


class NoSubtitlesError(SubtitleError):
    """Raised when a video yields no usable caption segments."""


class ProviderError(SubtitleError):
    """Raised by the caption provider when talking to YouTube fails."""


class VideoUnavailableError(ProviderError):
    """The video is private, removed, or otherwise not playable."""


class TranscriptUnavailableError(ProviderError):
    """The video has no caption track (in the requested language)."""
