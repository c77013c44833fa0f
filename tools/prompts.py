"""
Reusable prompts to guide the language model when using the subtitle tool.

These prompts explain the output formats and the language hint of
``fetch_youtube_subtitles``.  They are registered with FastMCP via the
``@mcp.prompt()`` decorator.  When queried, the client can consult this
guidance before attempting to call the tool.
"""

from __future__ import annotations

# Import the shared MCP server.  Absolute import ensures this works
# when run from the project root.
from server import mcp  # type: ignore


@mcp.prompt()
def subtitle_format_guidance() -> str:
    """
    Guidance on choosing arguments for ``fetch_youtube_subtitles``.

    - ``url`` accepts a ``youtube.com/watch?v=`` link, a ``youtu.be``
      short link, an ``/embed/`` or ``/shorts/`` link, or the bare
      11-character video ID.

    - ``format`` selects the output (case does not matter):

      * ``SRT`` – numbered cues with ``HH:MM:SS,mmm`` time codes, for
        subtitle files.
      * ``VTT`` – WebVTT with a ``WEBVTT`` header and
        ``HH:MM:SS.mmm`` time codes, for web players.
      * ``TXT`` – caption text only, one line per cue.  Best for
        reading or summarising.
      * ``JSON`` (default) – a list of ``{text, start, end, duration}``
        objects with times in milliseconds.  Best when timestamps are
        needed for further processing.

    - ``lang`` is an optional language code such as ``en`` or
      ``zh-Hans``.  A base code like ``zh`` also matches regional
      tracks.  Leave it out to get the video's default track.

    Example call:

    .. code-block:: json

        {
          "url": "https://youtu.be/DFlm3_EIbko",
          "format": "TXT"
        }
    """
    return (
        "Use `fetch_youtube_subtitles` with the video URL or ID in `url`. Pick `format` by purpose: "
        "TXT for reading or summarising, JSON (the default) when you need millisecond timestamps, "
        "SRT or VTT when the user wants a subtitle file. Only pass `lang` when the user asks for a "
        "specific language; if the call fails with a language error, retry without it."
    )
