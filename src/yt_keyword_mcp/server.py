"""YouTube Keyword Timestamp MCP Server."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Annotated

from pydantic import Field
from mcp.server.fastmcp import FastMCP

from yt_keyword_mcp.config import Settings, Transport
from yt_keyword_mcp.exceptions import KeywordLocatorError
from yt_keyword_mcp.models import SearchResult
from yt_keyword_mcp.pipeline import KeywordLocator
from yt_keyword_mcp.utils import format_timestamp

# Logging to stderr (MCP convention)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("yt-keyword-mcp")

# Module-level state
_locator = None
_settings = None

# Tool annotations for read-only API tools
TOOL_ANNOTATIONS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "openWorldHint": True,
}


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    global _locator, _settings
    _settings = Settings()
    _locator = KeywordLocator.from_settings(_settings)
    logger.info(
        f"Caption source: {_settings.caption_source.value} | "
        f"chunk={_settings.chunk_seconds}s | workers={_settings.max_concurrent_transcriptions}"
    )
    if not _settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set; only caption search is available")

    logger.info("Server started")
    yield

    if _locator:
        await _locator.close()
    logger.info("Server stopped")


mcp = FastMCP(
    "YouTube Keyword Timestamp",
    instructions="Find when a keyword is first spoken in a YouTube video",
    lifespan=app_lifespan,
)


def _format_result(url: str, keyword: str, result: SearchResult) -> str:
    source = result.source.value if result.source else "none"
    if not result.found:
        return (
            f"## '{keyword}' not found\n"
            f"**Video:** {url}\n"
            f"**Language:** {result.language} | **Source:** {source}"
        )
    return (
        f"## '{keyword}' found at {format_timestamp(result.timestamp_seconds)}\n"
        f"**Video:** {url}\n"
        f"**Seconds:** {result.timestamp_seconds:.1f} | "
        f"**Language:** {result.language} | **Source:** {source}"
    )


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def find_keyword_timestamp(
    url: Annotated[str, Field(description="Video URL (any site yt-dlp supports) or YouTube video ID")],
    keyword: Annotated[str, Field(description="Keyword or phrase to locate (case-insensitive, first occurrence wins)")],
    language: Annotated[str, Field(default="", description="ISO 639-1 caption language code (e.g. en, de, ar); empty uses the server default")] = "",
) -> str:
    """Find the time at which a keyword is first spoken in a video, using captions first and speech-to-text as a fallback."""
    if not url.strip() or not keyword.strip():
        return "Error: url and keyword are required."

    try:
        result = await _locator.resolve(url, keyword, language or None)
    except KeywordLocatorError as e:
        return f"Error resolving '{keyword}' in {url}: {e}"

    return _format_result(url, keyword, result)


# -- MCP Resources --


@mcp.resource("youtube://keyword-help")
def help_resource() -> str:
    """Usage guide for the keyword timestamp server."""
    return """# YouTube Keyword Timestamp MCP Server - Help Guide

## find_keyword_timestamp
Find when a keyword is first spoken in a video.
- Looks in the caption track first (manual or auto-generated)
- Without captions, transcribes the audio in 5-minute chunks and stops at the first match
- As a last resort, transcribes the whole video and searches the merged transcript
- Example: find_keyword_timestamp(url="https://youtube.com/watch?v=VIDEO_ID", keyword="neural network", language="en")

## Notes
- Timestamps from speech-to-text are segment-level estimates
- Transcription fallbacks need OPENAI_API_KEY
"""


def main():
    settings = Settings()
    if settings.transport == Transport.STREAMABLE_HTTP:
        mcp.run(transport="streamable-http")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
