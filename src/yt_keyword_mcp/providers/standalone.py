"""Caption downloader using youtube-transcript-api directly."""

import asyncio
import logging
from functools import partial
from pathlib import Path

from youtube_transcript_api import CouldNotRetrieveTranscript, YouTubeTranscriptApi

from yt_keyword_mcp.captions import render_srt
from yt_keyword_mcp.exceptions import CaptionUnavailableError
from yt_keyword_mcp.models import TimedEntry
from yt_keyword_mcp.utils import extract_video_id
from .base import CaptionDownloader

logger = logging.getLogger(__name__)


class TranscriptApiCaptionDownloader(CaptionDownloader):
    """Fetches caption snippets in-process and renders them as SRT."""

    def __init__(self):
        self._api = YouTubeTranscriptApi()

    async def download(self, url: str, language: str, workdir: Path) -> str:
        video_id = extract_video_id(url)
        if not video_id:
            raise CaptionUnavailableError("youtube-transcript-api", f"not a YouTube URL or video ID: {url}")

        loop = asyncio.get_running_loop()
        try:
            fetched = await loop.run_in_executor(
                None,
                partial(self._fetch, video_id, language),
            )
        except CouldNotRetrieveTranscript as e:
            raise CaptionUnavailableError(
                "youtube-transcript-api", f"No transcript available for {video_id}: {e}"
            ) from e
        except Exception as e:
            raise CaptionUnavailableError(
                "youtube-transcript-api", f"Caption fetch failed for {video_id}: {e}"
            ) from e

        entries = [
            TimedEntry(start=s.start, end=s.start + max(s.duration, 0.0), text=s.text)
            for s in fetched
        ]
        logger.info(f"Fetched {len(entries)} caption snippet(s) for {video_id} [{language}]")
        return render_srt(entries)

    def _fetch(self, video_id: str, language: str):
        """Synchronous fetch in executor."""
        return self._api.fetch(video_id, languages=[language])
