"""Keyword-to-timestamp resolution across fallback tiers.

Tiers run in order, each in the request's scratch namespace:

1. captions: download a caption track and scan its entries.
2. early transcription: transcribe audio chunks in order, stop at a match.
3. full transcription: transcribe all chunks concurrently, merge, search.

Each tier reports RESOLVED (final answer, found or not), NEXT (try the
following tier) or FATAL (surface an error naming the failed stage).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from yt_keyword_mcp.captions import find_in_entries, parse_srt
from yt_keyword_mcp.chunking import (
    DEFAULT_CHUNK_SECONDS,
    DEFAULT_MAX_CONCURRENT,
    ChunkedTranscriber,
    persist_transcript,
)
from yt_keyword_mcp.config import CaptionSource, Settings
from yt_keyword_mcp.exceptions import (
    ConfigurationError,
    KeywordLocatorError,
    StageError,
    TranscriptDecodeError,
)
from yt_keyword_mcp.models import AudioChunk, ResultSource, SearchResult
from yt_keyword_mcp.providers import (
    AudioSegmenter,
    AudioSource,
    CaptionDownloader,
    FFmpegSegmenter,
    Transcriber,
    TranscriptApiCaptionDownloader,
    WhisperTranscriber,
    YtDlpAudioSource,
    YtDlpCaptionDownloader,
)
from yt_keyword_mcp.streaming import search_transcript_file
from yt_keyword_mcp.utils import contains_keyword, estimate_offset
from yt_keyword_mcp.workspace import scratch_namespace

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


class TierStatus(str, Enum):
    RESOLVED = "resolved"
    NEXT = "next"
    FATAL = "fatal"


@dataclass
class TierOutcome:
    status: TierStatus
    result: SearchResult | None = None
    stage: str = ""
    error: Exception | None = None

    @classmethod
    def resolved(cls, result: SearchResult) -> "TierOutcome":
        return cls(TierStatus.RESOLVED, result=result)

    @classmethod
    def fall_through(cls) -> "TierOutcome":
        return cls(TierStatus.NEXT)

    @classmethod
    def fatal(cls, stage: str, error: Exception) -> "TierOutcome":
        return cls(TierStatus.FATAL, stage=stage, error=error)


@dataclass
class ResolveRequest:
    """State of one ``resolve`` call; lives only inside its scratch namespace."""

    url: str
    keyword: str
    language: str
    workdir: Path
    chunks: list[AudioChunk] | None = field(default=None)


Tier = Callable[[ResolveRequest], Awaitable[TierOutcome]]


def normalize_language(language: str | None, default: str = DEFAULT_LANGUAGE) -> str:
    code = (language or "").strip().lower()
    return code or default


class KeywordLocator:
    """Resolve when a keyword is first spoken in a video."""

    def __init__(
        self,
        captions: CaptionDownloader,
        audio: AudioSource,
        segmenter: AudioSegmenter,
        transcriber: Transcriber,
        *,
        default_language: str = DEFAULT_LANGUAGE,
        chunk_seconds: int = DEFAULT_CHUNK_SECONDS,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        scratch_root: str | Path | None = None,
    ):
        self._captions = captions
        self._audio = audio
        self._segmenter = segmenter
        self._transcriber = transcriber
        self._chunked = ChunkedTranscriber(transcriber, max_concurrent=max_concurrent)
        self._default_language = normalize_language(default_language)
        self._chunk_seconds = chunk_seconds
        self._scratch_root = scratch_root
        self.tiers: list[Tier] = [
            self._caption_tier,
            self._early_transcription_tier,
            self._full_transcription_tier,
        ]

    @classmethod
    def from_settings(cls, settings: Settings) -> "KeywordLocator":
        if settings.caption_source == CaptionSource.TRANSCRIPT_API:
            captions: CaptionDownloader = TranscriptApiCaptionDownloader()
        else:
            captions = YtDlpCaptionDownloader(settings.ytdlp_bin)
        return cls(
            captions=captions,
            audio=YtDlpAudioSource(settings.ytdlp_bin),
            segmenter=FFmpegSegmenter(settings.ffmpeg_bin),
            transcriber=WhisperTranscriber(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                model=settings.transcription_model,
                timeout=settings.transcription_timeout,
            ),
            default_language=settings.default_language,
            chunk_seconds=settings.chunk_seconds,
            max_concurrent=settings.max_concurrent_transcriptions,
            scratch_root=settings.scratch_root,
        )

    async def resolve(self, url: str, keyword: str, language: str | None = None) -> SearchResult:
        """Return where ``keyword`` first occurs, or a not-found result.

        Raises StageError when a stage could not be completed at all, and
        ConfigurationError for empty input.
        """
        url = (url or "").strip()
        keyword = (keyword or "").strip()
        if not url or not keyword:
            raise ConfigurationError("video URL and keyword are required")
        lang = normalize_language(language, self._default_language)

        with scratch_namespace(self._scratch_root) as workdir:
            request = ResolveRequest(url=url, keyword=keyword, language=lang, workdir=workdir)
            for tier in self.tiers:
                outcome = await tier(request)
                if outcome.status is TierStatus.RESOLVED:
                    return outcome.result
                if outcome.status is TierStatus.FATAL:
                    logger.error(f"{outcome.stage} failed for {url}: {outcome.error}")
                    raise StageError(outcome.stage, str(outcome.error)) from outcome.error
        return SearchResult.not_found(lang)

    async def close(self) -> None:
        await self._captions.close()
        await self._transcriber.close()

    async def _ensure_chunks(self, request: ResolveRequest) -> list[AudioChunk]:
        if request.chunks is None:
            audio_path = await self._audio.download_audio(request.url, request.workdir)
            request.chunks = await self._segmenter.segment(
                audio_path, self._chunk_seconds, request.workdir
            )
        return request.chunks

    async def _caption_tier(self, request: ResolveRequest) -> TierOutcome:
        try:
            document = await self._captions.download(request.url, request.language, request.workdir)
        except KeywordLocatorError as exc:
            logger.info(f"Captions unavailable, falling back to transcription: {exc}")
            return TierOutcome.fall_through()

        entries = parse_srt(document)
        # an unusable caption track counts as no captions, not as a miss
        if not entries:
            logger.info("Caption document had no timed entries, falling back to transcription")
            return TierOutcome.fall_through()

        timestamp = find_in_entries(entries, request.keyword)
        if timestamp is None:
            return TierOutcome.resolved(SearchResult.not_found(request.language, ResultSource.CAPTIONS))
        return TierOutcome.resolved(
            SearchResult(
                found=True,
                timestamp_seconds=timestamp,
                language=request.language,
                source=ResultSource.CAPTIONS,
            )
        )

    async def _early_transcription_tier(self, request: ResolveRequest) -> TierOutcome:
        if not self._transcriber.available:
            logger.warning("Transcriber not configured, skipping early chunked transcription")
            return TierOutcome.fall_through()
        try:
            chunks = await self._ensure_chunks(request)
            timestamp = await self._chunked.find_first_match(chunks, request.keyword)
        except KeywordLocatorError as exc:
            logger.warning(f"early chunked transcription failed: {exc}")
            return TierOutcome.fall_through()

        if timestamp is None:
            logger.info("No chunk matched, falling back to full transcription")
            return TierOutcome.fall_through()
        return TierOutcome.resolved(
            SearchResult(
                found=True,
                timestamp_seconds=timestamp,
                language=request.language,
                source=ResultSource.EARLY_TRANSCRIPTION,
            )
        )

    async def _full_transcription_tier(self, request: ResolveRequest) -> TierOutcome:
        if not self._transcriber.available:
            return TierOutcome.fatal("transcription", ConfigurationError("OPENAI_API_KEY not set"))
        try:
            chunks = await self._ensure_chunks(request)
        except KeywordLocatorError as exc:
            return TierOutcome.fatal("audio acquisition", exc)
        try:
            transcript = await self._chunked.transcribe_all(chunks)
        except KeywordLocatorError as exc:
            return TierOutcome.fatal("transcription", exc)

        artifact = persist_transcript(transcript, request.workdir)
        try:
            timestamp = await asyncio.to_thread(self._search_artifact, artifact, request.keyword)
        except TranscriptDecodeError as exc:
            return TierOutcome.fatal("transcript search", exc)

        if timestamp is None:
            return TierOutcome.resolved(
                SearchResult.not_found(request.language, ResultSource.FULL_TRANSCRIPTION)
            )
        return TierOutcome.resolved(
            SearchResult(
                found=True,
                timestamp_seconds=timestamp,
                language=request.language,
                source=ResultSource.FULL_TRANSCRIPTION,
            )
        )

    @staticmethod
    def _search_artifact(path: Path, keyword: str) -> float | None:
        if path.suffix == ".json":
            return search_transcript_file(path, keyword)
        text = path.read_text(encoding="utf-8")
        if contains_keyword(text, keyword):
            return estimate_offset(text, keyword)
        return None
