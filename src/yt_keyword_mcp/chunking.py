"""Chunked speech-to-text over fixed-length audio slices.

Two execution modes share the same chunk layout:

* ``find_first_match`` transcribes chunks one at a time in index order and
  stops at the first segment containing the keyword. A failing chunk is
  logged and skipped.
* ``transcribe_all`` transcribes every chunk concurrently (bounded by
  ``max_concurrent``) and merges the results by chunk index. Any failing
  chunk fails the whole run, since a merged transcript with gaps would
  skew every later offset estimate.

Chunk timestamps restart at zero; absolute times are rebuilt by adding
each chunk's ``offset_seconds``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from yt_keyword_mcp.exceptions import KeywordLocatorError, TranscriptionError
from yt_keyword_mcp.models import AudioChunk, ChunkTranscript, TimedEntry, Transcript
from yt_keyword_mcp.providers.base import Transcriber
from yt_keyword_mcp.utils import contains_keyword

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SECONDS = 300
DEFAULT_MAX_CONCURRENT = 4


def merge_chunk_transcripts(
    results: list[tuple[AudioChunk, ChunkTranscript]], language: str = ""
) -> Transcript:
    """Merge per-chunk transcripts into one absolute-time transcript.

    Chunks are assembled by index regardless of the order they are given in.
    """
    segments: list[TimedEntry] = []
    texts: list[str] = []
    for chunk, result in sorted(results, key=lambda pair: pair[0].index):
        local = sorted(result.segments, key=lambda s: s.start)
        segments.extend(s.shifted(chunk.offset_seconds) for s in local)
        if result.text:
            texts.append(result.text)
    # stable: only reorders segments that spill past their chunk boundary
    segments.sort(key=lambda s: s.start)
    return Transcript.from_segments(segments, full_text=" ".join(texts), language=language)


def persist_transcript(transcript: Transcript, workdir: Path) -> Path:
    """Write the transcript into ``workdir``.

    Uses the segment JSON layout when segments exist, plain text otherwise.
    """
    if not transcript.segments:
        path = workdir / "transcript.txt"
        path.write_text(transcript.full_text, encoding="utf-8")
        return path

    path = workdir / "transcript_segments.json"
    document = {
        "text": transcript.full_text,
        "language": transcript.language,
        "duration": transcript.total_duration,
        "segments": [
            {"id": i, "start": s.start, "end": s.end, "text": s.text}
            for i, s in enumerate(transcript.segments)
        ],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2)
    return path


class ChunkedTranscriber:
    def __init__(
        self,
        transcriber: Transcriber,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        language: str | None = None,
    ):
        self._transcriber = transcriber
        self._max_concurrent = max(1, int(max_concurrent))
        self._language = language

    async def find_first_match(self, chunks: list[AudioChunk], keyword: str) -> float | None:
        """Absolute start of the first segment containing ``keyword``.

        Returns None when no chunk matches. Raises TranscriptionError only if
        every chunk failed to transcribe.
        """
        failed: list[int] = []
        for chunk in sorted(chunks, key=lambda c: c.index):
            try:
                result = await self._transcriber.transcribe(chunk.path, self._language)
            except KeywordLocatorError as exc:
                logger.warning(f"transcription error on chunk {chunk.index}: {exc}")
                failed.append(chunk.index)
                continue

            for segment in result.segments:
                if contains_keyword(segment.text, keyword):
                    timestamp = segment.start + chunk.offset_seconds
                    logger.info(f"Keyword found in chunk {chunk.index} at {timestamp:.1f}s")
                    return timestamp

        if chunks and len(failed) == len(chunks):
            raise TranscriptionError(f"all {len(chunks)} chunk transcription(s) failed", failed)
        return None

    async def transcribe_all(self, chunks: list[AudioChunk]) -> Transcript:
        """Transcribe every chunk concurrently and merge in index order."""
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _one(chunk: AudioChunk) -> ChunkTranscript:
            async with semaphore:
                return await self._transcriber.transcribe(chunk.path, self._language)

        ordered = sorted(chunks, key=lambda c: c.index)
        results = await asyncio.gather(*(_one(c) for c in ordered), return_exceptions=True)

        failures = []
        for chunk, result in zip(ordered, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(f"chunk {chunk.index} transcription failed: {result}")
                failures.append((chunk.index, result))
        if failures:
            index, first = failures[0]
            raise TranscriptionError(
                f"chunk {index} transcription failed: {first}"
                + (f" (and {len(failures) - 1} more)" if len(failures) > 1 else ""),
                [i for i, _ in failures],
            )

        transcript = merge_chunk_transcripts(list(zip(ordered, results)), self._language or "")
        logger.info(
            f"Merged {len(ordered)} chunk(s): {len(transcript.segments)} segment(s), "
            f"{transcript.total_duration:.1f}s"
        )
        return transcript
