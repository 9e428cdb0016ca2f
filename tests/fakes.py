"""Test doubles for the external collaborators."""

import asyncio
from pathlib import Path

from yt_keyword_mcp.exceptions import CaptionUnavailableError, ProviderError
from yt_keyword_mcp.models import AudioChunk, ChunkTranscript, TimedEntry
from yt_keyword_mcp.providers.base import AudioSegmenter, AudioSource, CaptionDownloader, Transcriber


class FakeTranscriber(Transcriber):
    """Transcriber returning canned results keyed by chunk path.

    A result that is an Exception instance is raised instead of returned.
    """

    def __init__(self, results, available=True, delay=0.0):
        self.results = results
        self.calls = []
        self.active = 0
        self.max_active = 0
        self.closed = False
        self._available = available
        self._delay = delay

    @property
    def available(self) -> bool:
        return self._available

    async def transcribe(self, audio_path, language=None):
        self.calls.append(audio_path)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
            result = self.results[audio_path]
            if isinstance(result, Exception):
                raise result
            return result
        finally:
            self.active -= 1

    async def close(self):
        self.closed = True


class FakeCaptions(CaptionDownloader):
    def __init__(self, document=None):
        self.document = document
        self.calls = []

    async def download(self, url, language, workdir):
        self.calls.append((url, language, workdir))
        if self.document is None:
            raise CaptionUnavailableError("yt-dlp", f"no {language} captions for {url}")
        (workdir / f"captions.{language}.srt").write_text(self.document, encoding="utf-8")
        return self.document


class FakeAudio(AudioSource):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = 0

    async def download_audio(self, url, workdir):
        self.calls += 1
        if self.fail:
            raise ProviderError("yt-dlp", "audio download failed (code=1): ERROR: Video unavailable")
        path = workdir / "audio.mp3"
        path.write_bytes(b"ID3")
        return path


class FakeSegmenter(AudioSegmenter):
    def __init__(self, count):
        self.count = count
        self.workdirs = []

    async def segment(self, audio_path, chunk_seconds, workdir):
        self.workdirs.append(Path(workdir))
        return make_chunks(self.count, chunk_seconds)


def make_chunks(count, chunk_seconds=300):
    return [
        AudioChunk(index=i, path=f"chunk_{i:03d}.mp3", offset_seconds=float(i * chunk_seconds))
        for i in range(count)
    ]


def chunk_result(*segments, text=None):
    entries = [TimedEntry(start=s, end=e, text=t) for s, e, t in segments]
    return ChunkTranscript(
        text=text if text is not None else " ".join(t for _, _, t in segments),
        segments=entries,
    )


def chunk_failure(index=0):
    return ProviderError("whisper", f"chunk_{index:03d}.mp3: 500 Internal Server Error")
