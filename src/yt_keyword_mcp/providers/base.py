"""Abstract bases for the external collaborators used during resolution."""

from abc import ABC, abstractmethod
from pathlib import Path

from yt_keyword_mcp.models import AudioChunk, ChunkTranscript


class CaptionDownloader(ABC):
    @abstractmethod
    async def download(self, url: str, language: str, workdir: Path) -> str:
        """Return an SRT caption document, or raise CaptionUnavailableError."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        return None


class AudioSource(ABC):
    @abstractmethod
    async def download_audio(self, url: str, workdir: Path) -> Path:
        """Download mono, low-bitrate audio for ``url`` into ``workdir``."""
        ...


class AudioSegmenter(ABC):
    @abstractmethod
    async def segment(self, audio_path: Path, chunk_seconds: int, workdir: Path) -> list[AudioChunk]:
        """Split audio into fixed-length chunks whose timestamps restart at zero."""
        ...


class Transcriber(ABC):
    @property
    def available(self) -> bool:
        """Whether the capability is configured (e.g. has a credential)."""
        return True

    @abstractmethod
    async def transcribe(self, audio_path: str, language: str | None = None) -> ChunkTranscript:
        """Transcribe one audio chunk into text and chunk-local timed segments."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        return None
