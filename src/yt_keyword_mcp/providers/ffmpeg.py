"""Fixed-length audio segmentation with ffmpeg."""

import logging
from pathlib import Path

from yt_keyword_mcp.exceptions import ProviderError
from yt_keyword_mcp.models import AudioChunk
from yt_keyword_mcp.utils import chunk_offset
from ._subprocess import run_subprocess
from .base import AudioSegmenter

logger = logging.getLogger(__name__)


class FFmpegSegmenter(AudioSegmenter):
    def __init__(self, ffmpeg_bin: str = "ffmpeg"):
        self._bin = ffmpeg_bin

    async def segment(self, audio_path: Path, chunk_seconds: int, workdir: Path) -> list[AudioChunk]:
        chunks_dir = workdir / "chunks"
        chunks_dir.mkdir(parents=True, exist_ok=True)

        result = await run_subprocess([
            self._bin,
            "-hide_banner", "-loglevel", "error",
            "-i", str(audio_path),
            "-ar", "16000",
            "-ac", "1",
            "-b:a", "32k",
            "-f", "segment",
            "-segment_time", str(chunk_seconds),
            "-reset_timestamps", "1",
            "-y", str(chunks_dir / "chunk_%03d.mp3"),
        ])
        if result.returncode != 0:
            raise ProviderError("ffmpeg", f"segmenting failed (code={result.returncode}): {result.output_tail}")

        files = sorted(chunks_dir.glob("chunk_*.mp3"))
        if not files:
            raise ProviderError("ffmpeg", "no chunks produced")
        logger.info(f"Split {audio_path.name} into {len(files)} chunk(s) of {chunk_seconds}s")
        return [
            AudioChunk(index=i, path=str(f), offset_seconds=chunk_offset(i, chunk_seconds))
            for i, f in enumerate(files)
        ]
