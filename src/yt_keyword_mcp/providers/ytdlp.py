"""Caption and audio acquisition through the yt-dlp command-line tool."""

import logging
from pathlib import Path

from yt_keyword_mcp.exceptions import CaptionUnavailableError, ProviderError
from ._subprocess import run_subprocess
from .base import AudioSource, CaptionDownloader

logger = logging.getLogger(__name__)


class YtDlpCaptionDownloader(CaptionDownloader):
    def __init__(self, ytdlp_bin: str = "yt-dlp"):
        self._bin = ytdlp_bin

    async def download(self, url: str, language: str, workdir: Path) -> str:
        template = workdir / "captions"
        result = await run_subprocess([
            self._bin,
            "--skip-download",
            "--write-subs",
            "--write-auto-subs",
            "--sub-langs", language,
            "--sub-format", "srt/best",
            "--convert-subs", "srt",
            "-o", str(template),
            url,
        ])
        if result.returncode != 0:
            logger.info(f"yt-dlp caption download exited {result.returncode}: {result.output_tail}")

        srt_path = workdir / f"captions.{language}.srt"
        if not srt_path.exists():
            # yt-dlp may pick a regional variant such as en-US
            candidates = sorted(workdir.glob("captions.*.srt"))
            if not candidates:
                raise CaptionUnavailableError("yt-dlp", f"no {language} captions for {url}")
            srt_path = candidates[0]
        try:
            return srt_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise CaptionUnavailableError("yt-dlp", f"cannot read {srt_path.name}: {exc}") from exc


class YtDlpAudioSource(AudioSource):
    def __init__(self, ytdlp_bin: str = "yt-dlp"):
        self._bin = ytdlp_bin

    async def download_audio(self, url: str, workdir: Path) -> Path:
        logger.info("Downloading compressed audio...")
        result = await run_subprocess([
            self._bin,
            "-f", "bestaudio",
            "--extract-audio",
            "--audio-format", "mp3",
            "--audio-quality", "32K",
            "--postprocessor-args", "ffmpeg:-ac 1 -ar 8000",
            "-o", str(workdir / "audio.%(ext)s"),
            url,
        ])
        audio_path = workdir / "audio.mp3"
        if result.returncode != 0 or not audio_path.exists():
            raise ProviderError(
                "yt-dlp",
                f"audio download failed (code={result.returncode}): {result.output_tail}",
            )
        logger.info(f"Audio downloaded: {audio_path}")
        return audio_path
