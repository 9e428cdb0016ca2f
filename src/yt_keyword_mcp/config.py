"""Configuration via environment variables."""

from enum import Enum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CaptionSource(str, Enum):
    YTDLP = "ytdlp"
    TRANSCRIPT_API = "transcript_api"


class Transport(str, Enum):
    STDIO = "stdio"
    STREAMABLE_HTTP = "streamable-http"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="YT_KW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    caption_source: CaptionSource = CaptionSource.YTDLP
    default_language: str = "en"

    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("YT_KW_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    openai_base_url: str = "https://api.openai.com/v1"
    transcription_model: str = "whisper-1"
    transcription_timeout: float = Field(default=300.0, gt=0)

    chunk_seconds: int = Field(default=300, ge=1)
    max_concurrent_transcriptions: int = Field(default=4, ge=1)

    ytdlp_bin: str = "yt-dlp"
    ffmpeg_bin: str = "ffmpeg"
    scratch_root: str | None = None

    transport: Transport = Transport.STDIO
