"""Speech-to-text through the OpenAI-compatible audio transcription endpoint."""

import logging
from pathlib import Path

import httpx

from yt_keyword_mcp.exceptions import ConfigurationError, ProviderError
from yt_keyword_mcp.models import ChunkTranscript, TimedEntry
from .base import Transcriber

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


class WhisperTranscriber(Transcriber):
    """Transcribes audio chunks with segment-level timestamps.

    Each call is a single request: no retries are attempted here, callers
    decide whether a failed chunk is skipped or fatal.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        model: str = "whisper-1",
        timeout: float = 300.0,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
        )

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    async def transcribe(self, audio_path: str, language: str | None = None) -> ChunkTranscript:
        if not self._api_key:
            raise ConfigurationError("OPENAI_API_KEY not set")

        data = {
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities[]": "segment",
        }
        if language:
            data["language"] = language

        path = Path(audio_path)
        try:
            f = open(path, "rb")
        except OSError as exc:
            raise ProviderError("whisper", f"{path.name}: cannot open audio: {exc}") from exc
        with f:
            try:
                resp = await self._client.post(
                    "/audio/transcriptions",
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    files={"file": (path.name, f, "audio/mpeg")},
                    data=data,
                )
                resp.raise_for_status()
                payload = resp.json()
            except httpx.HTTPError as exc:
                raise ProviderError("whisper", f"{path.name}: {exc}") from exc
            except ValueError as exc:
                raise ProviderError("whisper", f"{path.name}: invalid JSON response") from exc

        try:
            return self._parse_payload(payload)
        except (TypeError, ValueError, AttributeError) as exc:
            # pydantic ValidationError is a ValueError
            raise ProviderError("whisper", f"{path.name}: malformed response: {exc}") from exc

    @staticmethod
    def _parse_payload(payload: dict) -> ChunkTranscript:
        segments = []
        for s in payload.get("segments") or []:
            start = max(float(s.get("start", 0.0)), 0.0)
            end = max(float(s.get("end", start)), start)
            segments.append(TimedEntry(start=start, end=end, text=str(s.get("text", "")).strip()))

        return ChunkTranscript(text=str(payload.get("text", "")).strip(), segments=segments)

    async def close(self) -> None:
        await self._client.aclose()
