"""Tests for the Whisper transcriber with httpx mocking."""

import httpx
import pytest
import respx

from yt_keyword_mcp.chunking import ChunkedTranscriber
from yt_keyword_mcp.exceptions import ConfigurationError, ProviderError
from yt_keyword_mcp.models import AudioChunk
from yt_keyword_mcp.providers.whisper import WhisperTranscriber

BASE_URL = "http://test-whisper/v1"


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "chunk_000.mp3"
    path.write_bytes(b"ID3fake")
    return path


@pytest.fixture
def transcriber():
    return WhisperTranscriber(api_key="sk-test", base_url=BASE_URL, model="whisper-1")


class TestWhisperTranscriber:
    @respx.mock
    @pytest.mark.asyncio
    async def test_transcribe_success(self, transcriber, audio_file):
        route = respx.post(f"{BASE_URL}/audio/transcriptions").mock(
            return_value=httpx.Response(200, json={
                "task": "transcribe",
                "language": "english",
                "duration": 12.0,
                "text": " Hello world. Second line. ",
                "segments": [
                    {"id": 0, "start": 0.0, "end": 4.5, "text": " Hello world."},
                    {"id": 1, "start": 4.5, "end": 9.0, "text": " Second line."},
                ],
            })
        )
        result = await transcriber.transcribe(str(audio_file))
        assert result.text == "Hello world. Second line."
        assert [(s.start, s.end, s.text) for s in result.segments] == [
            (0.0, 4.5, "Hello world."),
            (4.5, 9.0, "Second line."),
        ]
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        await transcriber.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_http_error_is_provider_error(self, transcriber, audio_file):
        respx.post(f"{BASE_URL}/audio/transcriptions").mock(
            return_value=httpx.Response(500, json={"error": {"message": "boom"}})
        )
        with pytest.raises(ProviderError, match="chunk_000.mp3"):
            await transcriber.transcribe(str(audio_file))
        await transcriber.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout_is_provider_error(self, transcriber, audio_file):
        respx.post(f"{BASE_URL}/audio/transcriptions").mock(side_effect=httpx.ReadTimeout("Timeout"))
        with pytest.raises(ProviderError):
            await transcriber.transcribe(str(audio_file))
        await transcriber.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_segments_gives_text_only(self, transcriber, audio_file):
        respx.post(f"{BASE_URL}/audio/transcriptions").mock(
            return_value=httpx.Response(200, json={"text": "only text"})
        )
        result = await transcriber.transcribe(str(audio_file))
        assert result.text == "only text"
        assert result.segments == []
        await transcriber.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_malformed_segment_is_provider_error(self, transcriber, audio_file):
        respx.post(f"{BASE_URL}/audio/transcriptions").mock(
            return_value=httpx.Response(200, json={
                "text": "hi",
                "segments": [{"start": None, "end": 1.0, "text": "hi"}],
            })
        )
        with pytest.raises(ProviderError, match="malformed response"):
            await transcriber.transcribe(str(audio_file))
        await transcriber.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_object_payload_is_provider_error(self, transcriber, audio_file):
        respx.post(f"{BASE_URL}/audio/transcriptions").mock(
            return_value=httpx.Response(200, json=["not", "an", "object"])
        )
        with pytest.raises(ProviderError, match="malformed response"):
            await transcriber.transcribe(str(audio_file))
        await transcriber.close()

    @pytest.mark.asyncio
    async def test_missing_audio_file_is_provider_error(self, transcriber, tmp_path):
        with pytest.raises(ProviderError, match="cannot open audio"):
            await transcriber.transcribe(str(tmp_path / "missing.mp3"))
        await transcriber.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_malformed_chunk_skipped_by_early_pass(self, transcriber, tmp_path):
        chunks = []
        for i in range(2):
            path = tmp_path / f"chunk_{i:03d}.mp3"
            path.write_bytes(b"ID3fake")
            chunks.append(AudioChunk(index=i, path=str(path), offset_seconds=i * 300.0))
        respx.post(f"{BASE_URL}/audio/transcriptions").mock(side_effect=[
            httpx.Response(200, json={"text": "x", "segments": [{"start": None, "text": "x"}]}),
            httpx.Response(200, json={
                "text": "say keyword",
                "segments": [{"start": 4.0, "end": 5.0, "text": "say keyword"}],
            }),
        ])
        timestamp = await ChunkedTranscriber(transcriber).find_first_match(chunks, "keyword")
        assert timestamp == pytest.approx(304.0)
        await transcriber.close()

    @pytest.mark.asyncio
    async def test_missing_api_key(self, audio_file):
        transcriber = WhisperTranscriber(api_key="", base_url=BASE_URL)
        assert not transcriber.available
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            await transcriber.transcribe(str(audio_file))
        await transcriber.close()
