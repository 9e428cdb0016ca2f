"""External collaborators: caption, audio and transcription providers."""

from .base import AudioSegmenter, AudioSource, CaptionDownloader, Transcriber
from .ffmpeg import FFmpegSegmenter
from .standalone import TranscriptApiCaptionDownloader
from .whisper import WhisperTranscriber
from .ytdlp import YtDlpAudioSource, YtDlpCaptionDownloader

__all__ = [
    "AudioSegmenter",
    "AudioSource",
    "CaptionDownloader",
    "Transcriber",
    "FFmpegSegmenter",
    "TranscriptApiCaptionDownloader",
    "WhisperTranscriber",
    "YtDlpAudioSource",
    "YtDlpCaptionDownloader",
]
