"""Exception hierarchy for keyword resolution."""

from __future__ import annotations


class KeywordLocatorError(Exception):
    """Base error for the keyword locator."""


class ConfigurationError(KeywordLocatorError):
    """Raised when configuration or inputs are invalid (e.g. missing API key)."""


class ProviderError(KeywordLocatorError):
    """Raised when an external collaborator (process or remote API) fails."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class CaptionUnavailableError(ProviderError):
    """Raised when no caption document could be obtained for a language."""


class TranscriptionError(KeywordLocatorError):
    """Raised when a chunked transcription run fails as a whole."""

    def __init__(self, message: str, failed_chunks: list[int] | None = None) -> None:
        super().__init__(message)
        self.failed_chunks = list(failed_chunks or [])


class TranscriptDecodeError(KeywordLocatorError):
    """Raised when a transcript document is structurally invalid JSON."""


class StageError(KeywordLocatorError):
    """Raised when a resolution stage could not be completed at all."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message
