"""Data models for keyword resolution."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TimedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: float = Field(ge=0)
    end: float
    text: str

    @model_validator(mode="after")
    def _end_not_before_start(self):
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) precedes start ({self.start})")
        return self

    def shifted(self, offset: float) -> "TimedEntry":
        """Return a copy moved forward by ``offset`` seconds."""
        return TimedEntry(start=self.start + offset, end=self.end + offset, text=self.text)


class ChunkTranscript(BaseModel):
    """Text and timed segments returned for a single audio chunk."""

    text: str = ""
    segments: list[TimedEntry] = []


class Transcript(BaseModel):
    full_text: str = ""
    segments: list[TimedEntry] = []
    total_duration: float = 0.0
    language: str = ""

    @classmethod
    def from_segments(
        cls, segments: list[TimedEntry], full_text: str = "", language: str = ""
    ) -> "Transcript":
        duration = segments[-1].end if segments else 0.0
        return cls(
            full_text=full_text,
            segments=segments,
            total_duration=duration,
            language=language,
        )

    @model_validator(mode="after")
    def _segments_ordered(self):
        for prev, cur in zip(self.segments, self.segments[1:]):
            if cur.start < prev.start:
                raise ValueError("segments must be ordered by start time")
        return self


class AudioChunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    path: str
    offset_seconds: float = Field(ge=0)


class ResultSource(str, Enum):
    CAPTIONS = "captions"
    EARLY_TRANSCRIPTION = "early_transcription"
    FULL_TRANSCRIPTION = "full_transcription"


class SearchResult(BaseModel):
    found: bool
    timestamp_seconds: float | None = None
    language: str
    source: ResultSource | None = None

    @model_validator(mode="after")
    def _timestamp_only_when_found(self):
        if not self.found:
            self.timestamp_seconds = None
        elif self.timestamp_seconds is None:
            raise ValueError("a found result needs a timestamp")
        return self

    @classmethod
    def not_found(cls, language: str, source: ResultSource | None = None) -> "SearchResult":
        return cls(found=False, language=language, source=source)
