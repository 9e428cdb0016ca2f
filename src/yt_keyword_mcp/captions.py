"""Caption (SRT) parsing, rendering and keyword lookup."""

from __future__ import annotations

import re
from collections.abc import Iterable

from yt_keyword_mcp.models import TimedEntry
from yt_keyword_mcp.utils import contains_keyword

_BLOCK_SEPARATOR = re.compile(r"\n[ \t]*\n")
_TIMECODE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2}),(\d{3})\s*-->\s*(\d{2}):(\d{2}):(\d{2}),(\d{3})"
)
_MARKUP = re.compile(r"<[^>]*>")


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def _to_seconds(hours: str, minutes: str, seconds: str, millis: str) -> float:
    return _to_int(hours) * 3600 + _to_int(minutes) * 60 + _to_int(seconds) + _to_int(millis) / 1000.0


def _parse_block(block: str) -> TimedEntry | None:
    lines = block.strip().split("\n")
    for i, line in enumerate(lines):
        match = _TIMECODE.search(line)
        if match:
            break
    else:
        return None

    groups = match.groups()
    start = _to_seconds(*groups[:4])
    end = max(_to_seconds(*groups[4:]), start)

    parts = []
    for line in lines[i + 1:]:
        text = _MARKUP.sub("", line.strip()).strip()
        if text:
            parts.append(text)
    if not parts:
        return None
    return TimedEntry(start=start, end=end, text=" ".join(parts))


def parse_srt(document: str) -> list[TimedEntry]:
    """Parse an SRT document into timed entries, in document order.

    Blocks without a ``HH:MM:SS,mmm --> HH:MM:SS,mmm`` line, or without any
    text after it, are skipped. Never raises on malformed input.
    """
    content = document.replace("\r\n", "\n").replace("\r", "\n")
    entries = []
    for block in _BLOCK_SEPARATOR.split(content):
        entry = _parse_block(block)
        if entry is not None:
            entries.append(entry)
    return entries


def find_in_entries(entries: Iterable[TimedEntry], keyword: str) -> float | None:
    """Start time of the first entry whose text contains ``keyword``."""
    for entry in entries:
        if contains_keyword(entry.text, keyword):
            return entry.start
    return None


def _format_srt_time(seconds: float) -> str:
    total_ms = int(round(max(seconds, 0.0) * 1000))
    total_s, ms = divmod(total_ms, 1000)
    total_m, s = divmod(total_s, 60)
    h, m = divmod(total_m, 60)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def render_srt(entries: Iterable[TimedEntry]) -> str:
    """Render timed entries as an SRT document."""
    blocks = []
    for index, entry in enumerate(entries, start=1):
        blocks.append(
            f"{index}\n"
            f"{_format_srt_time(entry.start)} --> {_format_srt_time(entry.end)}\n"
            f"{entry.text}\n"
        )
    return "\n".join(blocks)
