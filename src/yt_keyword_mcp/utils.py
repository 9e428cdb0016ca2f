"""Utility functions."""

import re

# Assumed speaking rate used to turn a word count into elapsed time.
WORDS_PER_MINUTE = 150


def extract_video_id(url_or_id: str) -> str | None:
    """Extract YouTube video ID from URL or return as-is if valid ID."""
    patterns = [
        r"(?:v=|/v/|youtu\.be/)([a-zA-Z0-9_-]{11})",
        r"(?:embed/|shorts/|live/)([a-zA-Z0-9_-]{11})",
    ]
    for pattern in patterns:
        match = re.search(pattern, url_or_id)
        if match:
            return match.group(1)
    if re.fullmatch(r"[a-zA-Z0-9_-]{11}", url_or_id):
        return url_or_id
    return None


def format_timestamp(seconds: float) -> str:
    """Format seconds as HH:MM:SS, rounded to the nearest second."""
    total = int(max(seconds, 0) + 0.5)
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def find_keyword(text: str, keyword: str) -> int:
    """Index of the first case-insensitive occurrence of ``keyword``, or -1."""
    keyword = keyword.strip()
    if not keyword:
        return -1
    match = re.search(re.escape(keyword), text, re.IGNORECASE)
    return match.start() if match else -1


def contains_keyword(text: str, keyword: str) -> bool:
    return find_keyword(text, keyword) >= 0


def estimate_offset(text: str, keyword: str) -> float:
    """Estimate when ``keyword`` is spoken from the words that precede it.

    Counts whitespace-delimited words before the first case-insensitive
    occurrence and converts them to seconds at ``WORDS_PER_MINUTE``.
    Returns 0.0 when the keyword does not occur; callers check presence first.
    """
    index = find_keyword(text, keyword)
    if index < 0:
        return 0.0
    words = len(text[:index].split())
    return words * 60 / WORDS_PER_MINUTE


def chunk_offset(index: int, chunk_seconds: float) -> float:
    """Absolute start, in seconds, of the audio chunk at ``index``."""
    if index < 0:
        raise ValueError("chunk index must be non-negative")
    return float(index * chunk_seconds)
