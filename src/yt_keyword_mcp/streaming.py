"""Incremental keyword search over large JSON transcript documents."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, TextIO

from yt_keyword_mcp.exceptions import TranscriptDecodeError
from yt_keyword_mcp.utils import contains_keyword, estimate_offset

_WHITESPACE = " \t\n\r"
_SCALAR_END = re.compile(r"[,\]}\s]")


class JsonPullReader:
    """Pull-based reader over a JSON text stream.

    Exposes "next object key" and "next array element" steps so callers can
    stop anywhere without reading the rest of the input. Only the value
    currently being decoded is held in memory; skipped values are scanned
    character by character and never materialized.
    """

    def __init__(self, stream: TextIO, chunk_size: int = 64 * 1024):
        self._stream = stream
        self._chunk_size = chunk_size
        self._decoder = json.JSONDecoder()
        self._buf = ""
        self._pos = 0
        self._eof = False
        self._first: list[bool] = []

    def _fill(self) -> bool:
        if self._eof:
            return False
        pending = len(self._buf) - self._pos
        data = self._stream.read(max(self._chunk_size, pending))
        if not data:
            self._eof = True
            return False
        self._buf = self._buf[self._pos:] + data
        self._pos = 0
        return True

    def _peek(self) -> str | None:
        while True:
            while self._pos < len(self._buf) and self._buf[self._pos] in _WHITESPACE:
                self._pos += 1
            if self._pos < len(self._buf):
                return self._buf[self._pos]
            if not self._fill():
                return None

    def _expect(self, char: str) -> None:
        found = self._peek()
        if found != char:
            raise TranscriptDecodeError(
                f"expected {char!r}, found {'end of document' if found is None else repr(found)}"
            )
        self._pos += 1

    def begin_object(self) -> None:
        self._expect("{")
        self._first.append(True)

    def begin_array(self) -> None:
        self._expect("[")
        self._first.append(True)

    def _advance(self, closing: str) -> bool:
        if not self._first:
            raise TranscriptDecodeError("not inside an object or array")
        if self._peek() == closing:
            self._pos += 1
            self._first.pop()
            return False
        if self._first[-1]:
            self._first[-1] = False
        else:
            self._expect(",")
        return True

    def next_key(self) -> str | None:
        """Move to the next key of the current object; None once it closes."""
        if not self._advance("}"):
            return None
        key = self.read_value()
        if not isinstance(key, str):
            raise TranscriptDecodeError(f"object key must be a string, got {key!r}")
        self._expect(":")
        return key

    def has_next_element(self) -> bool:
        """Move to the next element of the current array; False once it closes."""
        return self._advance("]")

    def read_value(self) -> Any:
        first = self._peek()
        if first is None:
            raise TranscriptDecodeError("unexpected end of document")
        if first not in '{["':
            # A bare number or literal is only complete once a delimiter follows it.
            while _SCALAR_END.search(self._buf, self._pos) is None:
                if not self._fill():
                    break
        while True:
            try:
                value, end = self._decoder.raw_decode(self._buf, self._pos)
            except json.JSONDecodeError as exc:
                if self._fill():
                    continue
                raise TranscriptDecodeError(str(exc)) from exc
            self._pos = end
            return value

    def skip_value(self) -> None:
        first = self._peek()
        if first is None:
            raise TranscriptDecodeError("unexpected end of document")
        if first not in '{["':
            self.read_value()
            return

        depth = 0
        in_string = False
        escaped = False
        while True:
            if self._pos >= len(self._buf):
                if not self._fill():
                    raise TranscriptDecodeError("unexpected end of document")
                continue
            char = self._buf[self._pos]
            self._pos += 1
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                    if depth == 0:
                        return
            elif char == '"':
                in_string = True
            elif char in "{[":
                depth += 1
            elif char in "}]":
                depth -= 1
                if depth == 0:
                    return


def search_transcript_stream(stream: TextIO, keyword: str) -> float | None:
    """Find the keyword in a ``{"text": ..., "segments": [...]}`` document.

    Returns the ``start`` of the first matching segment as soon as it is
    decoded. If no segment matches, falls back to the top-level ``text``
    field and estimates the offset from the words before the match.
    Returns None when neither matches; raises TranscriptDecodeError on
    structurally invalid input.
    """
    reader = JsonPullReader(stream)
    reader.begin_object()
    full_text = None

    while True:
        key = reader.next_key()
        if key is None:
            break
        if key == "segments":
            reader.begin_array()
            while reader.has_next_element():
                segment = reader.read_value()
                if not isinstance(segment, dict):
                    raise TranscriptDecodeError(f"segment must be an object, got {segment!r}")
                if contains_keyword(str(segment.get("text") or ""), keyword):
                    return float(segment.get("start") or 0.0)
        elif key == "text":
            value = reader.read_value()
            if isinstance(value, str):
                full_text = value
        else:
            reader.skip_value()

    if full_text and contains_keyword(full_text, keyword):
        return estimate_offset(full_text, keyword)
    return None


def search_transcript_file(path: str | Path, keyword: str) -> float | None:
    with open(path, encoding="utf-8") as f:
        return search_transcript_stream(f, keyword)
