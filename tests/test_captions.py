"""Tests for SRT parsing and caption search."""

import pytest

from yt_keyword_mcp.captions import find_in_entries, parse_srt, render_srt
from yt_keyword_mcp.models import TimedEntry


class TestParseSrt:
    def test_entries_in_document_order(self, sample_srt):
        entries = parse_srt(sample_srt)
        assert [e.start for e in entries] == [1.0, 3.5, 62.25]
        assert all(e.end >= e.start for e in entries)

    def test_markup_stripped_and_lines_joined(self, sample_srt):
        entries = parse_srt(sample_srt)
        assert entries[1].text == "today we talk about Python generators"

    def test_block_without_timecode_dropped(self):
        doc = (
            "1\n00:00:01,000 --> 00:00:02,000\nfirst\n\n"
            "NOTE just metadata\nno timing here\n\n"
            "3\n00:00:05,000 --> 00:00:06,000\nthird\n"
        )
        entries = parse_srt(doc)
        assert [e.text for e in entries] == ["first", "third"]
        assert entries[1].start == 5.0

    def test_block_with_only_timecode_dropped(self):
        doc = "1\n00:00:01,000 --> 00:00:02,000\n\n\n2\n00:00:03,000 --> 00:00:04,000\nsecond\n"
        assert [e.text for e in parse_srt(doc)] == ["second"]

    def test_malformed_timecode_is_skipped(self):
        doc = "1\n0:00:01.000 --> 0:00:02.000\nbad\n\n2\n00:00:03,000 --> 00:00:04,000\ngood\n"
        assert [e.text for e in parse_srt(doc)] == ["good"]

    def test_crlf_line_endings(self):
        doc = "1\r\n00:00:01,000 --> 00:00:02,000\r\nhello\r\n\r\n2\r\n00:00:02,000 --> 00:00:03,000\r\nworld\r\n"
        assert [e.text for e in parse_srt(doc)] == ["hello", "world"]

    def test_hours_and_millis(self):
        entries = parse_srt("1\n01:02:05,250 --> 01:02:07,000\nlate\n")
        assert entries[0].start == pytest.approx(3725.25)
        assert entries[0].end == pytest.approx(3727.0)

    def test_empty_and_garbage_input(self):
        assert parse_srt("") == []
        assert parse_srt("not a caption file at all") == []


class TestFindInEntries:
    def test_first_match_wins(self, sample_srt):
        entries = parse_srt(sample_srt)
        assert find_in_entries(entries, "python") == 3.5

    def test_case_insensitive(self, sample_srt):
        assert find_in_entries(parse_srt(sample_srt), "WELCOME") == 1.0

    def test_not_found(self, sample_srt):
        assert find_in_entries(parse_srt(sample_srt), "rust") is None


class TestRenderSrt:
    def test_rendered_document_parses(self):
        entries = [
            TimedEntry(start=0.5, end=2.0, text="one"),
            TimedEntry(start=3725.25, end=3727.0, text="two"),
        ]
        doc = render_srt(entries)
        assert "00:00:00,500 --> 00:00:02,000" in doc
        assert "01:02:05,250 --> 01:02:07,000" in doc
        assert parse_srt(doc) == entries
