"""Shared test fixtures."""

import pytest


@pytest.fixture
def sample_srt():
    return (
        "1\n"
        "00:00:01,000 --> 00:00:03,500\n"
        "Hello and welcome\n"
        "\n"
        "2\n"
        "00:00:03,500 --> 00:00:06,000\n"
        "today we talk about <i>Python</i>\n"
        "generators\n"
        "\n"
        "3\n"
        "00:01:02,250 --> 00:01:05,000\n"
        "python is everywhere\n"
    )


@pytest.fixture
def scratch_root(tmp_path):
    root = tmp_path / "scratch"
    root.mkdir()
    return root
