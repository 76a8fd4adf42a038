"""
Tests for subtitle parsing and the yt-dlp transcript source.
"""

import json
import subprocess
from pathlib import Path

import pytest
from unittest.mock import patch, MagicMock

from vidinsight.core.transcript_source import (
    YtDlpTranscriptSource,
    normalize_url,
    parse_json3,
    parse_vtt,
    parse_vtt_time,
)
from vidinsight.utils.error_handling import (
    ExternalCallFailure,
    ExternalCallTimeout,
    TranscriptSourceError,
)

JSON3 = json.dumps({
    "events": [
        {"tStartMs": 0, "dDurationMs": 2000, "segs": [{"utf8": "um hello"}, {"utf8": " there"}]},
        {"tStartMs": 2000, "dDurationMs": 1500},
        {"tStartMs": 2500, "dDurationMs": 500, "segs": [{"utf8": "\n"}]},
        {"tStartMs": 3500, "dDurationMs": 2500, "segs": [{"utf8": "this is\na test"}]},
    ]
})

VTT = """WEBVTT
Kind: captions
Language: en

NOTE this is a comment

1
00:00:00.000 --> 00:00:02.500 align:start position:0%
um <00:00:00.500><c>hello</c> there

2
00:01.000 --> 00:04.000
this is
a test

bad --> cue
ignored text
"""


def test_parse_json3():
    segments = parse_json3(JSON3)

    assert [(s.start_time, s.end_time, s.text) for s in segments] == [
        (0.0, 2.0, "um hello there"),
        (3.5, 6.0, "this is a test"),
    ]


def test_parse_vtt():
    segments = parse_vtt(VTT)

    assert [(s.start_time, s.end_time, s.text) for s in segments] == [
        (0.0, 2.5, "um hello there"),
        (1.0, 4.0, "this is a test"),
    ]


@pytest.mark.parametrize("value, expected", [
    ("01:02:03.500", 3723.5),
    ("02:03.250", 123.25),
    ("00:00:01,000", 1.0),
])
def test_parse_vtt_time(value, expected):
    assert parse_vtt_time(value) == expected


def test_parse_vtt_time_invalid():
    with pytest.raises(ValueError):
        parse_vtt_time("12")


def test_normalize_url():
    assert normalize_url("youtube.com/watch?v=abc") == "https://youtube.com/watch?v=abc"
    assert normalize_url(" http://example.com/v ") == "http://example.com/v"


def fake_yt_dlp(files):
    """Build a subprocess.run replacement that writes subtitle files to the output dir."""
    def run(command, **kwargs):
        output_template = Path(command[command.index("--output") + 1])
        for name, content in files.items():
            (output_template.parent / name).write_text(content, encoding="utf-8")
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")
    return run


@patch("vidinsight.core.transcript_source.subprocess.run")
def test_fetch_prefers_json3(mock_run, test_video_url):
    mock_run.side_effect = fake_yt_dlp({"abc.en.json3": JSON3, "abc.en.vtt": VTT})

    segments = YtDlpTranscriptSource(executable="yt-dlp", language="en").fetch(test_video_url)

    assert [s.text for s in segments] == ["um hello there", "this is a test"]
    command = mock_run.call_args[0][0]
    assert command[0] == "yt-dlp"
    assert "--skip-download" in command
    assert "--write-auto-sub" in command
    assert command[command.index("--sub-lang") + 1] == "en"
    assert mock_run.call_args[1]["timeout"] is not None


@patch("vidinsight.core.transcript_source.subprocess.run")
def test_fetch_falls_back_to_vtt(mock_run, test_video_url):
    mock_run.side_effect = fake_yt_dlp({"abc.en.vtt": VTT})

    segments = YtDlpTranscriptSource().fetch(test_video_url)

    assert len(segments) == 2


@patch("vidinsight.core.transcript_source.subprocess.run")
def test_fetch_without_subtitles_returns_empty(mock_run, test_video_url):
    mock_run.side_effect = fake_yt_dlp({})

    assert YtDlpTranscriptSource().fetch(test_video_url) == []


@patch("vidinsight.core.transcript_source.subprocess.run")
def test_fetch_process_failure(mock_run, test_video_url):
    mock_run.return_value = subprocess.CompletedProcess([], 1, stdout="", stderr="ERROR: video unavailable")

    with pytest.raises(TranscriptSourceError, match="video unavailable"):
        YtDlpTranscriptSource().fetch(test_video_url)


@patch("vidinsight.core.transcript_source.subprocess.run")
def test_fetch_timeout(mock_run, test_video_url):
    mock_run.side_effect = subprocess.TimeoutExpired(cmd="yt-dlp", timeout=1)

    with pytest.raises(ExternalCallTimeout):
        YtDlpTranscriptSource(timeout=1).fetch(test_video_url)


@patch("vidinsight.core.transcript_source.subprocess.run")
def test_missing_executable(mock_run, test_video_url):
    mock_run.side_effect = FileNotFoundError("yt-dlp")

    with pytest.raises(ExternalCallFailure):
        YtDlpTranscriptSource().fetch(test_video_url)


@patch("vidinsight.core.transcript_source.subprocess.run")
def test_get_video_info(mock_run, test_video_url):
    mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps({"id": "abc", "title": "Test Video"}))

    info = YtDlpTranscriptSource().get_video_info(test_video_url)

    assert info["title"] == "Test Video"
    assert "--dump-json" in mock_run.call_args[0][0]
