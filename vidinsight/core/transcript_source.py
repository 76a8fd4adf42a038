"""
Module for extracting timed transcripts from videos with yt-dlp.

yt-dlp runs as an external command; only its subtitle output (json3 or
WebVTT) is parsed here.
"""

import json
import re
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from vidinsight.config import config
from vidinsight.models.schemas import TranscriptSegment
from vidinsight.utils.error_handling import (
    TranscriptSourceError,
    as_external_failure,
    log_diagnostic_info,
)
from vidinsight.utils.logger import logging

VTT_TIMING_TAG = re.compile(r"<\d{2}:\d{2}:\d{2}\.\d{3}>")
VTT_STYLE_TAG = re.compile(r"</?c[^>]*>")
HTML_TAG = re.compile(r"<[^>]+>")


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def parse_json3(content: str) -> List[TranscriptSegment]:
    """
    Parse a json3 subtitle document into segments.

    Events without ``segs`` or with blank text are skipped. Times are in
    milliseconds; an event without a duration ends where it starts.
    """
    data = json.loads(content)
    segments = []

    for event in data.get("events", []):
        segs = event.get("segs")
        if not segs:
            continue

        text = _collapse_whitespace("".join(seg.get("utf8", "") for seg in segs))
        if not text:
            continue

        start = float(event.get("tStartMs", 0)) / 1000.0
        end = start + float(event.get("dDurationMs", 0)) / 1000.0
        segments.append(TranscriptSegment(start_time=start, end_time=end, text=text))

    return segments


def parse_vtt_time(value: str) -> float:
    """Parse ``HH:MM:SS.mmm`` or ``MM:SS.mmm`` into seconds."""
    # Drop cue settings such as "align:start position:0%"
    value = value.strip().split()[0].replace(",", ".")
    parts = value.split(":")
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    if len(parts) == 2:
        minutes, seconds = parts
        return int(minutes) * 60 + float(seconds)
    raise ValueError(f"Invalid time format: {value}")


def clean_vtt_text(text: str) -> str:
    """Strip inline timing, style and other tags from a cue line."""
    text = VTT_TIMING_TAG.sub("", text)
    text = VTT_STYLE_TAG.sub("", text)
    text = HTML_TAG.sub("", text)
    return _collapse_whitespace(text)


def parse_vtt(content: str) -> List[TranscriptSegment]:
    """
    Parse a WebVTT document into segments.

    The header, NOTE blocks and cue identifiers are skipped; multi-line cue
    text is joined with spaces. Cues with unparseable timings are skipped.
    """
    lines = content.splitlines()
    segments = []
    i = 0

    while i < len(lines):
        line = lines[i].strip()
        i += 1
        if "-->" not in line:
            continue

        start_str, end_str = line.split("-->", 1)
        try:
            start = parse_vtt_time(start_str)
            end = parse_vtt_time(end_str)
        except (ValueError, IndexError) as e:
            logging.warning(f"Skipping cue with invalid timestamp '{line}': {e}")
            continue

        text_lines = []
        while i < len(lines) and lines[i].strip():
            cleaned = clean_vtt_text(lines[i])
            if cleaned:
                text_lines.append(cleaned)
            i += 1

        text = " ".join(text_lines)
        if text and start <= end:
            segments.append(TranscriptSegment(start_time=start, end_time=end, text=text))

    return segments


def parse_subtitle_file(path: Path) -> List[TranscriptSegment]:
    """Parse a subtitle file, choosing the format from its extension."""
    content = path.read_text(encoding="utf-8", errors="replace")
    if not content.strip():
        logging.warning(f"Subtitle file is empty: {path.name}")
        return []
    if path.suffix == ".vtt":
        return parse_vtt(content)
    try:
        return parse_json3(content)
    except (json.JSONDecodeError, AttributeError) as e:
        raise TranscriptSourceError(f"Invalid json3 subtitle file {path.name}: {e}", "yt-dlp") from e


def normalize_url(url: str) -> str:
    """Ensure the URL has a protocol."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


class YtDlpTranscriptSource:
    """Class to fetch subtitles for a video through the yt-dlp command line tool."""

    def __init__(
        self,
        executable: str = config.YT_DLP_PATH,
        language: str = config.SUBTITLE_LANGUAGE,
        timeout: float = config.YT_DLP_TIMEOUT_SECONDS,
    ):
        self.executable = executable
        self.language = language
        self.timeout = timeout

    def _run(self, args: List[str]) -> str:
        command = [self.executable] + args
        logging.debug(f"Executing command: {' '.join(command)}")
        try:
            result = subprocess.run(
                command, capture_output=True, text=True, timeout=self.timeout
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise as_external_failure(e, "yt-dlp") from e

        if result.returncode != 0:
            log_diagnostic_info({
                "command": command,
                "returncode": result.returncode,
                "stderr": result.stderr,
            })
            raise TranscriptSourceError(
                f"yt-dlp process failed with exit code {result.returncode}: {result.stderr.strip()}",
                "yt-dlp",
            )
        return result.stdout

    def get_video_info(self, url: str) -> Dict[str, Any]:
        """Fetch the JSON metadata dump for a video."""
        output = self._run([normalize_url(url), "--dump-json", "--skip-download"])
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise TranscriptSourceError(f"yt-dlp returned invalid metadata: {e}", "yt-dlp") from e

    def fetch(self, url: str) -> List[TranscriptSegment]:
        """
        Extract the transcript of a video.

        Args:
            url: Video URL

        Returns:
            Ordered transcript segments; empty if the video has no subtitles
        """
        url = normalize_url(url)

        with tempfile.TemporaryDirectory(prefix="vidinsight-subtitles-") as temp_dir:
            logging.info(f"Extracting subtitles for: {url}")
            self._run([
                url,
                "--skip-download",
                "--write-auto-sub",
                "--write-sub",
                "--sub-lang", self.language,
                "--sub-format", "json3/vtt",
                "--output", str(Path(temp_dir) / "%(id)s.%(ext)s"),
            ])

            subtitle_file = self._find_subtitle_file(Path(temp_dir))
            if subtitle_file is None:
                logging.warning(f"No subtitles found for video: {url}")
                return []

            segments = parse_subtitle_file(subtitle_file)

        logging.info(f"Extracted {len(segments)} transcript segments")
        return segments

    @staticmethod
    def _find_subtitle_file(directory: Path) -> Optional[Path]:
        for pattern in ("*.json3", "*.json", "*.vtt"):
            matches = sorted(directory.glob(pattern))
            if matches:
                return matches[0]
        return None

    __call__ = fetch
