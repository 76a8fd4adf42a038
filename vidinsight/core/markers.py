"""
Segment marker grammar used by marker-based transcript reconciliation.

A marked segment is written as ``[SEG<i>]text[/SEG<i>]`` where ``<i>`` is the
segment's index in the full transcript. Extraction scans the response left to
right and takes non-overlapping pairs whose open and close indices match.

Behavior on imperfect model output:
- missing pair: the index is absent from the result
- duplicated pair: the first occurrence wins, later ones are ignored
- pair with blank content: treated as missing
- indices that were not requested: ignored
"""

import re
from typing import Dict, Iterable, Sequence

from vidinsight.models.schemas import TranscriptSegment
from vidinsight.utils.logger import logging

MARKER_PATTERN = re.compile(r"\[SEG(\d+)\](.*?)\[/SEG\1\]", re.DOTALL)


def open_marker(index: int) -> str:
    return f"[SEG{index}]"


def close_marker(index: int) -> str:
    return f"[/SEG{index}]"


def wrap(index: int, text: str) -> str:
    """Wrap one segment's text in its marker pair."""
    return f"{open_marker(index)}{text}{close_marker(index)}"


def render_marked(segments: Sequence[TranscriptSegment], start_index: int = 0) -> str:
    """
    Render segments as a single marked string.

    Args:
        segments: Segments to render, in order
        start_index: Transcript index of the first segment

    Returns:
        Space-separated marked segments
    """
    return " ".join(
        wrap(start_index + offset, segment.text)
        for offset, segment in enumerate(segments)
    )


def extract(response: str, indices: Iterable[int]) -> Dict[int, str]:
    """
    Extract the cleaned text for each requested index from a model response.

    Args:
        response: Raw model output
        indices: Segment indices expected in the response

    Returns:
        Mapping of index to stripped text for every index found with content
    """
    wanted = set(indices)
    found: Dict[int, str] = {}

    for match in MARKER_PATTERN.finditer(response or ""):
        index = int(match.group(1))
        if index not in wanted:
            continue
        if index in found:
            logging.debug(f"Ignoring duplicated marker pair for segment {index}")
            continue
        content = match.group(2).strip()
        if content:
            found[index] = content

    missing = len(wanted) - len(found)
    if missing:
        logging.warning(f"{missing} of {len(wanted)} segment markers missing from cleaned response")

    return found
