"""
Module for splitting transcripts into size-bounded chunks.

Chunk boundaries depend only on size and whitespace, never on the meaning of
the content. Concatenating the chunks in order always reproduces the input.
"""

from typing import Callable, List, Optional, Sequence, TypeVar

from langchain_text_splitters import RecursiveCharacterTextSplitter

from vidinsight.models.schemas import TranscriptSegment

T = TypeVar("T")


def _check_limit(max_units: int):
    if max_units < 1:
        raise ValueError(f"Chunk size limit must be at least 1, got {max_units}")


def chunk_items(items: Sequence[T], max_units: int) -> List[List[T]]:
    """
    Split a sequence into contiguous chunks of at most ``max_units`` items.

    Args:
        items: Ordered items to split
        max_units: Maximum number of items per chunk

    Returns:
        Ordered list of non-empty chunks
    """
    _check_limit(max_units)
    return [list(items[i:i + max_units]) for i in range(0, len(items), max_units)]


def chunk_segments(
    segments: Sequence[TranscriptSegment],
    max_segments: int,
    max_chars: Optional[int] = None,
    measure: Optional[Callable[[int, TranscriptSegment], int]] = None,
) -> List[List[TranscriptSegment]]:
    """
    Group segments into chunks bounded by segment count and, optionally, text length.

    A segment whose text alone is longer than ``max_chars`` is never split;
    it becomes a chunk of its own.

    Args:
        segments: Ordered transcript segments
        max_segments: Maximum number of segments per chunk
        max_chars: Optional maximum total length per chunk
        measure: Length of a segment given its index in ``segments``;
            defaults to the length of its text

    Returns:
        Ordered list of non-empty segment chunks
    """
    if max_chars is None:
        return chunk_items(segments, max_segments)

    _check_limit(max_segments)
    _check_limit(max_chars)
    if measure is None:
        measure = lambda index, segment: len(segment.text)

    chunks: List[List[TranscriptSegment]] = []
    current: List[TranscriptSegment] = []
    total = 0

    for index, segment in enumerate(segments):
        length = measure(index, segment)
        if current and (len(current) >= max_segments or total + length > max_chars):
            chunks.append(current)
            current = []
            total = 0
        current.append(segment)
        total += length

    if current:
        chunks.append(current)
    return chunks


def chunk_text(text: str, max_chars: int) -> List[str]:
    """
    Split text into chunks of at most ``max_chars`` characters without splitting words.

    Spaces stay attached to the end of the chunk they follow. A word
    longer than ``max_chars`` is cut at the hard limit.

    Args:
        text: Text to split
        max_chars: Maximum characters per chunk

    Returns:
        Ordered list of non-empty chunks; ``"".join(chunks) == text``
    """
    _check_limit(max_chars)

    text_splitter = RecursiveCharacterTextSplitter(
        chunk_size=max_chars,
        chunk_overlap=0,
        separators=[" ", ""],
        keep_separator="end",
        strip_whitespace=False,
    )
    return text_splitter.split_text(text)
