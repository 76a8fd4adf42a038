"""
Module for cleaning transcripts with a language model while keeping segment timing.

The model receives chunks of transcript text and returns cleaned text that no
longer lines up 1:1 with the original segments. Two reconciliation strategies
map the cleaned text back onto the timed segments:

- marker: every segment is wrapped in ``[SEG<i>]...[/SEG<i>]`` and the cleaned
  text is read back from the markers the model preserved.
- proportional: the cleaned word stream is redistributed over the segments in
  proportion to each segment's share of the original word count.

Known limitation of the proportional strategy: it only guarantees that the
whole cleaned transcript is spread over the segments in time order, without
losing or duplicating words. A segment's normalized text may contain words
that were spoken in a neighbouring segment's time window.
"""

import math
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from vidinsight.core import markers
from vidinsight.core.chunker import chunk_segments, chunk_text
from vidinsight.core.llm import TextTransform
from vidinsight.core.prompts import CLEANING_TEMPLATE, MARKER_RULE
from vidinsight.models.schemas import CleaningConfig, ReconciliationStrategy, TranscriptSegment
from vidinsight.utils.error_handling import (
    ChunkReconciliationMismatch,
    EmptyResponseError,
    ExternalCallFailure,
)
from vidinsight.utils.helpers import count_words
from vidinsight.utils.logger import logging


def build_cleaning_prompt(text: str, marked: bool = False) -> str:
    """Build the cleaning instruction for one chunk of transcript text."""
    return CLEANING_TEMPLATE.format(
        marker_rule=MARKER_RULE if marked else "",
        marker_suffix=" with segment markers preserved" if marked else "",
        text=text,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def redistribute_words(segments: Sequence[TranscriptSegment], cleaned_text: str) -> List[str]:
    """
    Spread cleaned words over segments in proportion to their original word counts.

    Each segment takes ``round(original_words * cleaned_total / original_total)``
    words, at least one and never more than remain. Words are consumed left to
    right; the last segment takes whatever rounding left over. Segments reached
    after the cleaned words run out keep their original text.

    Args:
        segments: Original segments, in order
        cleaned_text: The full cleaned transcript

    Returns:
        One normalized text per segment
    """
    cleaned_words = cleaned_text.split()
    original_counts = [count_words(segment.text) for segment in segments]
    original_total = sum(original_counts)

    if not cleaned_words or original_total == 0:
        logging.warning("Cleaned transcript is empty; keeping original segment text")
        return [segment.text for segment in segments]

    cleaned_total = len(cleaned_words)
    last = len(segments) - 1
    position = 0
    unassigned = 0
    results = []

    for i, (segment, count) in enumerate(zip(segments, original_counts)):
        remaining = cleaned_total - position
        if remaining <= 0:
            results.append(segment.text)
            unassigned += 1
            continue

        if i == last:
            take = remaining
        else:
            estimate = _round_half_up(count * cleaned_total / original_total)
            take = min(max(1, estimate), remaining)

        results.append(" ".join(cleaned_words[position:position + take]))
        position += take

    if unassigned:
        logging.warning(
            f"{ChunkReconciliationMismatch.__name__}: cleaned words ran out before "
            f"{unassigned} of {len(segments)} segments; they keep their original text"
        )

    return results


class TranscriptNormalizer:
    """Class to populate ``normalized_text`` on transcript segments."""

    def __init__(self, text_transform: TextTransform, cleaning_config: Optional[CleaningConfig] = None):
        """
        Initialize the normalizer.

        Args:
            text_transform: Callable sending a prompt to the language model
            cleaning_config: Chunking, strategy and concurrency settings
        """
        self.text_transform = text_transform
        self.config = cleaning_config or CleaningConfig()

    def normalize(self, segments: Sequence[TranscriptSegment]) -> List[TranscriptSegment]:
        """
        Clean a transcript.

        The result has the same length and order as the input, with identical
        times and original text, and ``normalized_text`` set on every segment.

        Args:
            segments: Raw transcript segments

        Returns:
            New segments with ``normalized_text`` populated
        """
        if not segments:
            return []

        logging.info(
            f"Cleaning {len(segments)} segments with the {self.config.strategy.value} strategy"
        )

        if self.config.strategy == ReconciliationStrategy.MARKER:
            texts = self._normalize_marked(segments)
        else:
            texts = self._normalize_proportional(segments)

        cleaned = [
            segment.model_copy(update={"normalized_text": text})
            for segment, text in zip(segments, texts)
        ]
        logging.info("Transcript cleaning complete.")
        return cleaned

    def _normalize_proportional(self, segments: Sequence[TranscriptSegment]) -> List[str]:
        full_text = " ".join(segment.text for segment in segments)
        chunks = chunk_text(full_text, self.config.max_chunk_chars)
        responses = self._clean_chunks(chunks, marked=False)

        pieces = []
        for original, response in zip(chunks, responses):
            piece = response if response is not None else original
            if piece.strip():
                pieces.append(piece.strip())

        return redistribute_words(segments, " ".join(pieces))

    def _normalize_marked(self, segments: Sequence[TranscriptSegment]) -> List[str]:
        # Budget the rendered markers and the joining space, not just the text
        chunks = chunk_segments(
            segments,
            self.config.max_segments_per_chunk,
            self.config.max_chunk_chars,
            measure=lambda index, segment: len(markers.wrap(index, segment.text)) + 1,
        )

        offsets = []
        offset = 0
        for chunk in chunks:
            offsets.append(offset)
            offset += len(chunk)

        marked_texts = [markers.render_marked(chunk, start) for chunk, start in zip(chunks, offsets)]
        responses = self._clean_chunks(marked_texts, marked=True)

        texts = []
        for chunk, start, response in zip(chunks, offsets, responses):
            indices = range(start, start + len(chunk))
            found = markers.extract(response, indices) if response is not None else {}
            texts.extend(found.get(index, segment.text) for index, segment in zip(indices, chunk))
        return texts

    def _clean_chunks(self, chunks: List[str], marked: bool) -> List[Optional[str]]:
        """Clean every chunk, returning results in chunk order."""
        workers = min(self.config.max_workers, len(chunks))
        logging.info(f"Sending {len(chunks)} chunks to the cleaner ({workers} worker(s))")

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                return list(executor.map(lambda chunk: self._clean_chunk(chunk, marked), chunks))

        results = []
        for i, chunk in enumerate(chunks):
            if i > 0 and self.config.inter_call_delay:
                time.sleep(self.config.inter_call_delay)
            results.append(self._clean_chunk(chunk, marked))
        return results

    def _clean_chunk(self, chunk: str, marked: bool) -> Optional[str]:
        """
        Clean one chunk.

        Returns None when the call fails or the output is unusable, unless the
        config is strict, in which case the error propagates.
        """
        try:
            response = self.text_transform(build_cleaning_prompt(chunk, marked))
            if response is None or not response.strip():
                raise EmptyResponseError("Cleaner returned an empty response")
        except (ExternalCallFailure, EmptyResponseError) as e:
            if self.config.strict:
                raise
            logging.warning(f"Keeping original text for a chunk of {len(chunk)} characters: {e}")
            return None
        return response
