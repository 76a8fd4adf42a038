"""
Module for summarizing transcripts using LLM models.
"""

from typing import Sequence

from vidinsight.core.llm import TextTransform
from vidinsight.core.prompts import SUMMARY_TEMPLATE
from vidinsight.models.schemas import TranscriptSegment
from vidinsight.utils.error_handling import EmptyResponseError, NoTranscriptAvailable
from vidinsight.utils.logger import logging


class TranscriptSummarizer:
    """Class to handle transcript summarization operations."""

    def __init__(self, text_transform: TextTransform):
        """
        Initialize the summarizer.

        Args:
            text_transform: Callable sending a prompt to the language model
        """
        self.text_transform = text_transform

    def summarize(self, segments: Sequence[TranscriptSegment]) -> str:
        """
        Summarize a transcript.

        The original text of every segment is joined with newlines and sent
        in a single call. Long transcripts are not chunked.

        Args:
            segments: Transcript segments in playback order

        Returns:
            Summary text
        """
        if not segments:
            raise NoTranscriptAvailable("Cannot summarize an empty transcript")

        transcript_text = "\n".join(segment.text for segment in segments)
        logging.info(f"Summarizing transcript of {len(transcript_text)} characters")

        summary = self.text_transform(SUMMARY_TEMPLATE.format(text=transcript_text))
        if summary is None or not summary.strip():
            raise EmptyResponseError("Summarizer returned an empty response")

        return summary.strip()
