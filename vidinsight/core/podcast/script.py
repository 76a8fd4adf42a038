"""
Module for composing two-host podcast scripts and parsing them into speaker turns.
"""

from typing import List, Optional, Sequence, Tuple

from vidinsight.core.llm import TextTransform
from vidinsight.core.prompts import BOUNDED_PODCAST_TEMPLATE, PODCAST_TEMPLATE
from vidinsight.models.schemas import (
    PodcastConfig,
    PodcastDurationMode,
    SpeakerTurn,
    TranscriptSegment,
)
from vidinsight.utils.error_handling import EmptyResponseError
from vidinsight.utils.logger import logging

SENTENCE_ENDINGS = (".", "!", "?")


def limit_source_words(content: str, word_budget: int, hard_cap: int) -> str:
    """
    Truncate source content for a duration-capped script.

    Content within the budget is returned unchanged. Otherwise words are kept
    up to the budget and then until the first word ending a sentence, but
    never beyond ``hard_cap`` words.

    Args:
        content: Full source text
        word_budget: Target number of source words
        hard_cap: Absolute maximum number of source words

    Returns:
        The truncated content
    """
    words = content.split()
    if len(words) <= word_budget:
        return content

    kept = []
    for word in words:
        kept.append(word)
        if len(kept) >= word_budget and word.endswith(SENTENCE_ENDINGS):
            break
        if len(kept) >= hard_cap:
            break

    logging.info(f"Limited content from {len(words)} words to {len(kept)} words")
    return " ".join(kept)


def split_speaker_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Split a script line into (speaker, dialogue) at the first colon.

    Returns None for lines without a colon. The speaker is taken verbatim
    (stripped); the dialogue may be empty.
    """
    if ":" not in line:
        return None
    speaker, dialogue = line.split(":", 1)
    return speaker.strip(), dialogue.strip()


def parse_script(script: str) -> List[SpeakerTurn]:
    """
    Parse a "Speaker: dialogue" script into ordered turns.

    Lines without a colon and lines with blank dialogue are skipped.
    """
    turns = []
    for line in script.splitlines():
        parts = split_speaker_line(line.strip())
        if parts is None:
            continue
        speaker, dialogue = parts
        if not dialogue:
            continue
        turns.append(SpeakerTurn(speaker_name=speaker, dialogue=dialogue))
    return turns


class PodcastScriptComposer:
    """Class to generate two-host podcast scripts from a cleaned transcript."""

    def __init__(self, text_transform: TextTransform, podcast_config: Optional[PodcastConfig] = None):
        self.text_transform = text_transform
        self.config = podcast_config or PodcastConfig()

    def build_prompt(
        self,
        segments: Sequence[TranscriptSegment],
        host_a: str,
        host_b: str,
        duration_mode: PodcastDurationMode,
    ) -> str:
        """Build the script prompt for the requested duration mode."""
        content = " ".join(segment.display_text for segment in segments)

        if duration_mode == PodcastDurationMode.BOUNDED:
            content = limit_source_words(
                content, self.config.source_word_budget, self.config.source_word_hard_cap
            )
            return BOUNDED_PODCAST_TEMPLATE.format(host_a=host_a, host_b=host_b, content=content)

        return PODCAST_TEMPLATE.format(host_a=host_a, host_b=host_b, content=content)

    def compose(
        self,
        segments: Sequence[TranscriptSegment],
        host_a: str,
        host_b: str,
        duration_mode: PodcastDurationMode = PodcastDurationMode.UNBOUNDED,
    ) -> str:
        """
        Generate a podcast script.

        Args:
            segments: Cleaned transcript segments
            host_a: Name of the first host
            host_b: Name of the second host
            duration_mode: Unbounded (5-8 minutes) or bounded (about 2 minutes)

        Returns:
            The raw script text
        """
        logging.info(f"Generating {duration_mode.value} podcast script for {host_a} and {host_b}")
        script = self.text_transform(self.build_prompt(segments, host_a, host_b, duration_mode))
        if script is None or not script.strip():
            raise EmptyResponseError("Script composer returned an empty response")
        return script.strip()
