"""
Module tying script composition and audio assembly into a finished podcast.
"""

from typing import Optional, Sequence

from vidinsight.core.llm import TextTransform
from vidinsight.core.podcast.audio import PodcastAudioAssembler
from vidinsight.core.podcast.script import PodcastScriptComposer, parse_script
from vidinsight.core.speech import SpeechSynthesis
from vidinsight.models.schemas import (
    PodcastConfig,
    PodcastDurationMode,
    PodcastResult,
    TranscriptSegment,
)
from vidinsight.utils.error_handling import EmptyResponseError, NoTranscriptAvailable
from vidinsight.utils.logger import logging


class PodcastGenerator:
    """Class to generate a two-host podcast from a cleaned transcript."""

    def __init__(
        self,
        text_transform: TextTransform,
        speech: SpeechSynthesis,
        podcast_config: Optional[PodcastConfig] = None,
    ):
        self.config = podcast_config or PodcastConfig()
        self.composer = PodcastScriptComposer(text_transform, self.config)
        self.assembler = PodcastAudioAssembler(speech, self.config)

    def generate(
        self,
        segments: Sequence[TranscriptSegment],
        host_a: Optional[str] = None,
        host_b: Optional[str] = None,
        duration_mode: Optional[PodcastDurationMode] = None,
    ) -> PodcastResult:
        """
        Compose a script, synthesize it and return the finished podcast.

        Args:
            segments: Cleaned transcript segments
            host_a: Name of the first host (defaults to config)
            host_b: Name of the second host (defaults to config)
            duration_mode: Script length policy (defaults to config)

        Returns:
            PodcastResult with script and audio
        """
        if not segments:
            raise NoTranscriptAvailable("Cannot generate a podcast from an empty transcript")

        host_a = host_a or self.config.host_a_name
        host_b = host_b or self.config.host_b_name
        duration_mode = duration_mode or self.config.duration_mode

        logging.info("Generating podcast script...")
        script = self.composer.compose(segments, host_a, host_b, duration_mode)

        turns = parse_script(script)
        if not turns:
            raise EmptyResponseError("Podcast script contains no speaker turns")

        logging.info("Generating podcast audio...")
        audio = self.assembler.assemble(turns, script)

        result = PodcastResult(script=script, audio=audio, host_a_name=host_a, host_b_name=host_b)
        logging.info(
            f"Podcast generated. Script: {len(script)} chars, Audio: {result.audio_size_bytes} bytes"
        )
        return result
