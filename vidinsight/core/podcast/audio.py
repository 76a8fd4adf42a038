"""
Module for turning parsed podcast turns into a single audio stream.
"""

from typing import Dict, List, Optional, Sequence

from vidinsight.core.podcast.script import split_speaker_line
from vidinsight.core.speech import SpeechSynthesis, placeholder_audio, silence
from vidinsight.models.schemas import PodcastConfig, SpeakerRole, SpeakerTurn
from vidinsight.utils.error_handling import ExternalCallFailure
from vidinsight.utils.helpers import truncate_text
from vidinsight.utils.logger import logging


def find_primary_speaker(script: str) -> Optional[str]:
    """Return the first speaker name that appears in the script, if any."""
    for line in script.splitlines():
        parts = split_speaker_line(line.strip())
        if parts is not None and parts[0]:
            return parts[0]
    return None


def resolve_roles(turns: Sequence[SpeakerTurn], primary_speaker: Optional[str]) -> Dict[str, SpeakerRole]:
    """
    Map speaker names to voice roles.

    The primary speaker is Host A; every other name, including a third
    unexpected one, is Host B. Names are compared exactly.
    """
    if primary_speaker is None and turns:
        primary_speaker = turns[0].speaker_name

    roles = {}
    for turn in turns:
        if turn.speaker_name not in roles:
            is_primary = turn.speaker_name == primary_speaker
            roles[turn.speaker_name] = SpeakerRole.HOST_A if is_primary else SpeakerRole.HOST_B
    return roles


class PodcastAudioAssembler:
    """Class to synthesize and concatenate the audio for every turn."""

    def __init__(self, speech: SpeechSynthesis, podcast_config: Optional[PodcastConfig] = None):
        """
        Initialize the assembler.

        Args:
            speech: Callable taking (text, voice id) and returning audio bytes
            podcast_config: Voice identities and pause length
        """
        self.speech = speech
        self.config = podcast_config or PodcastConfig()

    def voice_for(self, role: SpeakerRole) -> str:
        return self.config.host_a_voice if role == SpeakerRole.HOST_A else self.config.host_b_voice

    def assemble(self, turns: Sequence[SpeakerTurn], script: str) -> bytes:
        """
        Synthesize every turn in order and join the audio with pauses.

        A turn whose synthesis fails is voiced with placeholder audio so that
        no turn is dropped or reordered.

        Args:
            turns: Parsed speaker turns
            script: Full script text, used to find the primary speaker

        Returns:
            Concatenated audio bytes
        """
        roles = self.role_assignments(turns, script)
        pause = silence(self.config.pause_frames)
        audio = bytearray()

        logging.info(f"Converting {len(turns)} podcast turns to audio...")
        for turn, role in zip(turns, roles):
            audio.extend(self._synthesize_turn(turn, role))
            audio.extend(pause)

        return bytes(audio)

    def _synthesize_turn(self, turn: SpeakerTurn, role: SpeakerRole) -> bytes:
        try:
            segment = self.speech(turn.dialogue, self.voice_for(role))
        except ExternalCallFailure as e:
            logging.error(f"Speech synthesis failed for {role.value}, falling back to placeholder audio: {e}")
            return placeholder_audio(turn.dialogue)

        logging.debug(f"Generated audio for {role.value}: {truncate_text(turn.dialogue, 50)}")
        return segment

    def role_assignments(self, turns: Sequence[SpeakerTurn], script: str) -> List[SpeakerRole]:
        """Return the role used for each turn, in turn order."""
        roles = resolve_roles(turns, find_primary_speaker(script))
        return [roles[turn.speaker_name] for turn in turns]
