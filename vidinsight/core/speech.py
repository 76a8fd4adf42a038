"""
Module for synthesizing speech with Groq's text-to-speech API.
"""

import os
from typing import Callable, Optional

from groq import Groq

from vidinsight.config import config
from vidinsight.utils.error_handling import as_external_failure
from vidinsight.utils.helpers import truncate_text
from vidinsight.utils.logger import logging

# A speech synthesis capability takes (text, voice id) and returns audio bytes.
SpeechSynthesis = Callable[[str, str], bytes]

# MPEG-1 Layer III frame header with zeroed payload. It will not play
# meaningfully but keeps the byte stream well formed.
PLACEHOLDER_AUDIO = bytes([0xFF, 0xFB, 0x90, 0x00]) + bytes(8)

# 128 kbps / 44.1 kHz frames are 417 bytes; a zeroed body decodes as silence.
SILENT_FRAME = bytes([0xFF, 0xFB, 0x90, 0x00]) + bytes(413)


def placeholder_audio(text: str = "") -> bytes:
    """Return the placeholder payload used when real synthesis is unavailable."""
    logging.warning(f"Generating placeholder audio for: {truncate_text(text, 50)}")
    return PLACEHOLDER_AUDIO


def silence(frames: int) -> bytes:
    """Return ``frames`` silent MPEG frames (about 26 ms each)."""
    return SILENT_FRAME * frames


class SpeechSynthesizer:
    """Class to handle text-to-speech operations."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.TTS_MODEL,
        response_format: str = config.TTS_RESPONSE_FORMAT,
        timeout: float = config.TTS_TIMEOUT_SECONDS,
    ):
        """
        Initialize the synthesizer.

        Without an API key the synthesizer runs in mock mode and returns
        placeholder audio for every call.

        Args:
            api_key: Groq API key (if None, will try to get from environment)
            model: Speech model name
            response_format: Audio container requested from the API
            timeout: Seconds before a call is abandoned
        """
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        self.model = model
        self.response_format = response_format

        if self.api_key:
            self.client = Groq(api_key=self.api_key, timeout=timeout)
            logging.info("Speech synthesizer initialized")
        else:
            self.client = None
            logging.warning("Groq API key not found. Speech synthesis will run in mock mode.")

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def synthesize(self, text: str, voice_id: str) -> bytes:
        """
        Generate speech for a piece of text with a specific voice.

        Raises:
            ExternalCallFailure: If the API call fails or times out
        """
        if not self.is_configured:
            return placeholder_audio(text)

        try:
            response = self.client.audio.speech.create(
                model=self.model,
                voice=voice_id,
                input=text,
                response_format=self.response_format,
            )
            audio = response.read()
        except Exception as e:
            raise as_external_failure(e, "speech synthesis") from e

        logging.debug(f"Generated {len(audio)} bytes of audio for {len(text)} characters")
        return audio

    __call__ = synthesize
