"""
Data models for the video insights application.
"""
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vidinsight.config import config


class ReconciliationStrategy(str, Enum):
    """How cleaned text is mapped back onto timed segments."""
    PROPORTIONAL = "proportional"
    MARKER = "marker"


class PodcastDurationMode(str, Enum):
    """Length policy for generated podcast scripts."""
    UNBOUNDED = "unbounded"
    BOUNDED = "bounded"


class SpeakerRole(str, Enum):
    """The two voice roles used in podcast synthesis."""
    HOST_A = "host_a"
    HOST_B = "host_b"


class TranscriptSegment(BaseModel):
    """A timestamped span of transcript text."""
    model_config = ConfigDict(frozen=True)

    start_time: float
    end_time: float
    text: str
    normalized_text: Optional[str] = None

    @model_validator(mode="after")
    def check_times(self):
        if self.start_time > self.end_time:
            raise ValueError(
                f"start_time ({self.start_time}) must not be after end_time ({self.end_time})"
            )
        return self

    @property
    def display_text(self) -> str:
        """Cleaned text when available, original text otherwise."""
        return self.normalized_text if self.normalized_text is not None else self.text


class QuizQuestion(BaseModel):
    """A single multiple-choice question."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    question_text: str = Field(alias="question", min_length=1)
    options: List[str] = Field(alias="choices")
    # Booleans, numeric strings and floats are malformed answers, not indexes
    correct_option_index: int = Field(alias="correctIndex", strict=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # Models usually number questions with integers
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("options")
    @classmethod
    def check_options(cls, v):
        if len(v) != 4:
            raise ValueError(f"expected exactly 4 choices, got {len(v)}")
        if len(set(v)) != 4:
            raise ValueError("choices must be distinct")
        return v

    @field_validator("correct_option_index")
    @classmethod
    def check_correct_index(cls, v):
        if not 0 <= v <= 3:
            raise ValueError(f"correctIndex must be between 0 and 3, got {v}")
        return v


class Quiz(BaseModel):
    """A titled list of multiple-choice questions."""
    title: str = Field(min_length=1)
    questions: List[QuizQuestion] = Field(min_length=1)


class SpeakerTurn(BaseModel):
    """One speaker's line of dialogue within a script."""
    speaker_name: str
    dialogue: str


class PodcastResult(BaseModel):
    """A finished podcast: the script and its synthesized audio."""
    model_config = ConfigDict(frozen=True)

    script: str
    audio: bytes
    host_a_name: str
    host_b_name: str

    @property
    def audio_size_bytes(self) -> int:
        return len(self.audio)


class CleaningConfig(BaseModel):
    """Configuration for transcript normalization."""
    strategy: ReconciliationStrategy = ReconciliationStrategy(config.CLEANING_STRATEGY)
    max_chunk_chars: int = Field(default=config.CLEANING_CHUNK_CHARS, ge=1)
    max_segments_per_chunk: int = Field(default=config.CLEANING_SEGMENTS_PER_CHUNK, ge=1)
    max_workers: int = Field(default=config.CLEANING_MAX_WORKERS, ge=1)
    inter_call_delay: float = Field(default=config.CLEANING_CALL_DELAY, ge=0.0)
    # Propagate cleaning failures instead of keeping the original text
    strict: bool = False


class PodcastConfig(BaseModel):
    """Configuration for podcast script composition and audio assembly."""
    host_a_name: str = config.DEFAULT_HOST_A_NAME
    host_b_name: str = config.DEFAULT_HOST_B_NAME
    duration_mode: PodcastDurationMode = PodcastDurationMode.UNBOUNDED
    source_word_budget: int = Field(default=config.PODCAST_SOURCE_WORD_BUDGET, ge=1)
    source_word_hard_cap: int = Field(default=config.PODCAST_SOURCE_WORD_HARD_CAP, ge=1)
    host_a_voice: str = config.HOST_A_VOICE
    host_b_voice: str = config.HOST_B_VOICE
    pause_frames: int = Field(default=config.PODCAST_PAUSE_FRAMES, ge=0)

    @model_validator(mode="after")
    def check_word_limits(self):
        if self.source_word_hard_cap < self.source_word_budget:
            raise ValueError("source_word_hard_cap must be at least source_word_budget")
        return self


class QuizConfig(BaseModel):
    """Configuration for quiz generation."""
    num_questions: int = Field(default=config.DEFAULT_QUIZ_QUESTIONS, ge=1)
