from pydantic import BaseModel, Field
from typing import Optional, List

from vidinsight.config import config
from vidinsight.models.schemas import PodcastDurationMode


class VideoInfoResponse(BaseModel):
    """Model for video metadata responses."""
    video_id: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    duration: Optional[float] = None
    thumbnail: Optional[str] = None
    url: str


class SegmentResponse(BaseModel):
    """Model for a single transcript segment."""
    start_time: float
    end_time: float
    text: str
    normalized_text: Optional[str] = None


class TranscriptResponse(BaseModel):
    """Model for transcript responses."""
    url: str
    segments: List[SegmentResponse]


class SummaryResponse(BaseModel):
    """Model for summary responses."""
    url: str
    summary: str


class PodcastRequest(BaseModel):
    """Model for requesting podcast generation."""
    url: str = Field(min_length=1)
    host_a_name: str = config.DEFAULT_HOST_A_NAME
    host_b_name: str = config.DEFAULT_HOST_B_NAME
    duration_mode: PodcastDurationMode = PodcastDurationMode.UNBOUNDED


class PodcastResponse(BaseModel):
    """Model for podcast generation responses."""
    podcast_id: str
    script: str
    host_a_name: str
    host_b_name: str
    audio_size_bytes: int


class CacheClearResponse(BaseModel):
    """Model for cache clearing responses."""
    removed: int
