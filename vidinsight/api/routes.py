"""
API routes for the Video Insights application.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from fastapi.responses import Response

from vidinsight import main as pipeline
from vidinsight.api.schemas import (
    CacheClearResponse,
    PodcastRequest,
    PodcastResponse,
    SegmentResponse,
    SummaryResponse,
    TranscriptResponse,
    VideoInfoResponse,
)
from vidinsight.config import config
from vidinsight.models.schemas import PodcastResult, Quiz
from vidinsight.utils.caching import PodcastResultCache
from vidinsight.utils.logger import logging

router = APIRouter(prefix="/api/v1", tags=["videos"])

AUDIO_MEDIA_TYPE = "audio/mpeg"


def get_result_cache(request: Request) -> PodcastResultCache:
    """Dependency returning the application's podcast result cache."""
    return request.app.state.result_cache


def _segments_response(url, segments) -> TranscriptResponse:
    return TranscriptResponse(
        url=url,
        segments=[SegmentResponse(**segment.model_dump()) for segment in segments],
    )


@router.get("/videos/info", response_model=VideoInfoResponse)
def get_video_info(url: str = Query(..., min_length=1, description="Video URL")):
    """Get basic metadata for a video."""
    return VideoInfoResponse(**pipeline.fetch_video_info(url))


@router.get("/videos/transcript", response_model=TranscriptResponse)
def get_transcript(url: str = Query(..., min_length=1, description="Video URL")):
    """Get the raw transcript of a video."""
    return _segments_response(url, pipeline.fetch_transcript(url))


@router.get("/videos/clean-transcript", response_model=TranscriptResponse)
def get_clean_transcript(url: str = Query(..., min_length=1, description="Video URL")):
    """Get the transcript of a video with disfluencies removed."""
    segments = pipeline.fetch_transcript(url)
    return _segments_response(url, pipeline.clean_transcript(segments))


@router.get("/videos/summary", response_model=SummaryResponse)
def get_summary(url: str = Query(..., min_length=1, description="Video URL")):
    """Summarize a video."""
    segments = pipeline.fetch_transcript(url)
    return SummaryResponse(url=url, summary=pipeline.summarize(segments))


@router.get("/videos/quiz", response_model=Quiz)
def get_quiz(
    url: str = Query(..., min_length=1, description="Video URL"),
    num_questions: int = Query(config.DEFAULT_QUIZ_QUESTIONS, ge=1, le=50),
):
    """Generate a multiple-choice quiz from a video's summary."""
    return pipeline.quiz_from_video(url, num_questions)


@router.post("/podcast/generate", response_model=PodcastResponse)
def generate_podcast(
    podcast_request: PodcastRequest,
    cache: PodcastResultCache = Depends(get_result_cache),
):
    """
    Generate a two-host podcast for a video.

    The audio is kept in memory and served by the download and stream
    endpoints under the returned podcast id.
    """
    result = pipeline.podcast_from_video(
        podcast_request.url,
        podcast_request.host_a_name,
        podcast_request.host_b_name,
        podcast_request.duration_mode,
    )
    podcast_id = cache.put(result)

    return PodcastResponse(
        podcast_id=podcast_id,
        script=result.script,
        host_a_name=result.host_a_name,
        host_b_name=result.host_b_name,
        audio_size_bytes=result.audio_size_bytes,
    )


def _get_podcast(cache: PodcastResultCache, podcast_id: str) -> PodcastResult:
    result = cache.get(podcast_id)
    if result is None:
        logging.warning(f"Podcast not found in cache: {podcast_id}")
        raise HTTPException(status_code=404, detail="Podcast not found")
    return result


@router.get("/podcast/{podcast_id}/download")
def download_podcast(
    podcast_id: str = Path(..., description="Podcast id returned by /podcast/generate"),
    cache: PodcastResultCache = Depends(get_result_cache),
):
    """Download podcast audio as a file."""
    result = _get_podcast(cache, podcast_id)
    return Response(
        content=result.audio,
        media_type=AUDIO_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="podcast-{podcast_id}.mp3"'},
    )


@router.get("/podcast/{podcast_id}/stream")
def stream_podcast(
    podcast_id: str = Path(..., description="Podcast id returned by /podcast/generate"),
    cache: PodcastResultCache = Depends(get_result_cache),
):
    """Stream podcast audio for in-browser playback."""
    result = _get_podcast(cache, podcast_id)
    return Response(
        content=result.audio,
        media_type=AUDIO_MEDIA_TYPE,
        headers={"Content-Disposition": "inline", "Accept-Ranges": "bytes"},
    )


@router.delete("/podcast/cache", response_model=CacheClearResponse)
def clear_podcast_cache(cache: PodcastResultCache = Depends(get_result_cache)):
    """Remove every cached podcast."""
    return CacheClearResponse(removed=cache.clear())
