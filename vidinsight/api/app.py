"""
FastAPI application for Video Insights.
"""

import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vidinsight.config import config
from vidinsight.api.routes import router
from vidinsight.utils.caching import PodcastResultCache
from vidinsight.utils.error_handling import (
    EmptyResponseError,
    ExternalCallFailure,
    ExternalCallTimeout,
    MalformedQuizError,
    NoTranscriptAvailable,
    log_exception,
)
from vidinsight.utils.logger import logging

# FastAPI application
app = FastAPI(
    title=config.APP_NAME,
    version=config.APP_VERSION,
    description="An API for turning video transcripts into summaries, quizzes and podcasts",
)

# Generated podcasts live here until the cache is cleared
app.state.result_cache = PodcastResultCache()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Log configuration on application startup."""
    logging.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")
    logging.info(f"Text model: {config.DEFAULT_LLM_MODEL}, speech model: {config.TTS_MODEL}")
    if not config.GROQ_API_KEY:
        logging.warning("GROQ_API_KEY is not set; model calls will fail and speech will be mocked")


@app.on_event("shutdown")
async def shutdown_event():
    """Release cached podcasts on shutdown."""
    removed = app.state.result_cache.clear()
    logging.info(f"Cleared {removed} cached podcasts on shutdown")


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Middleware to add processing time header to responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(NoTranscriptAvailable)
async def no_transcript_handler(request: Request, exc: NoTranscriptAvailable):
    logging.warning(f"No transcript available: {exc}")
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ExternalCallFailure)
async def external_call_handler(request: Request, exc: ExternalCallFailure):
    """Map failed calls to upstream services onto gateway errors."""
    status_code = 504 if isinstance(exc, ExternalCallTimeout) else 502
    logging.error(f"{exc.capability} call failed: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(EmptyResponseError)
@app.exception_handler(MalformedQuizError)
async def bad_model_output_handler(request: Request, exc: Exception):
    logging.error(f"Unusable model output: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions."""
    log_exception("Unhandled error", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": f"An unexpected error occurred: {str(exc)}"},
    )


# Include API router
app.include_router(router)


# Root
@app.get("/")
async def root():
    """Root endpoint returning basic API information."""
    return {
        "name": config.APP_NAME,
        "version": config.APP_VERSION,
        "description": "Video Insights API",
    }
