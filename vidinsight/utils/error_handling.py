"""
Centralized error handling for the application.

Every failure the pipeline can report is one of the error kinds below.
Adapters around third-party clients convert raw library exceptions with
``as_external_failure`` so callers only ever see this hierarchy.
"""

import json
import subprocess
import traceback
from typing import Any, Dict

from groq import APITimeoutError

from vidinsight.config import config
from vidinsight.utils.logger import logging


class VideoInsightsError(Exception):
    """Base class for all pipeline errors."""


class ExternalCallFailure(VideoInsightsError):
    """Network, quota or non-2xx failure of an external capability."""

    def __init__(self, message: str, capability: str = "external"):
        super().__init__(message)
        self.capability = capability


class ExternalCallTimeout(ExternalCallFailure):
    """An external call exceeded its configured timeout."""


class TranscriptSourceError(ExternalCallFailure):
    """The subtitle extraction tool failed."""


class EmptyResponseError(VideoInsightsError):
    """The model returned blank output where content was required."""


class MalformedQuizError(VideoInsightsError):
    """A quiz response could not be parsed or failed schema validation."""


class NoTranscriptAvailable(VideoInsightsError):
    """The transcript source yielded zero segments."""


class ChunkReconciliationMismatch(VideoInsightsError):
    """Cleaned-word bookkeeping could not be completed for every segment."""


def is_timeout(error: BaseException) -> bool:
    """Check whether an exception raised by a client library is a timeout."""
    return isinstance(error, (TimeoutError, APITimeoutError, subprocess.TimeoutExpired))


def as_external_failure(error: Exception, capability: str) -> ExternalCallFailure:
    """
    Wrap a raw client exception in the matching error kind.

    Args:
        error: The exception raised by the client library
        capability: Name of the capability that failed (for messages and logs)

    Returns:
        ExternalCallTimeout for timeouts, ExternalCallFailure otherwise
    """
    if isinstance(error, ExternalCallFailure):
        return error

    if is_timeout(error):
        logging.error(f"{capability} call timed out: {error}")
        return ExternalCallTimeout(f"{capability} call timed out: {error}", capability)

    logging.error(f"{capability} call failed: {error}")
    return ExternalCallFailure(f"{capability} call failed: {error}", capability)


def log_diagnostic_info(context: Dict[str, Any]):
    """
    Log diagnostic information for debugging.

    Args:
        context: Dictionary of diagnostic information
    """
    if not config.DEBUG:
        return

    try:
        logging.info(f"Diagnostic info: {json.dumps(context, default=str)}")
    except (TypeError, ValueError) as e:
        logging.error(f"Error logging diagnostic info: {str(e)}")


def log_exception(message: str, error: Exception):
    """Log an error message followed by the current traceback."""
    logging.error(f"{message}: {str(error)}")
    logging.error(traceback.format_exc())
