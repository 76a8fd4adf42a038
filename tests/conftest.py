"""
Configuration for pytest tests.
"""

import os
import pytest
from pathlib import Path

# Configuration is read when vidinsight is first imported, so test settings
# must be in the environment before any test module imports it.
TEST_DATA_DIR = Path("test_data")
os.environ["GROQ_API_KEY"] = os.environ.get("GROQ_API_KEY", "test_api_key")
os.environ["DATA_DIR"] = str(TEST_DATA_DIR)
os.environ["OUTPUT_DIR"] = str(TEST_DATA_DIR / "output")
os.environ["ENVIRONMENT"] = "development"
os.environ["CLEANING_CALL_DELAY"] = "0"
os.environ["CLEANING_STRATEGY"] = "proportional"

from vidinsight.models.schemas import TranscriptSegment  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Create the test data directories and remove them afterwards."""
    output_dir = TEST_DATA_DIR / "output"
    output_dir.mkdir(parents=True, exist_ok=True)

    yield

    import shutil
    shutil.rmtree(TEST_DATA_DIR, ignore_errors=True)


@pytest.fixture(scope="session")
def test_video_url():
    """Return a test video URL."""
    return "https://youtu.be/V3TUEeB0kW0"


@pytest.fixture(scope="session")
def test_output_dir():
    """Return the test output directory."""
    return Path(os.environ["OUTPUT_DIR"])


@pytest.fixture
def segments():
    """Three short segments with filler words."""
    return [
        TranscriptSegment(start_time=0.0, end_time=2.0, text="um hello there"),
        TranscriptSegment(start_time=2.0, end_time=4.0, text="this is uh a test"),
        TranscriptSegment(start_time=4.0, end_time=6.0, text="goodbye now"),
    ]


def extract_cleaning_input(prompt):
    """Return the transcript text embedded in a cleaning prompt."""
    return prompt.split("Transcript to clean:\n", 1)[1]


def remove_fillers(prompt):
    """Fake cleaner that drops 'um' and 'uh' from the transcript in the prompt."""
    text = extract_cleaning_input(prompt)
    return " ".join(word for word in text.split() if word not in ("um", "uh"))


@pytest.fixture
def filler_cleaner():
    """Text transform removing fillers, wrapped in a mock to record calls."""
    from unittest.mock import MagicMock
    return MagicMock(side_effect=remove_fillers)
