"""
Configuration settings for the video insights application.
"""

import os
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "Video Insights"
    APP_VERSION = "0.1.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
    OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", DATA_DIR / "output"))

    # API keys
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")

    # Text transform (LLM)
    MODEL_PROVIDER = os.getenv("MODEL_PROVIDER", "groq")
    DEFAULT_LLM_MODEL = os.getenv("DEFAULT_LLM_MODEL", "llama-3.3-70b-versatile")
    TEMPERATURE = _env_float("TEMPERATURE", 0.0)
    LLM_MAX_TOKENS = _env_int("LLM_MAX_TOKENS", 4096)
    LLM_TIMEOUT_SECONDS = _env_float("LLM_TIMEOUT_SECONDS", 180.0)
    LLM_MAX_RETRIES = _env_int("LLM_MAX_RETRIES", 2)

    # Speech synthesis
    TTS_MODEL = os.getenv("TTS_MODEL", "playai-tts")
    TTS_RESPONSE_FORMAT = os.getenv("TTS_RESPONSE_FORMAT", "mp3")
    TTS_TIMEOUT_SECONDS = _env_float("TTS_TIMEOUT_SECONDS", 120.0)
    HOST_A_VOICE = os.getenv("HOST_A_VOICE", "Arista-PlayAI")
    HOST_B_VOICE = os.getenv("HOST_B_VOICE", "Fritz-PlayAI")
    DEFAULT_HOST_A_NAME = os.getenv("DEFAULT_HOST_A_NAME", "Ana")
    DEFAULT_HOST_B_NAME = os.getenv("DEFAULT_HOST_B_NAME", "João")

    # Subtitle extraction
    YT_DLP_PATH = os.getenv("YT_DLP_PATH", "yt-dlp")
    SUBTITLE_LANGUAGE = os.getenv("SUBTITLE_LANGUAGE", "en")
    YT_DLP_TIMEOUT_SECONDS = _env_float("YT_DLP_TIMEOUT_SECONDS", 300.0)

    # Transcript cleaning
    CLEANING_STRATEGY = os.getenv("CLEANING_STRATEGY", "proportional")
    CLEANING_CHUNK_CHARS = _env_int("CLEANING_CHUNK_CHARS", 3000)
    CLEANING_SEGMENTS_PER_CHUNK = _env_int("CLEANING_SEGMENTS_PER_CHUNK", 50)
    CLEANING_MAX_WORKERS = _env_int("CLEANING_MAX_WORKERS", 1)
    # Pause between sequential cleaning calls (rate limit buffer)
    CLEANING_CALL_DELAY = _env_float("CLEANING_CALL_DELAY", 1.0)

    # Podcast
    PODCAST_SOURCE_WORD_BUDGET = _env_int("PODCAST_SOURCE_WORD_BUDGET", 150)
    PODCAST_SOURCE_WORD_HARD_CAP = _env_int("PODCAST_SOURCE_WORD_HARD_CAP", 180)
    PODCAST_PAUSE_FRAMES = _env_int("PODCAST_PAUSE_FRAMES", 12)

    # Quiz
    DEFAULT_QUIZ_QUESTIONS = _env_int("DEFAULT_QUIZ_QUESTIONS", 5)

    CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]

    # Create data directories if they don't exist
    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

        # Validate required environment variables
        if not cls.GROQ_API_KEY:
            from vidinsight.utils.logger import logging
            logging.warning(
                "GROQ_API_KEY environment variable not set. "
                "Please set it in the .env file or environment variables."
            )


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
