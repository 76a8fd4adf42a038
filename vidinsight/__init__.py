"""
Video Insights Application.

This application extracts video transcripts, cleans them, and turns them
into summaries, quizzes and two-host podcasts using LLM and speech models.
"""

from vidinsight.config import config

__version__ = config.APP_VERSION
