"""
Core functionality for the video insights application.

This package contains modules for extracting transcripts, cleaning them,
and generating summaries, quizzes and podcasts.
"""
