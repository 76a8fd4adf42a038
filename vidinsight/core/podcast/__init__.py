"""
Two-host podcast generation: script composition, parsing and audio assembly.
"""

from vidinsight.core.podcast.audio import PodcastAudioAssembler, find_primary_speaker, resolve_roles
from vidinsight.core.podcast.generator import PodcastGenerator
from vidinsight.core.podcast.script import PodcastScriptComposer, limit_source_words, parse_script

__all__ = [
    "PodcastAudioAssembler",
    "PodcastGenerator",
    "PodcastScriptComposer",
    "find_primary_speaker",
    "limit_source_words",
    "parse_script",
    "resolve_roles",
]
