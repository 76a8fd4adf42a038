"""
Main entry point for the Video Insights application.

The functions here wire the configured capabilities (language model, speech
synthesis and subtitle extraction) into the pipeline components. Each one
accepts the capability as an optional argument so callers and tests can
inject their own.
"""

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

from vidinsight.config import config
from vidinsight.core.llm import LLMTextTransform, TextTransform
from vidinsight.core.normalizer import TranscriptNormalizer
from vidinsight.core.podcast import PodcastGenerator
from vidinsight.core.quiz import QuizGenerator
from vidinsight.core.speech import SpeechSynthesis, SpeechSynthesizer
from vidinsight.core.summarizer import TranscriptSummarizer
from vidinsight.core.transcript_source import YtDlpTranscriptSource
from vidinsight.models.schemas import (
    CleaningConfig,
    PodcastConfig,
    PodcastDurationMode,
    PodcastResult,
    Quiz,
    TranscriptSegment,
)
from vidinsight.utils.error_handling import NoTranscriptAvailable
from vidinsight.utils.helpers import get_timestamp, sanitize_filename, save_json
from vidinsight.utils.logger import logging


def get_text_transform() -> TextTransform:
    """Create the configured language model capability."""
    return LLMTextTransform()


def get_speech_synthesizer() -> SpeechSynthesis:
    """Create the configured speech synthesis capability."""
    return SpeechSynthesizer()


def get_transcript_source() -> YtDlpTranscriptSource:
    """Create the configured subtitle extractor."""
    return YtDlpTranscriptSource()


def fetch_video_info(url: str) -> Dict[str, Any]:
    """Return basic metadata for a video."""
    info = get_transcript_source().get_video_info(url)
    return {
        "video_id": info.get("id"),
        "title": info.get("title"),
        "author": info.get("uploader") or info.get("channel"),
        "duration": info.get("duration"),
        "thumbnail": info.get("thumbnail"),
        "url": info.get("webpage_url") or url,
    }


def fetch_transcript(url: str) -> List[TranscriptSegment]:
    """
    Extract the raw transcript of a video.

    Raises:
        NoTranscriptAvailable: If the video has no subtitles
    """
    segments = get_transcript_source().fetch(url)
    if not segments:
        raise NoTranscriptAvailable(f"No transcript available for video: {url}")
    return segments


def clean_transcript(
    segments: Sequence[TranscriptSegment],
    text_transform: Optional[TextTransform] = None,
    cleaning_config: Optional[CleaningConfig] = None,
) -> List[TranscriptSegment]:
    """Normalize a transcript, keeping the original segment timing."""
    normalizer = TranscriptNormalizer(text_transform or get_text_transform(), cleaning_config)
    return normalizer.normalize(segments)


def summarize(
    segments: Sequence[TranscriptSegment],
    text_transform: Optional[TextTransform] = None,
) -> str:
    """Summarize a transcript."""
    return TranscriptSummarizer(text_transform or get_text_transform()).summarize(segments)


def generate_quiz(
    text: str,
    num_questions: int = config.DEFAULT_QUIZ_QUESTIONS,
    text_transform: Optional[TextTransform] = None,
) -> Quiz:
    """Generate a multiple-choice quiz about a text."""
    return QuizGenerator(text_transform or get_text_transform()).generate(text, num_questions)


def generate_podcast(
    segments: Sequence[TranscriptSegment],
    host_a: str = config.DEFAULT_HOST_A_NAME,
    host_b: str = config.DEFAULT_HOST_B_NAME,
    duration_mode: PodcastDurationMode = PodcastDurationMode.UNBOUNDED,
    text_transform: Optional[TextTransform] = None,
    speech: Optional[SpeechSynthesis] = None,
    podcast_config: Optional[PodcastConfig] = None,
) -> PodcastResult:
    """Generate a two-host podcast (script and audio) from a cleaned transcript."""
    generator = PodcastGenerator(
        text_transform or get_text_transform(),
        speech or get_speech_synthesizer(),
        podcast_config,
    )
    return generator.generate(segments, host_a, host_b, duration_mode)


def quiz_from_video(
    url: str,
    num_questions: int = config.DEFAULT_QUIZ_QUESTIONS,
    text_transform: Optional[TextTransform] = None,
) -> Quiz:
    """Fetch a transcript, summarize it and build a quiz from the summary."""
    text_transform = text_transform or get_text_transform()
    segments = fetch_transcript(url)
    summary = summarize(segments, text_transform)
    return generate_quiz(summary, num_questions, text_transform)


def podcast_from_video(
    url: str,
    host_a: str = config.DEFAULT_HOST_A_NAME,
    host_b: str = config.DEFAULT_HOST_B_NAME,
    duration_mode: PodcastDurationMode = PodcastDurationMode.UNBOUNDED,
    text_transform: Optional[TextTransform] = None,
    speech: Optional[SpeechSynthesis] = None,
) -> PodcastResult:
    """Fetch and clean a transcript, then generate a podcast from it."""
    text_transform = text_transform or get_text_transform()
    segments = fetch_transcript(url)
    cleaned = clean_transcript(segments, text_transform)
    return generate_podcast(cleaned, host_a, host_b, duration_mode, text_transform, speech)


def save_report(report: Dict[str, Any], output_file: Optional[str] = None) -> Path:
    """Save a pipeline report to a JSON file."""
    if output_file is None:
        output_dir = Path(config.OUTPUT_DIR)
        output_dir.mkdir(parents=True, exist_ok=True)
        name = sanitize_filename(report.get("title") or "video")
        output_file = output_dir / f"{name}_{get_timestamp()}_report.json"
    else:
        output_file = Path(output_file)

    save_json(report, output_file)
    logging.info(f"Report saved to: {output_file}")
    return output_file


def save_podcast_audio(result: PodcastResult, name: str) -> Path:
    """Write podcast audio to the output directory."""
    output_dir = Path(config.OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)
    audio_file = output_dir / f"{sanitize_filename(name)}_{get_timestamp()}_podcast.{config.TTS_RESPONSE_FORMAT}"
    audio_file.write_bytes(result.audio)
    logging.info(f"Podcast audio saved to: {audio_file}")
    return audio_file


def process_video(
    url: str,
    want_summary: bool = True,
    num_questions: Optional[int] = None,
    want_podcast: bool = False,
    duration_mode: PodcastDurationMode = PodcastDurationMode.UNBOUNDED,
    output_file: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Run the requested pipeline stages for one video and save a report.

    Args:
        url: Video URL
        want_summary: Whether to produce a summary
        num_questions: Number of quiz questions, or None to skip the quiz
        want_podcast: Whether to produce a podcast
        duration_mode: Podcast length policy
        output_file: Optional file path for the JSON report

    Returns:
        The report dictionary
    """
    text_transform = get_text_transform()

    logging.info(f"Fetching transcript for: {url}")
    segments = fetch_transcript(url)
    report: Dict[str, Any] = {"url": url, "segments": len(segments)}

    summary = None
    if want_summary or num_questions:
        logging.info("Generating summary...")
        summary = summarize(segments, text_transform)
        report["summary"] = summary

    if num_questions:
        logging.info("Generating quiz...")
        quiz = generate_quiz(summary, num_questions, text_transform)
        report["quiz"] = quiz.model_dump(by_alias=True)

    if want_podcast:
        logging.info("Cleaning transcript...")
        cleaned = clean_transcript(segments, text_transform)
        result = generate_podcast(cleaned, duration_mode=duration_mode, text_transform=text_transform)
        report["podcast"] = {
            "script": result.script,
            "host_a_name": result.host_a_name,
            "host_b_name": result.host_b_name,
            "audio_size_bytes": result.audio_size_bytes,
            "audio_file": str(save_podcast_audio(result, "podcast")),
        }

    report["report_file"] = str(save_report(report, output_file))
    return report


def main():
    """Main function to run the application from command line."""
    parser = argparse.ArgumentParser(description="Video Insights")
    parser.add_argument("url", help="Video URL")
    parser.add_argument("--summary", action="store_true", help="Generate a summary")
    parser.add_argument("--quiz", type=int, metavar="N", help="Generate a quiz with N questions")
    parser.add_argument("--podcast", action="store_true", help="Generate a two-host podcast")
    parser.add_argument("--bounded", action="store_true",
                        help="Limit the podcast to about two minutes")
    parser.add_argument("--output", help="Output file path for the JSON report")

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    want_summary = args.summary or not (args.quiz or args.podcast)
    duration_mode = PodcastDurationMode.BOUNDED if args.bounded else PodcastDurationMode.UNBOUNDED

    report = process_video(
        args.url,
        want_summary=want_summary,
        num_questions=args.quiz,
        want_podcast=args.podcast,
        duration_mode=duration_mode,
        output_file=args.output,
    )

    print("\n" + "=" * 80)
    if "summary" in report:
        print("Summary")
        print("=" * 80)
        print(report["summary"])
        print("=" * 80)
    if "quiz" in report:
        print(f"Quiz: {report['quiz']['title']}")
        for number, question in enumerate(report["quiz"]["questions"], 1):
            print(f"{number}. {question['question']}")
            for index, choice in enumerate(question["choices"]):
                print(f"   {'ABCD'[index]}) {choice}")
        print("=" * 80)
    if "podcast" in report:
        print(report["podcast"]["script"])
        print(f"Audio saved to: {report['podcast']['audio_file']}")
        print("=" * 80)
    print(f"Report saved to: {report['report_file']}")


if __name__ == "__main__":
    main()
