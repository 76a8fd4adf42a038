"""
Tests for the transcript normalizer module.
"""

import re
import threading
import time

import pytest
from unittest.mock import MagicMock

from vidinsight.core.normalizer import (
    TranscriptNormalizer,
    build_cleaning_prompt,
    redistribute_words,
)
from vidinsight.models.schemas import (
    CleaningConfig,
    ReconciliationStrategy,
    TranscriptSegment,
)
from vidinsight.utils.error_handling import ExternalCallFailure, ExternalCallTimeout

FILLERS = ("um", "uh")
SEGMENT_MARKER = re.compile(r"\[SEG(\d+)\](.*?)\[/SEG\1\]", re.DOTALL)


def cleaning_input(prompt):
    return prompt.split("Transcript to clean:\n", 1)[1]


def marked_cleaner(prompt):
    """Fake cleaner that removes fillers inside each marker pair."""
    def clean(match):
        words = [word for word in match.group(2).split() if word not in FILLERS]
        return f"[SEG{match.group(1)}]{' '.join(words)}[/SEG{match.group(1)}]"
    return SEGMENT_MARKER.sub(clean, cleaning_input(prompt))


def proportional_config(**overrides):
    settings = dict(strategy=ReconciliationStrategy.PROPORTIONAL, inter_call_delay=0.0)
    settings.update(overrides)
    return CleaningConfig(**settings)


def marker_config(**overrides):
    settings = dict(strategy=ReconciliationStrategy.MARKER, inter_call_delay=0.0)
    settings.update(overrides)
    return CleaningConfig(**settings)


def make_segments(count, words_per_segment=4):
    return [
        TranscriptSegment(
            start_time=float(i),
            end_time=float(i) + 0.5,
            text=" ".join("um" if j % 3 == 1 else f"w{i}_{j}" for j in range(words_per_segment)),
        )
        for i in range(count)
    ]


def assert_order_and_coverage(original, cleaned):
    assert len(cleaned) == len(original)
    for before, after in zip(original, cleaned):
        assert after.start_time == before.start_time
        assert after.end_time == before.end_time
        assert after.text == before.text
        assert after.normalized_text is not None


def test_build_cleaning_prompt_includes_marker_rule_only_when_marked():
    plain = build_cleaning_prompt("some text")
    marked = build_cleaning_prompt("[SEG0]some text[/SEG0]", marked=True)

    assert "[SEGx]" not in plain
    assert "[SEGx]" in marked
    assert plain.endswith("Transcript to clean:\nsome text")


def test_proportional_scenario(segments, filler_cleaner):
    """Test the filler-removal scenario spreads cleaned words over the original segments."""
    normalizer = TranscriptNormalizer(filler_cleaner, proportional_config())

    cleaned = normalizer.normalize(segments)

    assert [s.normalized_text for s in cleaned] == ["hello there", "this is a test", "goodbye now"]
    assert_order_and_coverage(segments, cleaned)
    filler_cleaner.assert_called_once()


def test_proportional_conserves_words(filler_cleaner):
    """Test that every cleaned word lands in exactly one segment, in order."""
    segments = make_segments(30, words_per_segment=7)
    normalizer = TranscriptNormalizer(filler_cleaner, proportional_config(max_chunk_chars=120))

    cleaned = normalizer.normalize(segments)

    expected = [w for s in segments for w in s.text.split() if w not in FILLERS]
    actual = [w for s in cleaned for w in s.normalized_text.split()]
    assert actual == expected
    assert filler_cleaner.call_count > 1
    assert_order_and_coverage(segments, cleaned)


def test_marker_strategy(segments):
    cleaner = MagicMock(side_effect=marked_cleaner)
    normalizer = TranscriptNormalizer(cleaner, marker_config())

    cleaned = normalizer.normalize(segments)

    assert [s.normalized_text for s in cleaned] == ["hello there", "this is a test", "goodbye now"]
    assert_order_and_coverage(segments, cleaned)


def test_marker_strategy_uses_global_indices_across_chunks():
    segments = make_segments(7)
    seen_indices = []

    def cleaner(prompt):
        seen_indices.extend(int(i) for i, _ in SEGMENT_MARKER.findall(cleaning_input(prompt)))
        return marked_cleaner(prompt)

    normalizer = TranscriptNormalizer(cleaner, marker_config(max_segments_per_chunk=3))
    cleaned = normalizer.normalize(segments)

    assert seen_indices == list(range(7))
    for before, after in zip(segments, cleaned):
        assert after.normalized_text == " ".join(w for w in before.text.split() if w not in FILLERS)


def test_marker_strategy_missing_marker_falls_back():
    """Test that a segment whose markers were dropped keeps its original text."""
    segments = make_segments(3)

    def cleaner(prompt):
        return "[SEG0]first[/SEG0] merged everything else [SEG2]   [/SEG2]"

    cleaned = TranscriptNormalizer(cleaner, marker_config()).normalize(segments)

    assert cleaned[0].normalized_text == "first"
    assert cleaned[1].normalized_text == segments[1].text
    assert cleaned[2].normalized_text == segments[2].text


@pytest.mark.parametrize("strategy_config", [proportional_config, marker_config])
def test_failed_chunk_keeps_original_text(strategy_config):
    """Test that a failed cleaning call falls back to the original text for its chunk."""
    segments = make_segments(6)
    calls = {"count": 0}

    def flaky_cleaner(prompt):
        calls["count"] += 1
        if calls["count"] == 1:
            raise ExternalCallTimeout("text transform call timed out", "text transform")
        if "[SEG" in prompt:
            return marked_cleaner(prompt)
        return " ".join(w for w in cleaning_input(prompt).split() if w not in FILLERS)

    config = strategy_config(max_chunk_chars=40, max_segments_per_chunk=2)
    cleaned = TranscriptNormalizer(flaky_cleaner, config).normalize(segments)

    assert_order_and_coverage(segments, cleaned)
    assert calls["count"] > 1
    # The first chunk was not cleaned so its filler survives
    assert "um" in cleaned[0].normalized_text.split()
    assert "um" not in cleaned[-1].normalized_text.split()


def test_empty_response_keeps_original_text(segments):
    cleaned = TranscriptNormalizer(lambda prompt: "   ", proportional_config()).normalize(segments)

    assert [s.normalized_text for s in cleaned] == [s.text for s in segments]


def test_strict_mode_propagates_failure(segments):
    def failing_cleaner(prompt):
        raise ExternalCallFailure("quota exceeded", "text transform")

    normalizer = TranscriptNormalizer(failing_cleaner, proportional_config(strict=True))

    with pytest.raises(ExternalCallFailure):
        normalizer.normalize(segments)


def test_empty_transcript(filler_cleaner):
    assert TranscriptNormalizer(filler_cleaner, proportional_config()).normalize([]) == []
    filler_cleaner.assert_not_called()


def test_parallel_cleaning_preserves_order():
    """Test that chunks cleaned concurrently are reassembled in transcript order."""
    segments = make_segments(12)
    active = {"now": 0, "peak": 0}
    lock = threading.Lock()

    def slow_cleaner(prompt):
        with lock:
            active["now"] += 1
            active["peak"] = max(active["peak"], active["now"])
        time.sleep(0.02)
        with lock:
            active["now"] -= 1
        return marked_cleaner(prompt)

    config = marker_config(max_segments_per_chunk=2, max_workers=3)
    cleaned = TranscriptNormalizer(slow_cleaner, config).normalize(segments)

    assert_order_and_coverage(segments, cleaned)
    assert active["peak"] <= 3
    for before, after in zip(segments, cleaned):
        assert after.normalized_text == " ".join(w for w in before.text.split() if w not in FILLERS)


def test_redistribute_words_runs_out():
    """Test that segments reached after the cleaned words run out keep their text."""
    segments = [
        TranscriptSegment(start_time=0.0, end_time=1.0, text="a b"),
        TranscriptSegment(start_time=1.0, end_time=2.0, text="c"),
        TranscriptSegment(start_time=2.0, end_time=3.0, text="d e"),
    ]

    texts = redistribute_words(segments, "x")

    assert texts == ["x", "c", "d e"]


def test_redistribute_words_last_segment_takes_remainder():
    segments = [
        TranscriptSegment(start_time=0.0, end_time=1.0, text="a"),
        TranscriptSegment(start_time=1.0, end_time=2.0, text="b"),
    ]

    texts = redistribute_words(segments, "one two three four five")

    assert " ".join(texts).split() == ["one", "two", "three", "four", "five"]
    assert texts[-1] != ""


def test_marker_chunks_fit_character_budget_with_markers():
    """Test that each marked chunk sent to the cleaner stays within the character limit."""
    segments = make_segments(40)
    sizes = []

    def cleaner(prompt):
        sizes.append(len(cleaning_input(prompt)))
        return marked_cleaner(prompt)

    config = marker_config(max_chunk_chars=100, max_segments_per_chunk=50)
    cleaned = TranscriptNormalizer(cleaner, config).normalize(segments)

    assert_order_and_coverage(segments, cleaned)
    assert len(sizes) > 1
    assert all(size <= 100 for size in sizes)
