"""
Tests for the quiz generator module.
"""

import json

import pytest
from unittest.mock import MagicMock

from vidinsight.core.quiz import QuizGenerator, parse_quiz, strip_code_fences
from vidinsight.models.schemas import Quiz, QuizConfig
from vidinsight.utils.error_handling import EmptyResponseError, MalformedQuizError


def quiz_payload(num_questions=2, **overrides):
    questions = [
        {
            "id": i + 1,
            "question": f"Question {i + 1}?",
            "choices": ["alpha", "beta", "gamma", "delta"],
            "correctIndex": i % 4,
        }
        for i in range(num_questions)
    ]
    payload = {"title": "Testing Quiz", "questions": questions}
    payload.update(overrides)
    return payload


def test_parse_valid_quiz():
    quiz = parse_quiz(json.dumps(quiz_payload()))

    assert isinstance(quiz, Quiz)
    assert quiz.title == "Testing Quiz"
    assert len(quiz.questions) == 2
    first = quiz.questions[0]
    assert first.id == "1"
    assert first.question_text == "Question 1?"
    assert first.options == ["alpha", "beta", "gamma", "delta"]
    assert first.correct_option_index == 0


def test_fenced_and_bare_json_parse_identically():
    bare = json.dumps(quiz_payload())
    fenced_json = f"```json\n{bare}\n```"
    fenced_plain = f"```\n{bare}\n```"

    assert parse_quiz(fenced_json) == parse_quiz(bare)
    assert parse_quiz(fenced_plain) == parse_quiz(bare)


def test_strip_code_fences_leaves_bare_text():
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


@pytest.mark.parametrize("choices", [["a", "b", "c"], ["a", "b", "c", "d", "e"], ["a", "a", "b", "c"]])
def test_reject_wrong_choices(choices):
    payload = quiz_payload(1)
    payload["questions"][0]["choices"] = choices

    with pytest.raises(MalformedQuizError):
        parse_quiz(json.dumps(payload))


@pytest.mark.parametrize("index", [4, -1])
def test_reject_correct_index_out_of_range(index):
    payload = quiz_payload(1)
    payload["questions"][0]["correctIndex"] = index

    with pytest.raises(MalformedQuizError):
        parse_quiz(json.dumps(payload))


def test_reject_missing_title():
    payload = quiz_payload()
    del payload["title"]

    with pytest.raises(MalformedQuizError):
        parse_quiz(json.dumps(payload))


@pytest.mark.parametrize("response", ["not json at all", "[1, 2, 3]", '{"title": "x", "questions": []}'])
def test_reject_malformed_responses(response):
    with pytest.raises(MalformedQuizError):
        parse_quiz(response)


@pytest.mark.parametrize("response", ["", "  \n", None])
def test_empty_response(response):
    with pytest.raises(EmptyResponseError):
        parse_quiz(response)


def test_generate_quiz_sends_count_and_text():
    transform = MagicMock(return_value=f"```json\n{json.dumps(quiz_payload(3))}\n```")

    quiz = QuizGenerator(transform).generate("A summary about testing.", 3)

    prompt = transform.call_args[0][0]
    assert "3 multiple-choice questions" in prompt
    assert prompt.endswith("A summary about testing.")
    assert len(quiz.questions) == 3


def test_generate_quiz_accepts_count_mismatch():
    """Test that a different number of valid questions is returned, not rejected."""
    transform = MagicMock(return_value=json.dumps(quiz_payload(2)))

    quiz = QuizGenerator(transform).generate("text", 5)

    assert len(quiz.questions) == 2


def test_generate_quiz_rejects_zero_questions():
    transform = MagicMock()

    with pytest.raises(ValueError):
        QuizGenerator(transform).generate("text", 0)
    transform.assert_not_called()


def test_generate_quiz_uses_configured_default():
    transform = MagicMock(return_value=json.dumps(quiz_payload(3)))

    QuizGenerator(transform, QuizConfig(num_questions=3)).generate("text")

    assert "3 multiple-choice questions" in transform.call_args[0][0]


@pytest.mark.parametrize("index", [True, "2", 1.0])
def test_reject_non_integer_correct_index(index):
    """Test that a correct index of the wrong JSON type is not coerced."""
    payload = quiz_payload(1)
    payload["questions"][0]["correctIndex"] = index

    with pytest.raises(MalformedQuizError):
        parse_quiz(json.dumps(payload))
