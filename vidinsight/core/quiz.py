"""
Module for generating multiple-choice quizzes from transcript content.
"""

import json
import re
from typing import Optional

from pydantic import ValidationError

from vidinsight.core.llm import TextTransform
from vidinsight.core.prompts import QUIZ_TEMPLATE
from vidinsight.models.schemas import Quiz, QuizConfig
from vidinsight.utils.error_handling import EmptyResponseError, MalformedQuizError
from vidinsight.utils.logger import logging

CODE_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)


def strip_code_fences(response: str) -> str:
    """
    Remove a surrounding markdown code fence (```json ... ``` or ``` ... ```).

    Text that is not wrapped in a fence is returned stripped but otherwise unchanged.
    """
    text = response.strip()
    match = CODE_FENCE.match(text)
    if match:
        return match.group(1).strip()
    return text


def parse_quiz(response: str) -> Quiz:
    """
    Parse a model response into a validated Quiz.

    Raises:
        EmptyResponseError: If the response is None or blank
        MalformedQuizError: If the JSON is invalid or does not match the quiz schema
    """
    if response is None or not response.strip():
        raise EmptyResponseError("Quiz generator returned an empty response")

    payload = strip_code_fences(response)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedQuizError(f"Quiz response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedQuizError(f"Quiz response must be a JSON object, got {type(data).__name__}")

    try:
        return Quiz.model_validate(data)
    except ValidationError as e:
        raise MalformedQuizError(f"Quiz response failed validation: {e}") from e


class QuizGenerator:
    """Class to generate quizzes with a language model."""

    def __init__(self, text_transform: TextTransform, quiz_config: Optional[QuizConfig] = None):
        self.text_transform = text_transform
        self.config = quiz_config or QuizConfig()

    def generate(self, text: str, num_questions: Optional[int] = None) -> Quiz:
        """
        Generate a quiz about the given text.

        No repair or retry is attempted; a malformed response is reported.

        Args:
            text: Source text (a summary or a cleaned transcript)
            num_questions: Number of questions to request (at least 1, defaults to config)

        Returns:
            Validated Quiz
        """
        if num_questions is None:
            num_questions = self.config.num_questions
        if num_questions < 1:
            raise ValueError(f"num_questions must be at least 1, got {num_questions}")

        logging.info(f"Generating quiz with {num_questions} questions")
        response = self.text_transform(QUIZ_TEMPLATE.format(num_questions=num_questions, text=text))
        quiz = parse_quiz(response)

        if len(quiz.questions) != num_questions:
            logging.warning(
                f"Requested {num_questions} questions but the model returned {len(quiz.questions)}"
            )
        return quiz
