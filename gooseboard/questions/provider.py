"""
Question Provider - Contract and validation for the question bank.

A provider returns the whole pool for a session in one call. Records are
validated here, before the session starts, so a malformed question never
reaches answer time.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable

from ..engine_core.state import Question
from ..errors import MalformedQuestionError

MIN_OPTIONS = 2


class QuestionProvider(ABC):
    """
    Source of quiz questions for a session.

    Implementations raise ProviderError on network or parse failure.
    """

    @abstractmethod
    def fetch_questions(self, topic: str, audience: str) -> list[Question]:
        """Return a validated question pool for the topic and audience."""
        pass


def parse_question(record: Any, position: int = 0) -> tuple[Question | None, list[str]]:
    """
    Convert one raw record into a Question.

    Accepts a Question, or a dict with text, options and correct_index
    (correctIndex is also accepted). Returns (question, errors).
    """
    if isinstance(record, Question):
        record = record.to_dict()
    if not isinstance(record, dict):
        return None, [f"Question {position}: expected an object, got {type(record).__name__}"]

    errors: list[str] = []

    text = record.get("text")
    if not isinstance(text, str) or not text.strip():
        errors.append(f"Question {position}: text is required")

    options = record.get("options")
    if not isinstance(options, (list, tuple)):
        errors.append(f"Question {position}: options must be a list")
        options = []
    elif len(options) < MIN_OPTIONS:
        errors.append(f"Question {position}: needs at least {MIN_OPTIONS} options, got {len(options)}")
    elif not all(isinstance(o, str) and o.strip() for o in options):
        errors.append(f"Question {position}: options must be non-empty strings")

    correct_index = record.get("correct_index", record.get("correctIndex"))
    # bool is an int subclass; reject it explicitly
    if not isinstance(correct_index, int) or isinstance(correct_index, bool):
        errors.append(f"Question {position}: correct_index must be an integer")
    elif not 0 <= correct_index < len(options):
        errors.append(
            f"Question {position}: correct_index {correct_index} out of range for {len(options)} options"
        )

    if errors:
        return None, errors

    return Question(
        text=text.strip(),
        options=tuple(o.strip() for o in options),
        correct_index=correct_index,
    ), []


def validate_question_pool(records: Iterable[Any]) -> list[Question]:
    """
    Validate a whole pool.

    Raises MalformedQuestionError listing every problem found.
    """
    questions: list[Question] = []
    errors: list[str] = []

    for i, record in enumerate(records):
        question, record_errors = parse_question(record, i)
        if record_errors:
            errors.extend(record_errors)
        else:
            questions.append(question)

    if not questions and not errors:
        errors.append("Question pool is empty")
    if errors:
        raise MalformedQuestionError(errors)

    return questions


class StaticQuestionProvider(QuestionProvider):
    """
    Provider backed by a fixed pool.

    Used for offline play and tests; topic and audience are ignored.
    """

    def __init__(self, questions: Iterable[Any]):
        self._records = list(questions)

    def fetch_questions(self, topic: str, audience: str) -> list[Question]:
        return validate_question_pool(self._records)
