"""
Questions - The question bank behind plain tiles.

A provider:
1. Takes a topic and an audience descriptor
2. Returns the full question pool for one session
3. Validates every record before the session starts
"""

from .provider import (
    QuestionProvider,
    StaticQuestionProvider,
    parse_question,
    validate_question_pool,
)
from .openai_provider import OpenAIQuestionProvider, parse_question_payload
from .prompts import QuestionPrompts, AUDIENCE_PRESETS

__all__ = [
    "QuestionProvider",
    "StaticQuestionProvider",
    "parse_question",
    "validate_question_pool",
    "OpenAIQuestionProvider",
    "parse_question_payload",
    "QuestionPrompts",
    "AUDIENCE_PRESETS",
]
