"""
OpenAI Question Provider - Generates the question pool with a chat model.

The model is asked for a JSON object; the response is parsed and
validated like any other provider output. Network and API failures
surface as ProviderError so the session falls back to SETUP.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import json
import logging

import openai

from .. import config
from ..engine_core.state import Question
from ..errors import ProviderError
from .prompts import QuestionPrompts
from .provider import QuestionProvider, validate_question_pool

logger = logging.getLogger(__name__)


def parse_question_payload(content: str | None) -> list[Any]:
    """
    Extract the list of question records from a model response.

    Accepts {"questions": [...]} or a bare list, optionally wrapped in a
    ```json fence.
    """
    if not content or not content.strip():
        raise ProviderError("Question provider returned an empty response")

    text = content.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif text.startswith("```"):
        text = text.strip("`").strip()

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProviderError(f"Question provider returned invalid JSON: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get("questions")
    if not isinstance(payload, list):
        raise ProviderError("Question provider response has no question list")
    return payload


@dataclass
class OpenAIQuestionProvider(QuestionProvider):
    """
    Question provider backed by the OpenAI chat completions API.

    Usage:
        provider = OpenAIQuestionProvider()
        questions = provider.fetch_questions("Roman history", "8-10 years")
    """
    client: Any = None  # openai.OpenAI, created lazily
    model: str = config.QUESTION_MODEL
    question_count: int = config.QUESTION_COUNT
    temperature: float = 0.7

    def fetch_questions(self, topic: str, audience: str) -> list[Question]:
        client = self._get_client()
        logger.info(
            "Requesting %d questions on %r for %r from %s",
            self.question_count, topic, audience, self.model,
        )

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": QuestionPrompts.system()},
                    {
                        "role": "user",
                        "content": QuestionPrompts.question_set(topic, audience, self.question_count),
                    },
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"Question request failed: {e}") from e

        if not response.choices:
            raise ProviderError("Question provider returned no choices")
        records = parse_question_payload(response.choices[0].message.content)
        questions = validate_question_pool(records)
        logger.debug("Received %d valid questions", len(questions))
        return questions

    def _get_client(self):
        """Get or create the OpenAI client."""
        if self.client is None:
            api_key = config.get_openai_api_key()
            if not api_key:
                raise ProviderError("OPENAI_API_KEY is not set")
            self.client = openai.OpenAI(api_key=api_key)
        return self.client
