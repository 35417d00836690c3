"""
Question Prompts - Prompts for LLM-based question generation.

The provider asks for a JSON object so the response can be validated
before a session starts.
"""

from dataclasses import dataclass

AUDIENCE_PRESETS = ("6-7 years", "8-10 years", "11-13 years", "14+ years")


@dataclass
class QuestionPrompts:
    """
    Collection of prompts for question generation.

    Each prompt includes the output format the parser expects.
    """

    @staticmethod
    def system() -> str:
        """System context for the question generator."""
        return """
You are a teacher writing quiz questions for a classroom board game.
Questions must be short, unambiguous, and suitable for the stated age group.
Every question has exactly one correct option.
Always answer with JSON only, no commentary.
"""

    @staticmethod
    def question_set(topic: str, audience: str, count: int) -> str:
        """Prompt for a pool of multiple-choice questions."""
        return f"""
Write {count} multiple-choice questions about "{topic}" for students aged "{audience}".

Each question has 3 or 4 options and the index of the correct option (0-based).

Output as JSON:
{{
    "questions": [
        {{
            "text": "string",
            "options": ["string", "string", "string"],
            "correct_index": number
        }}
    ]
}}
"""
