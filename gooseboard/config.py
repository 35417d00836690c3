"""
Configuration - Environment settings and logging setup.

Environment variables:
    GOOSE_ENV             development | production (log verbosity)
    GOOSE_LOG_LEVEL       explicit log level override (DEBUG, INFO, ...)
    OPENAI_API_KEY        key for the OpenAI question provider
    GOOSE_QUESTION_MODEL  chat model used to generate questions
    GOOSE_QUESTION_COUNT  size of the question pool requested per session
    GOOSE_SESSION_TTL     seconds before finished sessions are swept
    ALLOWED_ORIGINS       comma-separated CORS origins for the HTTP adapter
"""

import logging
import os
import sys

GOOSE_ENV = os.getenv("GOOSE_ENV", "development")
GOOSE_LOG_LEVEL = os.getenv("GOOSE_LOG_LEVEL")

QUESTION_MODEL = os.getenv("GOOSE_QUESTION_MODEL", "gpt-4o-mini")
QUESTION_COUNT = int(os.getenv("GOOSE_QUESTION_COUNT", "15"))

SESSION_TTL_SECONDS = int(os.getenv("GOOSE_SESSION_TTL", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def get_openai_api_key():
    """Read the key at call time so it can be set after import."""
    return os.getenv("OPENAI_API_KEY")


def configure_logging(environment=None, level=None):
    """Configure standard logging based on environment."""
    environment = environment or GOOSE_ENV
    level = level or GOOSE_LOG_LEVEL
    if level is None:
        level = logging.INFO if environment == "production" else logging.DEBUG

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=level,
    )
    return logging.getLogger("gooseboard")
