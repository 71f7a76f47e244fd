"""Runtime settings for the onboarding service.

Values are plain module constants, read once from the environment at import
time.  A local ``.env`` file is honoured when present.
"""

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
LLM_MODEL = os.getenv("ONBOARD_LLM_MODEL", "gpt-4o-mini")
EXTRACT_TEMPERATURE = _float_env("ONBOARD_EXTRACT_TEMPERATURE", 0.3)
CHAT_TEMPERATURE = _float_env("ONBOARD_CHAT_TEMPERATURE", 0.7)

# Crawl bounds
MAX_PAGES_HARD_LIMIT = 50
DEFAULT_MAX_PAGES = min(_int_env("ONBOARD_MAX_PAGES", 10), MAX_PAGES_HARD_LIMIT)
PAGE_TIMEOUT = _float_env("ONBOARD_PAGE_TIMEOUT", 30.0)  # seconds

# Text bounds (characters)
MAX_CONTENT_LENGTH = _int_env("ONBOARD_MAX_CONTENT_LENGTH", 50_000)
MAX_CORPUS_LENGTH = _int_env("ONBOARD_MAX_CORPUS_LENGTH", 60_000)

TRANSCRIPT_WINDOW = _int_env("ONBOARD_TRANSCRIPT_WINDOW", 20)
