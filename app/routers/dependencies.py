from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.services.llm import LLMClient, OpenAIClient

# One limiter for every router so app.state and the tests see the same storage
limiter = Limiter(key_func=get_remote_address)


@lru_cache(maxsize=1)
def get_llm() -> LLMClient:
    """Shared language-model client; overridden in tests via ``dependency_overrides``."""
    return OpenAIClient()
