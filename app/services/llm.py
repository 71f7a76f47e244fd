"""Language-model capability used by the extractors and the conversation.

Only two calls are needed:

* ``extract(field_spec, text)`` returns the model's raw reply to a
  single-field extraction request (expected to be a JSON object);
* ``converse(messages)`` returns the assistant's next chat reply.

:class:`OpenAIClient` is the production implementation.  Tests and offline
runs substitute any object with the same two coroutines.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol, Union

from openai import AsyncOpenAI

from app.config import CHAT_TEMPERATURE, EXTRACT_TEMPERATURE, LLM_MODEL, OPENAI_API_KEY
from app.services.fields import FieldSpec

logger = logging.getLogger(__name__)

ChatMessage = Dict[str, str]

_JSON_BLOCK_RE = re.compile(r"({.*}|\[.*\])", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


class LLMClient(Protocol):
    async def extract(self, field_spec: FieldSpec, text: str) -> str: ...

    async def converse(self, messages: List[ChatMessage]) -> str: ...


def extraction_prompt(field_spec: FieldSpec) -> str:
    """System prompt asking for exactly one field as a JSON object."""
    return (
        "You are a business information extractor. "
        f"Extract {field_spec.description} (field '{field_spec.name}', "
        f"expected shape: {field_spec.shape.value}) from the website content and "
        "conversation below. Return ONLY a JSON object of the form "
        '{"value": ..., "confidence": 0.0-1.0, "needs_confirmation": true|false, '
        '"source": "website"|"conversation"}. '
        'If the information is not present, return {"value": null, "confidence": 0}.'
    )


def parse_json_reply(content: Optional[str]) -> Optional[Union[Dict[str, Any], List[Any]]]:
    """Parse a model reply as JSON, tolerating surrounding prose and trailing commas.

    Returns None when nothing JSON-like can be recovered.
    """
    if not content:
        return None
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        logger.debug("Direct JSON parse failed; trying to locate a JSON block.")

    match = _JSON_BLOCK_RE.search(content)
    if not match:
        return None
    try:
        return json.loads(_TRAILING_COMMA_RE.sub(r"\1", match.group(0)))
    except json.JSONDecodeError as exc:
        logger.warning("Could not parse JSON from model reply: %s", exc)
        return None


class OpenAIClient:
    """:class:`LLMClient` backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str = OPENAI_API_KEY,
        model: str = LLM_MODEL,
        extract_temperature: float = EXTRACT_TEMPERATURE,
        chat_temperature: float = CHAT_TEMPERATURE,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._extract_temperature = extract_temperature
        self._chat_temperature = chat_temperature
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        # Created lazily so the service starts (and degrades) without a key
        if self._client is None:
            if not self._api_key:
                raise RuntimeError("OPENAI_API_KEY is not configured.")
            self._client = AsyncOpenAI(api_key=self._api_key, max_retries=4)
        return self._client

    async def extract(self, field_spec: FieldSpec, text: str) -> str:
        response = await self._get_client().chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": extraction_prompt(field_spec)},
                {"role": "user", "content": text},
            ],
            temperature=self._extract_temperature,
            response_format={"type": "json_object"},
        )
        if not response.choices:
            raise ValueError("OpenAI API returned an empty response.")
        return response.choices[0].message.content or ""

    async def converse(self, messages: List[ChatMessage]) -> str:
        response = await self._get_client().chat.completions.create(
            model=self._model,
            messages=messages,
            temperature=self._chat_temperature,
        )
        if not response.choices:
            raise ValueError("OpenAI API returned an empty response.")
        return response.choices[0].message.content or ""
