"""Per-field knowledge extraction from website text and conversation.

Each field has its own independent model call.  A call whose reply is missing,
malformed or of the wrong shape yields ``None`` ("no new information") and is
never raised to the caller.  :func:`extract_all` issues every call at once and
waits for all of them before returning, so the merge that follows always sees
a complete set of results.
"""

import asyncio
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.models.knowledge import KnowledgeField, Message, Source
from app.services.fields import FIELD_CATALOG, SOCIAL_PLATFORMS, FieldShape, FieldSpec
from app.services.llm import LLMClient, parse_json_reply

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"-?\d[\d,]*(?:\.\d+)?")


def format_transcript(transcript: Sequence[Message]) -> str:
    return "\n".join(f"{message.role}: {message.content}" for message in transcript)


def build_extraction_text(corpus: str, transcript: Sequence[Message]) -> str:
    return f"Website Content:\n{corpus}\n\nConversation:\n{format_transcript(transcript)}"


def _coerce_text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if match:
            number = float(match.group(0).replace(",", ""))
            return int(number) if number.is_integer() else number
    return None


def _coerce_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    items: List[str] = []
    for item in value:
        if isinstance(item, dict):
            # e.g. services returned as {"name": ..., "description": ...}
            item = item.get("name") or item.get("title")
        text = _coerce_text(item)
        if text and text not in items:
            items.append(text)
    return items or None


def _coerce_map(value: Any) -> Optional[Dict[str, str]]:
    if not isinstance(value, dict):
        return None
    links = {}
    for platform, url in value.items():
        key = str(platform).strip().lower()
        text = _coerce_text(url)
        if key in SOCIAL_PLATFORMS and text:
            links[key] = text
    return links or None


_COERCERS = {
    FieldShape.TEXT: _coerce_text,
    FieldShape.NUMBER: _coerce_number,
    FieldShape.LIST: _coerce_list,
    FieldShape.MAP: _coerce_map,
}


def parse_field(
    field_spec: FieldSpec, raw: Optional[str], default_source: Source
) -> Optional[KnowledgeField]:
    """Turn a raw model reply into a :class:`KnowledgeField`, or None."""
    payload = parse_json_reply(raw)
    if not isinstance(payload, dict):
        logger.warning("Extractor %s: unparsable reply", field_spec.name)
        return None

    value = _COERCERS[field_spec.shape](payload.get("value"))
    if value is None:
        return None

    try:
        source = Source(payload.get("source", default_source))
    except ValueError:
        source = default_source

    return KnowledgeField(
        name=field_spec.name,
        value=value,
        confidence=payload.get("confidence", 0.5),
        needs_confirmation=bool(payload.get("needs_confirmation", False)),
        source=source,
    )


def _default_source(corpus: str, transcript: Sequence[Message]) -> Source:
    has_conversation = any(message.role == "user" for message in transcript)
    if corpus.strip() and not has_conversation:
        return Source.WEBSITE
    return Source.CONVERSATION


async def run_extractor(
    field_spec: FieldSpec,
    corpus: str,
    transcript: Sequence[Message],
    llm: LLMClient,
) -> Optional[KnowledgeField]:
    """Extract one field; any failure degrades to None."""
    try:
        raw = await llm.extract(field_spec, build_extraction_text(corpus, transcript))
    except Exception as exc:
        logger.warning("Extractor %s: model call failed – %s", field_spec.name, exc)
        return None
    return parse_field(field_spec, raw, _default_source(corpus, transcript))


async def extract_all(
    corpus: str,
    transcript: Sequence[Message],
    llm: LLMClient,
    fields: Optional[Iterable[str]] = None,
) -> List[KnowledgeField]:
    """Run the extractors for *fields* (None: all) concurrently and join.

    Returns the non-empty results in field order.

    Raises:
        KeyError: if a requested field is not in the catalog.
    """
    specs = [FIELD_CATALOG[name] for name in (FIELD_CATALOG if fields is None else fields)]
    results = await asyncio.gather(
        *(run_extractor(spec, corpus, transcript, llm) for spec in specs),
        return_exceptions=True,
    )

    fragments: List[KnowledgeField] = []
    for spec, result in zip(specs, results):
        if isinstance(result, BaseException):
            logger.warning("Extractor %s: failed – %s", spec.name, result)
            continue
        if result is not None:
            fragments.append(result)
    logger.info("Extractors: %d/%d field(s) produced a value", len(fragments), len(specs))
    return fragments
