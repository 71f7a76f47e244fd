"""Onboarding conversation: one turn = extract, merge, advance, reply.

State is an explicit :class:`ConversationState` value passed in with every
turn and returned updated; nothing is remembered between calls.
"""

import json
import logging
import re
from datetime import datetime
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple

from app.config import DEFAULT_MAX_PAGES, TRANSCRIPT_WINDOW
from app.models.conversation import ConversationState
from app.models.crawl_response import CrawlResult
from app.models.guidance import GuidanceRule
from app.models.knowledge import BusinessProfile, KnowledgeField, Message, Source
from app.services.crawler import build_corpus, crawl
from app.services.field_extractors import extract_all
from app.services.fields import is_present
from app.services.guidance import configured_guidance
from app.services.knowledge_store import merge, new_profile
from app.services.llm import ChatMessage, LLMClient
from app.services.normalizer import normalize
from app.services.scheduler import WRAP_UP_PROMPT, current_rule, init_scheduler, next_prompt, recompute
from app.services.session import session_lock

logger = logging.getLogger(__name__)

Crawler = Callable[[str], Awaitable[CrawlResult]]

SYSTEM_PROMPT = """You are an onboarding assistant. Your goal is to understand the user's business and collect the information needed to set up their account.

Follow these rules:
1. NEVER ask about information we already have (check the business information provided)
2. Stay focused on the current topic until we have the information we need
3. Ask a follow-up question if an answer is unclear
4. Confirm values that are marked as needing confirmation
5. Be conversational, friendly and concise; ask about one topic at a time"""

SITE_UNREADABLE_REPLY = (
    "I had trouble accessing that website. Could you verify the URL, "
    "or tell me about your business directly?"
)

# A bare or scheme-qualified web address, e.g. "acme.com" or "https://www.acme.com/about"
_WEBSITE_RE = re.compile(
    r"(?:https?://)?(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,}(?::\d+)?(?:/\S*)?",
    re.IGNORECASE,
)
# Inside a sentence only an explicit address counts; "Node.js" or "pricing.pdf" do not
_EXPLICIT_WEBSITE_RE = re.compile(r"(?:https?://|www\.)", re.IGNORECASE)
_TOKEN_PUNCTUATION = "<>()[]{}\"',;!?"


def find_website(text: str) -> Optional[str]:
    """Return the first web address mentioned in *text*, canonicalised, or None.

    A bare ``name.tld`` is accepted only when it is the whole message; within
    a sentence the address must start with a scheme or ``www.``.
    """
    tokens = text.split()
    for token in tokens:
        token = token.strip(_TOKEN_PUNCTUATION).rstrip(".")
        if "@" in token or not _WEBSITE_RE.fullmatch(token):
            continue
        if len(tokens) > 1 and not _EXPLICIT_WEBSITE_RE.match(token):
            continue
        candidate = token if re.match(r"https?://", token, re.IGNORECASE) else f"https://{token}"
        url = normalize(candidate, candidate)
        if url:
            return url
    return None


def start_conversation(
    rules: Optional[Iterable[GuidanceRule]] = None,
) -> Tuple[str, ConversationState]:
    """Return the opening prompt and a fresh session state."""
    scheduler = init_scheduler(rules if rules is not None else configured_guidance())
    state = ConversationState(profile=new_profile(), scheduler=scheduler)
    opener = next_prompt(scheduler)
    state.transcript.append(Message(role="assistant", content=opener))
    return opener, state


async def update_knowledge(
    corpus: str,
    transcript: Sequence[Message],
    llm: LLMClient,
    profile: Optional[BusinessProfile] = None,
    fields: Optional[Iterable[str]] = None,
    *,
    now: Optional[datetime] = None,
) -> Tuple[BusinessProfile, List[str]]:
    """Run the extractors over *corpus* and *transcript* and merge the results.

    Returns a new profile snapshot and the names of the fields that produced a
    value.  *profile* itself is never modified.
    """
    fragments = await extract_all(corpus, transcript, llm, fields)
    updated = merge(profile if profile is not None else new_profile(), fragments, now=now)
    return updated, [fragment.name for fragment in fragments]


def build_context(state: ConversationState, note: Optional[str] = None) -> str:
    """Describe the profile and the current topic for the chat model."""
    known = {name: value for name, value in state.profile.fields.items() if is_present(value)}
    lines = ["Current business information:", json.dumps(known, indent=2, default=str)]
    if state.profile.needs_confirmation:
        lines.append("Needs confirmation: " + ", ".join(state.profile.needs_confirmation))

    rule = current_rule(state.scheduler)
    if rule is None:
        lines.append(f"All onboarding topics are covered. Wrap up with: {WRAP_UP_PROMPT}")
    else:
        lines.extend(
            [
                f"Current focus: {rule.category}",
                "Required information: " + ", ".join(rule.required_info),
                "Missing information: " + ", ".join(state.scheduler.missing_info),
                f"Template: {rule.prompt_template}",
                "Follow-up questions: " + " | ".join(rule.follow_up_questions),
            ]
        )
    if note:
        lines.append(note)
    return "\n".join(lines)


async def _read_website(state: ConversationState, url: str, crawler: Crawler) -> str:
    """Crawl *url* into *state*; return a note for the chat model."""
    try:
        result = await crawler(url)
    except ValueError as exc:
        logger.warning("Onboarding: cannot crawl %s – %s", url, exc)
        result = CrawlResult()

    if not result.pages:
        return f"The website {url} could not be read. {SITE_UNREADABLE_REPLY}"

    state.corpus = build_corpus(result.pages)
    state.images = result.images
    return f"The website {url} was read ({len(result.pages)} page(s)); use it to confirm details."


async def _compose_reply(state: ConversationState, llm: LLMClient, note: Optional[str]) -> str:
    messages: List[ChatMessage] = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "system", "content": build_context(state, note)},
        *({"role": m.role, "content": m.content} for m in state.transcript),
    ]
    try:
        reply = (await llm.converse(messages)).strip()
    except Exception as exc:
        logger.warning("Onboarding: chat model unavailable – %s", exc)
        reply = ""

    if reply:
        return reply
    fallback = next_prompt(state.scheduler)
    if note and not state.corpus:
        return f"{SITE_UNREADABLE_REPLY} {fallback}"
    return fallback


async def _default_crawler(url: str) -> CrawlResult:
    return await crawl(url, DEFAULT_MAX_PAGES)


async def handle_turn(
    message: str,
    state: ConversationState,
    llm: LLMClient,
    *,
    crawler: Optional[Crawler] = None,
    now: Optional[datetime] = None,
) -> Tuple[str, ConversationState]:
    """Process one user message and return ``(reply, next_state)``.

    *state* is not modified.  A web address in the message is crawled once
    (until a crawl yields pages) and its text feeds every later extraction.

    Raises:
        ValueError: if *message* is empty or whitespace.
    """
    text = (message or "").strip()
    if not text:
        raise ValueError("Message must not be empty.")

    async with session_lock(state.session_id):
        next_state = state.model_copy(deep=True)
        next_state.transcript.append(Message(role="user", content=text))

        note = None
        website = find_website(text)
        detected: List[KnowledgeField] = []
        if website and not next_state.corpus:
            next_state.website_url = website
            note = await _read_website(next_state, website, crawler or _default_crawler)
            # Only an address that actually served pages is recorded in the profile
            if next_state.corpus:
                detected.append(
                    KnowledgeField(
                        name="website_url", value=website, confidence=1.0, source=Source.CONVERSATION
                    )
                )

        fragments = await extract_all(next_state.corpus, next_state.transcript, llm)
        # The address the user typed outranks a model guess on ties
        next_state.profile = merge(next_state.profile, [*fragments, *detected], now=now)
        next_state.scheduler = recompute(next_state.scheduler, next_state.profile)

        reply = await _compose_reply(next_state, llm, note)
        next_state.transcript.append(Message(role="assistant", content=reply))
        next_state.transcript = next_state.transcript[-TRANSCRIPT_WINDOW:]

    return reply, next_state.model_copy(deep=True)
