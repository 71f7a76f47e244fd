"""Default onboarding guidance rules and loading of custom rule files."""

import logging
import os
from pathlib import Path
from typing import List, Union

from pydantic import TypeAdapter

from app.models.guidance import GuidanceRule

logger = logging.getLogger(__name__)

DEFAULT_GUIDANCE: List[GuidanceRule] = [
    GuidanceRule(
        id="initial_greeting",
        priority=1,
        category="business",
        required_info=["business_name", "business_description"],
        prompt_template=(
            "Hi! I'm your onboarding assistant. I'll help you set up your account and "
            "tailor it to your business. To get started, could you tell me your business "
            "name and a brief description of what you do?"
        ),
        follow_up_questions=[
            "What type of services do you offer?",
            "How long have you been in business?",
        ],
    ),
    GuidanceRule(
        id="website_info",
        priority=2,
        category="business",
        required_info=["website_url"],
        prompt_template=(
            "Great to meet you! Could you share your website URL? I'll take a look and "
            "use it to set things up around your services and brand."
        ),
        follow_up_questions=[
            "If you don't have a website yet, no worries! We can set things up manually.",
        ],
    ),
    GuidanceRule(
        id="service_details",
        priority=3,
        category="service",
        required_info=["services", "average_project_value", "service_location"],
        prompt_template=(
            "Based on what I've seen so far, you offer several services. Could you confirm "
            "these are your main offerings and let me know if I missed anything?"
        ),
        follow_up_questions=[
            "What's your typical project value?",
            "Do you work with clients remotely or in-person?",
        ],
    ),
    GuidanceRule(
        id="client_management",
        priority=4,
        category="client",
        required_info=["client_communication", "booking_process", "pain_points"],
        prompt_template="How do you currently manage client communications and bookings?",
        follow_up_questions=[
            "What's your biggest challenge in managing clients?",
            "How do you currently handle client contracts and payments?",
        ],
    ),
]

_RULES_ADAPTER = TypeAdapter(List[GuidanceRule])


def load_guidance(path: Union[str, Path]) -> List[GuidanceRule]:
    """Load and validate a JSON list of guidance rules from *path*.

    Raises:
        OSError: if the file cannot be read.
        pydantic.ValidationError: if the content is not a valid rule list.
    """
    return _RULES_ADAPTER.validate_json(Path(path).read_text(encoding="utf-8"))


def configured_guidance() -> List[GuidanceRule]:
    """Rules named by ``ONBOARD_GUIDANCE_FILE``, or the defaults when unset."""
    path = os.getenv("ONBOARD_GUIDANCE_FILE")
    if not path:
        return list(DEFAULT_GUIDANCE)
    rules = load_guidance(path)
    logger.info("Loaded %d guidance rule(s) from %s", len(rules), path)
    return rules
