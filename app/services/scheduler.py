"""Priority scheduler: which onboarding topic to pursue next.

The scheduler is a cursor over guidance rules sorted by ascending priority.
After each knowledge merge :func:`recompute` re-derives the fields the current
rule still misses.  When none are missing the cursor moves forward to the
next rule that is not already satisfied by the profile.  When no such rule
remains the scheduler is ``completed`` and :func:`next_prompt` returns the
wrap-up prompt.  The cursor never moves backwards.
"""

import logging
from typing import Iterable, List, Optional

from app.models.guidance import GuidanceRule, SchedulerState
from app.models.knowledge import BusinessProfile
from app.services.knowledge_store import present_fields

logger = logging.getLogger(__name__)

WRAP_UP_PROMPT = (
    "Great! I think I have all the essential information about your business. "
    "Is there anything else you'd like to add or clarify?"
)


def _missing(rule: GuidanceRule, profile: Optional[BusinessProfile]) -> List[str]:
    present = set(present_fields(profile)) if profile is not None else set()
    return [name for name in rule.required_info if name not in present]


def init_scheduler(
    rules: Iterable[GuidanceRule], profile: Optional[BusinessProfile] = None
) -> SchedulerState:
    """Return a scheduler positioned on the lowest-priority rule.

    Raises:
        ValueError: if *rules* is empty or two rules share a priority.
    """
    ordered = sorted(rules, key=lambda rule: rule.priority)
    if not ordered:
        raise ValueError("At least one guidance rule is required.")
    priorities = [rule.priority for rule in ordered]
    if len(set(priorities)) != len(priorities):
        raise ValueError("Guidance rule priorities must be unique.")

    first = ordered[0]
    return SchedulerState(
        rules=ordered,
        current_priority=first.priority,
        missing_info=_missing(first, profile),
    )


def current_rule(state: SchedulerState) -> Optional[GuidanceRule]:
    """Return the rule under the cursor, or None once the scheduler is completed."""
    if state.completed:
        return None
    for rule in state.rules:
        if rule.priority == state.current_priority:
            return rule
    return None


def recompute(state: SchedulerState, profile: BusinessProfile) -> SchedulerState:
    """Return the scheduler state that follows a merge into *profile*."""
    if state.completed:
        return state.model_copy(update={"missing_info": []})

    rule = current_rule(state)
    if rule is None:
        raise ValueError(f"No guidance rule has priority {state.current_priority}.")

    missing = _missing(rule, profile)
    if missing:
        return state.model_copy(update={"missing_info": missing})

    for candidate in state.rules:
        if candidate.priority <= state.current_priority:
            continue
        candidate_missing = _missing(candidate, profile)
        if candidate_missing:
            logger.info("Scheduler: advancing from %s to %s", rule.id, candidate.id)
            return state.model_copy(
                update={"current_priority": candidate.priority, "missing_info": candidate_missing}
            )
        logger.debug("Scheduler: skipping already satisfied rule %s", candidate.id)

    logger.info("Scheduler: all guidance rules satisfied after %s", rule.id)
    return state.model_copy(update={"missing_info": [], "completed": True})


def next_prompt(state: SchedulerState) -> str:
    """Return the current rule's prompt template, or the wrap-up prompt when done."""
    rule = current_rule(state)
    if rule is None:
        return WRAP_UP_PROMPT
    return rule.prompt_template
