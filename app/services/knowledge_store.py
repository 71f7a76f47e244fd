"""Confidence-weighted merge of extracted fragments into a business profile.

Merge policy by field shape
---------------------------
``text`` / ``number`` (scalar)
    An empty fragment never changes anything.  A non-empty fragment replaces
    the current value unless the current value carries a strictly higher
    confidence; ties go to the newer fragment.

``list``
    Union by value equality.  Existing items keep their order; unseen new
    items are appended in the order they arrive.

``map``
    Merged key by key.  A non-empty value overwrites the same key; keys the
    fragment does not mention are left alone.

For list and map fields the stored confidence is the highest seen so far.
Confidences outside [0, 1] are clamped (non-numeric ones fall back to
``DEFAULT_CONFIDENCE``) and logged; they never block a merge.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from app.models.knowledge import BusinessProfile, KnowledgeField
from app.services.fields import FIELD_CATALOG, FieldShape, is_present, shape_of

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5


def new_profile() -> BusinessProfile:
    """Return an empty profile with every catalogued field present but unset."""
    fields: Dict[str, Any] = {}
    for name, spec in FIELD_CATALOG.items():
        if spec.shape is FieldShape.LIST:
            fields[name] = []
        elif spec.shape is FieldShape.MAP:
            fields[name] = {}
        else:
            fields[name] = None
    return BusinessProfile(fields=fields)


def present_fields(profile: BusinessProfile) -> List[str]:
    """Names of the profile fields that currently hold information."""
    return [name for name, value in profile.fields.items() if is_present(value)]


def clamp_confidence(name: str, raw: Any) -> float:
    """Coerce *raw* into [0, 1], logging whenever it had to be corrected."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning(
                "Knowledge: non-numeric confidence %r for %s, using %.2f",
                raw,
                name,
                DEFAULT_CONFIDENCE,
            )
            return DEFAULT_CONFIDENCE
    else:
        value = float(raw)

    if math.isnan(value):
        logger.warning("Knowledge: NaN confidence for %s, using %.2f", name, DEFAULT_CONFIDENCE)
        return DEFAULT_CONFIDENCE
    if value < 0.0 or value > 1.0:
        clamped = min(1.0, max(0.0, value))
        logger.warning("Knowledge: clamped confidence %s for %s to %.2f", value, name, clamped)
        return clamped
    return value


def _union(existing: List[Any], incoming: Iterable[Any]) -> List[Any]:
    merged = list(existing)
    for item in incoming:
        if item not in merged:
            merged.append(item)
    return merged


def _merge_map(existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(existing)
    for key, value in incoming.items():
        if is_present(value):
            merged[key] = value
    return merged


def _merge_field(profile: BusinessProfile, fragment: KnowledgeField, confidence: float) -> bool:
    """Apply one fragment to *profile* in place; return True if it was accepted."""
    name = fragment.name
    current = profile.fields.get(name)
    shape = shape_of(name, fragment.value if fragment.value is not None else current)

    if shape is FieldShape.LIST:
        incoming = fragment.value if isinstance(fragment.value, (list, tuple)) else [fragment.value]
        profile.fields[name] = _union(current or [], incoming)
        profile.confidence[name] = max(confidence, profile.confidence.get(name, 0.0))
        return True

    if shape is FieldShape.MAP:
        if not isinstance(fragment.value, dict):
            logger.warning("Knowledge: ignoring non-mapping value for %s", name)
            return False
        profile.fields[name] = _merge_map(current or {}, fragment.value)
        profile.confidence[name] = max(confidence, profile.confidence.get(name, 0.0))
        return True

    previous = profile.confidence.get(name)
    if is_present(current) and previous is not None and previous > confidence:
        logger.debug(
            "Knowledge: kept %s (confidence %.2f > %.2f)", name, previous, confidence
        )
        return False
    profile.fields[name] = fragment.value
    profile.confidence[name] = confidence
    return True


def merge(
    profile: BusinessProfile,
    fragments: Iterable[Optional[KnowledgeField]],
    *,
    now: Optional[datetime] = None,
) -> BusinessProfile:
    """Return a new profile with *fragments* merged into *profile*.

    *profile* is not modified.  ``None`` entries (extractors that came back
    empty) and fragments without a value are skipped.  ``last_updated`` is set
    to *now* (default: the current UTC time) even when nothing changed.
    """
    merged = profile.model_copy(deep=True)

    for fragment in fragments:
        if fragment is None or not is_present(fragment.value):
            continue
        confidence = clamp_confidence(fragment.name, fragment.confidence)
        if not _merge_field(merged, fragment, confidence):
            continue

        merged.sources[fragment.name] = fragment.source
        if fragment.needs_confirmation:
            if fragment.name not in merged.needs_confirmation:
                merged.needs_confirmation.append(fragment.name)
        elif fragment.name in merged.needs_confirmation:
            merged.needs_confirmation.remove(fragment.name)

    merged.last_updated = now or datetime.now(timezone.utc)
    return merged
