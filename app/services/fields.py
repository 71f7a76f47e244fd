"""Catalog of profile fields: their value shape and what to ask the model for.

Shapes drive both response validation in the extractors and the merge policy
in the knowledge store.
"""

from enum import Enum
from typing import Any, Dict, NamedTuple


class FieldShape(str, Enum):
    TEXT = "text"  # scalar string
    NUMBER = "number"  # scalar int/float
    LIST = "list"  # ordered list of strings
    MAP = "map"  # platform -> url


class FieldSpec(NamedTuple):
    name: str
    shape: FieldShape
    description: str


SOCIAL_PLATFORMS = ("instagram", "facebook", "linkedin", "twitter", "pinterest", "tiktok", "website")

FIELD_CATALOG: Dict[str, FieldSpec] = {
    spec.name: spec
    for spec in (
        FieldSpec("business_name", FieldShape.TEXT, "the business's trading name"),
        FieldSpec(
            "business_description",
            FieldShape.TEXT,
            "a one or two sentence description of what the business does",
        ),
        FieldSpec("location", FieldShape.TEXT, "where the business is based (city, region or country)"),
        FieldSpec(
            "service_location",
            FieldShape.TEXT,
            "where services are delivered, e.g. remote, in-person, or a service area",
        ),
        FieldSpec("years_in_business", FieldShape.NUMBER, "how many years the business has operated"),
        FieldSpec(
            "average_project_value",
            FieldShape.NUMBER,
            "the typical value of one project or booking, as a number",
        ),
        FieldSpec("website_url", FieldShape.TEXT, "the business's website address"),
        FieldSpec("booking_process", FieldShape.TEXT, "how a new client books the business"),
        FieldSpec(
            "client_communication",
            FieldShape.TEXT,
            "how the business currently communicates with clients",
        ),
        FieldSpec("services", FieldShape.LIST, "the names of the services offered"),
        FieldSpec("target_market", FieldShape.LIST, "the kinds of clients the business serves"),
        FieldSpec("pain_points", FieldShape.LIST, "problems the owner has running the business"),
        FieldSpec("goals", FieldShape.LIST, "what the owner wants to achieve"),
        FieldSpec("leads_channels", FieldShape.LIST, "how new clients reach out or find the business"),
        FieldSpec(
            "social_media",
            FieldShape.MAP,
            "social media profile URLs keyed by platform (" + ", ".join(SOCIAL_PLATFORMS) + ")",
        ),
    )
}


def shape_of(name: str, value: Any = None) -> FieldShape:
    """Return the shape of field *name*, inferring it from *value* if uncatalogued."""
    spec = FIELD_CATALOG.get(name)
    if spec is not None:
        return spec.shape
    if isinstance(value, (list, tuple)):
        return FieldShape.LIST
    if isinstance(value, dict):
        return FieldShape.MAP
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return FieldShape.NUMBER
    return FieldShape.TEXT


def is_present(value: Any) -> bool:
    """Return True when *value* carries information (non-null, non-blank, non-empty)."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set)):
        return len(value) > 0
    if isinstance(value, dict):
        return any(is_present(v) for v in value.values())
    return True
