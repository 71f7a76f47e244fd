from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict


class SectionKind(str, Enum):
    """Closed set of content-section kinds, in classification priority order."""

    SERVICES = "services"
    PORTFOLIO = "portfolio"
    TESTIMONIALS = "testimonials"
    ABOUT = "about"
    CONTACT = "contact"
    OTHER = "other"


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: SectionKind
    title: str
    content: str


class ImageRef(BaseModel):
    """One discovered image; identity is the canonical ``url``."""

    model_config = ConfigDict(frozen=True)

    url: str
    alt_text: str = ""
    context: str = ""
    is_logo: bool = False


class PageRecord(BaseModel):
    """Structured record of one successfully fetched page."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    description: str
    content: str  # visible text, whitespace-collapsed and length-bounded
    sections: List[Section]
    images: List[ImageRef]
