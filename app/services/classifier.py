"""Heuristic classification of page sections and images.

Both classifiers are pure functions over plain strings so they can be tested
without building a DOM.  Section kinds form a closed set
(:class:`~app.models.page.SectionKind`); adding a kind means adding one
entry to :data:`SECTION_VOCABULARY`, nothing else.
"""

from typing import Dict, Iterable, Tuple

from app.models.page import SectionKind

# Keywords per kind.  Dict order is the match priority: the first kind with
# any keyword in the haystack wins.
SECTION_VOCABULARY: Dict[SectionKind, Tuple[str, ...]] = {
    SectionKind.SERVICES: ("service",),
    SectionKind.PORTFOLIO: ("portfolio", "gallery"),
    SectionKind.TESTIMONIALS: ("testimonial", "review"),
    SectionKind.ABOUT: ("about",),
    SectionKind.CONTACT: ("contact",),
}

_LOGO_MARKER = "logo"


def classify_section(text: str, attributes: Iterable[str] = ()) -> SectionKind:
    """Return the kind of a container given its text and id/class values."""
    haystack = " ".join([text, *attributes]).lower()
    for kind, keywords in SECTION_VOCABULARY.items():
        if any(keyword in haystack for keyword in keywords):
            return kind
    return SectionKind.OTHER


def is_logo(alt_text: str, class_attr: str, url: str, in_header: bool) -> bool:
    """Return True when an image looks like the site's logo.

    Any of alt text, class attribute or URL containing "logo"
    (case-insensitive) is enough, as is sitting inside the page header.
    """
    if in_header:
        return True
    return any(_LOGO_MARKER in value.lower() for value in (alt_text, class_attr, url))
