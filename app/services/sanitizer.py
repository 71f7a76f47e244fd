import re

from bs4 import BeautifulSoup, Comment

# Tags whose entire subtree is removed before any text or section extraction
# (scripting, styling, embedded frames and other non-visible content).
_REMOVE_TAGS = {
    "script",
    "style",
    "noscript",
    "iframe",
    "frame",
    "frameset",
    "object",
    "embed",
    "applet",
    "template",
    # Vector / canvas graphics produce raw coordinate/path noise in plain text
    "svg",
    "canvas",
}

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse every run of whitespace (including newlines) to one space."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize(html: str) -> BeautifulSoup:
    """Parse *html* and return the tree with non-content nodes removed.

    Attributes are left untouched: inline ``style`` declarations still carry
    background images that the extractor needs.
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()

    # HTML comments may contain conditional blocks or debugging markup
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    return soup
