"""Page extraction: one rendered HTML document -> one :class:`PageRecord`."""

import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from app.config import MAX_CONTENT_LENGTH
from app.models.page import ImageRef, PageRecord, Section, SectionKind
from app.services.classifier import classify_section, is_logo
from app.services.image_resolver import merge_images
from app.services.normalizer import normalize
from app.services.sanitizer import collapse_whitespace, sanitize

_HEADINGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

# Block-level containers that are scanned for content sections
_SECTION_SELECTOR = 'section, div[class*="section"], div[id*="section"]'

# Elements that carry a responsive source set
_SRCSET_SELECTOR = "img[srcset], img[data-srcset], source[srcset], source[data-srcset]"

# url(...) inside an inline background / background-image declaration
_BACKGROUND_RE = re.compile(
    r"background(?:-image)?\s*:[^;]*?url\(\s*['\"]?([^'\")]+?)['\"]?\s*\)",
    re.IGNORECASE,
)

# Surrounding-text snippet stored with each image
_CONTEXT_MAX_CHARS = 300


def _extract_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    if title_tag:
        title = collapse_whitespace(title_tag.get_text())
        if title:
            return title
    heading = soup.find(_HEADINGS)
    if heading:
        return collapse_whitespace(heading.get_text())
    return ""


def _extract_description(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": "description"})
    if meta and meta.get("content"):
        return str(meta["content"]).strip()
    og_desc = soup.find("meta", attrs={"property": "og:description"})
    if og_desc and og_desc.get("content"):
        return str(og_desc["content"]).strip()
    return ""


def _visible_text(node) -> str:
    return collapse_whitespace(node.get_text(" "))


def _extract_content(soup: BeautifulSoup) -> str:
    body = soup.find("body") or soup
    return _visible_text(body)[:MAX_CONTENT_LENGTH]


def _attr_text(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _extract_sections(soup: BeautifulSoup) -> List[Section]:
    sections: List[Section] = []
    for node in soup.select(_SECTION_SELECTOR):
        text = _visible_text(node)
        kind = classify_section(text, (_attr_text(node, "id"), _attr_text(node, "class")))
        heading = node.find(_HEADINGS)
        title = collapse_whitespace(heading.get_text()) if heading else ""
        sections.append(Section(kind=kind, title=title or kind.value, content=text))

    if not sections:
        body = soup.find("body") or soup
        sections.append(
            Section(kind=SectionKind.OTHER, title=SectionKind.OTHER.value, content=_visible_text(body))
        )
    return sections


def _in_header(tag: Tag) -> bool:
    return (
        tag.find_parent("header") is not None
        or tag.find_parent(attrs={"role": "banner"}) is not None
    )


def _context_for(tag: Tag) -> str:
    parent = tag.parent if isinstance(tag.parent, Tag) else None
    if parent is None:
        return ""
    return _visible_text(parent)[:_CONTEXT_MAX_CHARS]


def _first_srcset_candidate(srcset: str) -> str:
    first = srcset.split(",")[0].strip()
    return first.split()[0] if first else ""


def _image_ref(tag: Tag, raw_url: str, page_url: str, alt_text: str, context: str) -> Optional[ImageRef]:
    url = normalize(raw_url, page_url)
    if url is None:
        return None
    return ImageRef(
        url=url,
        alt_text=alt_text,
        context=context,
        is_logo=is_logo(alt_text, _attr_text(tag, "class"), url, _in_header(tag)),
    )


def _extract_images(soup: BeautifulSoup, page_url: str) -> List[ImageRef]:
    found: List[ImageRef] = []

    for img in soup.find_all("img"):
        src = img.get("src") or img.get("data-src") or img.get("data-lazy-src")
        if src:
            ref = _image_ref(img, str(src), page_url, _attr_text(img, "alt").strip(), _context_for(img))
            if ref:
                found.append(ref)

    for tag in soup.select(_SRCSET_SELECTOR):
        srcset = _attr_text(tag, "srcset") or _attr_text(tag, "data-srcset")
        candidate = _first_srcset_candidate(srcset)
        if candidate:
            # <source> has no alt of its own; borrow the sibling <img>'s
            alt_holder = tag if tag.name == "img" else (tag.parent.find("img") if tag.parent else None)
            alt_text = _attr_text(alt_holder, "alt").strip() if alt_holder else ""
            ref = _image_ref(tag, candidate, page_url, alt_text, _context_for(tag))
            if ref:
                found.append(ref)

    for tag in soup.find_all(style=_BACKGROUND_RE):
        # A background image's own element is its context
        context = _visible_text(tag)[:_CONTEXT_MAX_CHARS]
        for raw in _BACKGROUND_RE.findall(_attr_text(tag, "style")):
            ref = _image_ref(tag, raw.strip(), page_url, "", context)
            if ref:
                found.append(ref)

    # Collapse in-page repeats (e.g. src and first srcset candidate are the same file)
    return merge_images([], found)


def _extract_links(soup: BeautifulSoup, page_url: str) -> List[str]:
    seen: set = set()
    links: List[str] = []
    for a in soup.find_all("a", href=True):
        url = normalize(str(a["href"]), page_url)
        if url and url not in seen:
            seen.add(url)
            links.append(url)
    return links


def extract(html: str, url: str) -> Tuple[PageRecord, List[str]]:
    """Extract the page record of *html* plus its canonical outbound links.

    Order matters: non-content nodes are stripped first, so title, text,
    sections and images all see the same cleaned tree.
    """
    soup = sanitize(html)
    record = PageRecord(
        url=url,
        title=_extract_title(soup),
        description=_extract_description(soup),
        content=_extract_content(soup),
        sections=_extract_sections(soup),
        images=_extract_images(soup, url),
    )
    return record, _extract_links(soup, url)


def extract_page(html: str, url: str) -> PageRecord:
    """Return the structured :class:`PageRecord` for one rendered page."""
    record, _links = extract(html, url)
    return record
