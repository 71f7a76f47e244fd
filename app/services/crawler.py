"""Site crawler: bounded, same-origin breadth-first traversal from a seed URL."""

import asyncio
import logging
from collections import deque
from typing import Awaitable, Callable, Deque, Iterable, List, Optional, Set

import httpx
from playwright.async_api import Error as PlaywrightError

from app.config import DEFAULT_MAX_PAGES, MAX_CORPUS_LENGTH, MAX_PAGES_HARD_LIMIT, PAGE_TIMEOUT
from app.models.crawl_response import CrawlResult
from app.models.page import ImageRef, PageRecord
from app.services.browser_fetcher import render_url
from app.services.extractor import extract
from app.services.image_resolver import merge_images
from app.services.normalizer import normalize, origin, same_origin

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[str]]

# Failures that cost one page, never the crawl
_PAGE_ERRORS = (ValueError, httpx.HTTPError, RuntimeError, PlaywrightError)


async def crawl(
    seed_url: str,
    max_pages: int = DEFAULT_MAX_PAGES,
    *,
    fetch: Optional[Fetcher] = None,
    page_timeout: float = PAGE_TIMEOUT,
) -> CrawlResult:
    """Crawl pages sharing *seed_url*'s origin, breadth-first.

    Pages are fetched strictly one at a time with *fetch* (headless rendering
    by default).  A page that fails, times out after *page_timeout* seconds or
    returns a non-2xx status is logged and dropped; the traversal carries on
    with the rest of the frontier.  The crawl stops when the frontier is empty
    or *max_pages* records have been collected (capped at
    ``MAX_PAGES_HARD_LIMIT``).

    The origin is taken from *seed_url* as given.  ``https://acme.com`` and
    ``https://www.acme.com`` are different origins, so a seed whose pages all
    link to the ``www.`` host yields the seed page alone.

    Raises:
        ValueError: if *seed_url* is not a valid http(s) URL or *max_pages* < 1.
    """
    seed = normalize(seed_url, seed_url)
    if seed is None:
        raise ValueError(f"Invalid seed URL: {seed_url!r}")
    if max_pages < 1:
        raise ValueError("max_pages must be a positive integer.")
    max_pages = min(max_pages, MAX_PAGES_HARD_LIMIT)
    fetch = fetch or render_url
    seed_origin = origin(seed)

    frontier: Deque[str] = deque([seed])
    enqueued: Set[str] = {seed}
    visited: Set[str] = set()
    pages: List[PageRecord] = []
    images: List[ImageRef] = []

    logger.info("Crawler: starting at %s (max_pages=%d)", seed, max_pages)

    while frontier and len(pages) < max_pages:
        url = normalize(frontier.popleft(), seed)
        if url is None or url in visited:
            continue
        visited.add(url)

        try:
            html = await asyncio.wait_for(fetch(url), timeout=page_timeout)
        except asyncio.TimeoutError:
            logger.warning("Crawler: skipping %s – timed out after %.1fs", url, page_timeout)
            continue
        except _PAGE_ERRORS as exc:
            logger.warning("Crawler: skipping %s – %s", url, exc)
            continue

        record, links = extract(html, url)
        pages.append(record)
        images = merge_images(images, record.images)

        for link in links:
            if link not in enqueued and link not in visited and same_origin(link, seed_origin):
                enqueued.add(link)
                frontier.append(link)

    logger.info(
        "Crawler: finished %s – %d page(s), %d image(s)", seed, len(pages), len(images)
    )
    return CrawlResult(pages=pages, images=images)


def build_corpus(pages: Iterable[PageRecord], max_length: int = MAX_CORPUS_LENGTH) -> str:
    """Flatten crawled pages into one text block for the field extractors."""
    blocks = [
        f"URL: {page.url}\nTitle: {page.title}\nDescription: {page.description}\nContent: {page.content}"
        for page in pages
    ]
    return "\n\n".join(blocks)[:max_length]
