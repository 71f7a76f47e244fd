"""Playwright renderer: load a page once in headless Chromium, return its static DOM."""

from playwright.async_api import async_playwright

from app.config import PAGE_TIMEOUT
from app.services.fetcher import MAX_CONTENT_SIZE, validate_url

VIEWPORT = {"width": 1920, "height": 1080}


async def render_url(url: str, *, timeout_s: float = PAGE_TIMEOUT) -> str:
    """Render *url* with a headless Chromium browser and return the final HTML.

    Each call owns one browser for the duration of the render; the crawler
    calls this sequentially, so at most one render session is live per crawl.

    Raises:
        ValueError: if the URL fails validation.
        RuntimeError: on a missing or non-2xx main response, or oversize HTML.
        playwright.async_api.Error: on browser/network errors and timeouts.
    """
    validate_url(url)
    timeout_ms = timeout_s * 1000

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(
            headless=True,
            args=[
                # Required when running as root inside a container
                "--no-sandbox",
                "--disable-dev-shm-usage",
                "--disable-gpu",
            ],
        )
        context = await browser.new_context(viewport=VIEWPORT)
        page = await context.new_page()
        try:
            response = await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
            if response is None:
                raise RuntimeError(f"No response received for {url}.")
            if not 200 <= response.status < 300:
                raise RuntimeError(f"{url} returned HTTP {response.status}.")
            html = await page.content()
        finally:
            await context.close()
            await browser.close()

    if len(html.encode()) > MAX_CONTENT_SIZE:
        raise RuntimeError("Rendered HTML exceeds the maximum allowed size.")

    return html
