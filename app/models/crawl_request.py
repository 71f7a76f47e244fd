from typing import Literal

from pydantic import BaseModel, Field, HttpUrl


class CrawlRequest(BaseModel):
    url: HttpUrl
    max_pages: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum number of pages to crawl (1–50).",
    )
    render_mode: Literal["browser", "http"] = "browser"
    """How each page is fetched.

    ``"browser"`` (default)
        Render with headless Chromium and extract the static DOM once loaded.

    ``"http"``
        Plain HTTP GET.  Faster, but misses client-side rendered content.
    """
