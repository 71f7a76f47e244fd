from typing import List

from pydantic import BaseModel

from app.models.page import ImageRef, PageRecord


class CrawlResult(BaseModel):
    """Pages and the deduplicated image catalog produced by one crawl."""

    pages: List[PageRecord] = []
    images: List[ImageRef] = []


class CrawlResponse(BaseModel):
    start_url: str
    pages_crawled: int
    pages: List[PageRecord]
    images: List[ImageRef]
    corpus: str
