import logging

from fastapi import APIRouter, HTTPException, Request

from app.models.crawl_request import CrawlRequest
from app.models.crawl_response import CrawlResponse
from app.routers.dependencies import limiter
from app.services.browser_fetcher import render_url
from app.services.crawler import build_corpus, crawl
from app.services.fetcher import fetch_url, validate_url

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/crawl",
    response_model=CrawlResponse,
    summary="Crawl a business website",
    description=(
        "Breadth-first crawl of pages sharing the origin of *url*, up to "
        "`max_pages` pages.  Returns one structured record per page, the "
        "deduplicated image catalog and a text corpus for knowledge extraction.  "
        "Pages that fail to load are skipped.\n\n"
        "The origin is the scheme, host and port of *url* exactly as sent: "
        "`https://acme.com` does not follow links to `https://www.acme.com`. "
        "Pass the host the site actually serves from."
    ),
)
@limiter.limit("5/minute")
async def crawl_endpoint(request: Request, body: CrawlRequest) -> CrawlResponse:
    url = str(body.url)
    logger.info(
        "Crawl request received",
        extra={"url": url, "max_pages": body.max_pages, "render_mode": body.render_mode},
    )

    try:
        validate_url(url)
        fetch = render_url if body.render_mode == "browser" else fetch_url
        result = await crawl(url, max_pages=body.max_pages, fetch=fetch)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))

    return CrawlResponse(
        start_url=url,
        pages_crawled=len(result.pages),
        pages=result.pages,
        images=result.images,
        corpus=build_corpus(result.pages),
    )
