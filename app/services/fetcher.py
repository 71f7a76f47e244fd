"""Plain-HTTP page fetcher and the URL safety checks shared by every fetcher.

The crawler takes any ``async (url) -> html`` callable.  :func:`fetch_url` is
the one behind ``render_mode="http"``: no JavaScript runs, so it suits
server-rendered sites and is far cheaper than a headless browser per page.

Every URL the service is asked to load, whether a crawl seed, a discovered
link or a redirect hop, passes :func:`validate_url` first, so a website a
user names in chat cannot point the crawler at internal addresses.
"""

import ipaddress
import socket
from urllib.parse import urljoin, urlparse

import httpx

from app.config import PAGE_TIMEOUT
from app.services.normalizer import ALLOWED_SCHEMES

MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MB
MAX_REDIRECTS = 10


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "fe80::1%eth0" → "fe80::1")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def validate_url(url: str) -> None:
    """Raise ValueError unless *url* is a public http(s) address."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")

    if _is_private_address(parsed.hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


async def fetch_url(url: str) -> str:
    """Fetch *url* over plain HTTP and return the decoded body.

    Redirects are followed by hand so each hop is validated before it is
    requested.

    Raises:
        ValueError: if the URL (or a redirect target) fails validation.
        httpx.HTTPError: on network errors, timeouts and non-2xx responses.
        RuntimeError: on oversize bodies or redirect loops.
    """
    validate_url(url)

    current_url = url
    async with httpx.AsyncClient(follow_redirects=False, timeout=PAGE_TIMEOUT) as client:
        for _ in range(MAX_REDIRECTS + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    next_url = urljoin(current_url, response.headers.get("location", ""))
                    validate_url(next_url)
                    current_url = next_url
                    continue

                response.raise_for_status()

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > MAX_CONTENT_SIZE:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > MAX_CONTENT_SIZE:
                        raise RuntimeError("Response body exceeds the maximum allowed size.")

                return body.decode(response.encoding or "utf-8", errors="replace")

    raise RuntimeError("Too many redirects.")
