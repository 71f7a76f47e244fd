"""URL canonicalisation: turn raw hyperlink strings into comparable absolute URLs."""

from typing import Optional
from urllib.parse import urljoin, urlparse

ALLOWED_SCHEMES = {"http", "https"}

# Hyperlink prefixes that never point at a fetchable page
_REJECTED_PREFIXES = ("#", "javascript:", "mailto:")


def normalize(raw: str, base: str) -> Optional[str]:
    """Return the canonical form of *raw* resolved against *base*, or *None*.

    * empty strings, fragment-only links, ``javascript:`` and ``mailto:``
      links are rejected;
    * protocol-relative links (``//host/path``) are assumed to be ``https``;
    * relative links are resolved against *base*;
    * the fragment is dropped, scheme and host are lowercased and an empty
      path becomes ``/``.

    Anything that does not end up as an ``http``/``https`` URL with a host is
    rejected.  Normalising an already-canonical URL returns it unchanged.
    """
    if raw is None:
        return None
    candidate = str(raw).strip()
    if not candidate or candidate.lower().startswith(_REJECTED_PREFIXES):
        return None

    if candidate.startswith("//"):
        candidate = f"https:{candidate}"

    try:
        parsed = urlparse(urljoin(base, candidate))
    except ValueError:
        # urlparse raises on malformed IPv6 hosts, e.g. "http://[::1"
        return None

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
        return None

    return parsed._replace(
        scheme=parsed.scheme.lower(),
        netloc=parsed.netloc.lower(),
        path=parsed.path or "/",
        fragment="",
    ).geturl()


def origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for *url*."""
    parsed = urlparse(url)
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"


def same_origin(url: str, origin_: str) -> bool:
    """Return True when *url* shares *origin_* (scheme, host and port)."""
    return origin(url) == origin_
