"""Tests for app.services.fetcher.

Address resolution is patched so no DNS lookups happen, and httpx is given
a MockTransport so no request leaves the process.
"""

import asyncio
from functools import partial
from unittest.mock import patch

import httpx
import pytest

from app.services.fetcher import fetch_url, validate_url

_INTERNAL_HOSTS = {"intranet.local", "127.0.0.1"}

_real_async_client = httpx.AsyncClient


def _is_private(hostname: str) -> bool:
    return hostname in _INTERNAL_HOSTS


def _fetch(url: str, handler):
    client = partial(_real_async_client, transport=httpx.MockTransport(handler))
    with (
        patch("app.services.fetcher._is_private_address", side_effect=_is_private),
        patch("app.services.fetcher.httpx.AsyncClient", new=client),
    ):
        return asyncio.run(fetch_url(url))


class TestValidateUrl:
    def test_public_address_passes(self):
        with patch("app.services.fetcher._is_private_address", side_effect=_is_private):
            validate_url("https://acme.com/")

    @pytest.mark.parametrize("url", ["ftp://acme.com/", "file:///etc/passwd", "javascript:alert(1)"])
    def test_non_web_scheme_is_rejected(self, url):
        with pytest.raises(ValueError):
            validate_url(url)

    def test_missing_host_is_rejected(self):
        with pytest.raises(ValueError):
            validate_url("https:///path")

    def test_internal_address_is_rejected(self):
        with patch("app.services.fetcher._is_private_address", side_effect=_is_private):
            with pytest.raises(ValueError):
                validate_url("http://intranet.local/admin")


class TestFetchUrl:
    def test_returns_body(self):
        def handler(request):
            return httpx.Response(200, html="<title>Acme</title>")

        assert _fetch("https://acme.com/", handler) == "<title>Acme</title>"

    def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/":
                return httpx.Response(301, headers={"location": "/home"})
            return httpx.Response(200, html="home")

        assert _fetch("https://acme.com/", handler) == "home"

    def test_redirect_to_internal_address_is_rejected(self):
        def handler(request):
            return httpx.Response(302, headers={"location": "http://intranet.local/"})

        with pytest.raises(ValueError):
            _fetch("https://acme.com/", handler)

    def test_error_status_raises_http_error(self):
        def handler(request):
            return httpx.Response(404)

        with pytest.raises(httpx.HTTPStatusError):
            _fetch("https://acme.com/missing", handler)

    def test_redirect_loop_is_bounded(self):
        def handler(request):
            return httpx.Response(302, headers={"location": "https://acme.com/"})

        with pytest.raises(RuntimeError):
            _fetch("https://acme.com/", handler)

    def test_oversize_body_is_rejected(self):
        def handler(request):
            return httpx.Response(200, headers={"content-length": str(20 * 1024 * 1024)}, content=b"")

        with pytest.raises(RuntimeError):
            _fetch("https://acme.com/", handler)
