"""
HTTP client for page and API fetches.

One GET per call: no retries, redirects followed, caching disabled. Any
non-2xx status, transport error or malformed URL raises ``FetchError``.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import aiohttp
import structlog

from pdpaudit.config.config import FetchConfig
from pdpaudit.exceptions import FetchError
from pdpaudit.observability import histogram, increment

logger = structlog.get_logger(__name__)


class HttpClient:
    """Shared aiohttp session with browser-like request headers."""

    def __init__(self, config: FetchConfig, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._is_initialized = session is not None

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": self.config.accept,
            "Accept-Language": self.config.accept_language,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    async def initialize(self) -> None:
        """Open the HTTP session."""
        if self.session is None:
            kwargs: Dict[str, Any] = {"headers": self.headers}
            if self.config.timeout is not None:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self.config.timeout)
            self.session = aiohttp.ClientSession(**kwargs)
            self._owns_session = True
        self._is_initialized = True
        logger.debug("HTTP client session initialized")

    async def close(self) -> None:
        """Close the HTTP session if this client opened it."""
        if self.session is not None and self._owns_session:
            await self.session.close()
        self.session = None
        self._is_initialized = False
        logger.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @staticmethod
    def _validate_url(url: str) -> None:
        parsed = urlparse(url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise FetchError(url, f"Invalid URL: {url!r}")

    async def fetch_html(self, url: str) -> str:
        """GET a page and return its decoded body."""
        self._validate_url(url)
        if self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        start_time = time.time()
        try:
            async with self.session.get(url, headers=self.headers, allow_redirects=True) as response:
                if not 200 <= response.status < 300:
                    raise FetchError(url, f"HTTP {response.status}", status=response.status)
                body = await response.text(errors="replace")
        except FetchError:
            increment("fetch_failures_total")
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, TimeoutError, UnicodeDecodeError) as e:
            increment("fetch_failures_total")
            logger.warning("Request failed", url=url, error=str(e), error_type=type(e).__name__)
            raise FetchError(url, f"{type(e).__name__}: {e}") from e

        elapsed = time.time() - start_time
        histogram("fetch_latency_seconds", elapsed)
        logger.debug("Fetched page", url=url, bytes=len(body), elapsed=round(elapsed, 3))
        return body

    async def get_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """GET a JSON API endpoint."""
        self._validate_url(url)
        if self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        try:
            async with self.session.get(
                url,
                params=dict(params or {}),
                headers={"Accept": "application/json"},
            ) as response:
                if not 200 <= response.status < 300:
                    raise FetchError(url, f"HTTP {response.status}", status=response.status)
                return await response.json(content_type=None)
        except FetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, TimeoutError, ValueError) as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e
