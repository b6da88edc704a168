"""
SerpAPI web search client used to find corroborating product listings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import structlog

from pdpaudit.config.config import ReferenceConfig
from pdpaudit.crawler.http_client import HttpClient
from pdpaudit.exceptions import FetchError, SearchError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SearchResult:
    link: str
    title: str = ""
    snippet: str = ""


class SerpApiClient:
    """Google results through SerpAPI's ``/search`` endpoint."""

    def __init__(self, config: ReferenceConfig, http_client: HttpClient) -> None:
        self.config = config
        self.http_client = http_client

    async def search(self, query: str, num: int | None = None) -> List[SearchResult]:
        """Run a text query.

        Raises:
            SearchError: no API key, HTTP failure, or an error payload.
        """
        if not self.config.api_key:
            raise SearchError("SerpAPI key is not configured")

        limit = num or self.config.num_results
        params: Dict[str, Any] = {
            "q": query,
            "api_key": self.config.api_key,
            "engine": self.config.engine,
            "num": limit,
        }

        try:
            data = await self.http_client.get_json(self.config.endpoint, params=params)
        except FetchError as e:
            raise SearchError(f"Search request failed: {e}") from e

        if not isinstance(data, dict):
            raise SearchError("Unexpected search response payload")
        if data.get("error"):
            raise SearchError(f"Search API error: {data['error']}")

        results: List[SearchResult] = []
        for entry in data.get("organic_results") or []:
            link = entry.get("link") if isinstance(entry, dict) else None
            if not link:
                continue
            results.append(
                SearchResult(
                    link=str(link),
                    title=str(entry.get("title") or ""),
                    snippet=str(entry.get("snippet") or ""),
                )
            )
            if len(results) >= limit:
                break

        logger.info("Search completed", query=query, results=len(results))
        return results
