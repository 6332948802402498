"""Web search client (SerpAPI) returning plain-text result snippets.

Without an API key the client logs a warning once and returns no results, so
callers degrade to whatever they already know.
"""

from __future__ import annotations

import logging

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class SearchClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_results: int | None = None,
    ):
        self._api_key = api_key if api_key is not None else settings.serpapi_api_key
        self._base_url = base_url or settings.serpapi_base_url
        self._timeout = timeout or settings.search_timeout_seconds
        self._max_results = max_results or settings.search_max_results
        if not self._api_key:
            logger.warning("Search API key not configured. Searches return no results.")

    async def search(self, query: str) -> list[str]:
        if not self._api_key or not query.strip():
            return []
        params = {"api_key": self._api_key, "q": query, "engine": "google"}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            r = await client.get(self._base_url, params=params)
            r.raise_for_status()
            payload = r.json()
        snippets = [
            _snippet_text(item)
            for item in (payload.get("news_results") or [])
            + (payload.get("organic_results") or [])
        ]
        snippets = [s for s in snippets if s]
        logger.info("Search query=%r returned %d snippets", query, len(snippets))
        return snippets[: self._max_results]


def _snippet_text(item: dict) -> str:
    title = (item.get("title") or "").strip()
    snippet = (item.get("snippet") or "").strip()
    if title and snippet:
        return f"{title}. {snippet}"
    return title or snippet


_search_client: SearchClient | None = None


def get_search_client() -> SearchClient:
    global _search_client
    if _search_client is None:
        _search_client = SearchClient()
    return _search_client
