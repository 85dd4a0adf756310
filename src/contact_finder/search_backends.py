"""Search backend implementations and query builder."""

from __future__ import annotations

import logging
from typing import Any

from bs4 import BeautifulSoup
from requests import Response, Session
from requests.exceptions import RequestException

from .errors import RateLimitError
from .models import OrganicResult, SearchResponse

SERPER_URL = "https://google.serper.dev/search"
SERPAPI_URL = "https://serpapi.com/search.json"
DUCKDUCKGO_URLS = ("https://html.duckduckgo.com/html/", "https://duckduckgo.com/html/")


def build_queries(business_name: str, location: str | None = None) -> list[str]:
    """Build the decision-maker queries for one business."""
    context = f" {location.strip()}" if location and location.strip() else ""
    return [
        f"who are the founders of {business_name}{context}",
        f"{business_name}{context} CEO founder",
        f"{business_name}{context} marketing manager operations manager",
    ]


def _organic(items: Any) -> tuple[OrganicResult, ...]:
    if not isinstance(items, list):
        return ()
    output: list[OrganicResult] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        output.append(
            OrganicResult(
                title=str(item.get("title") or ""),
                snippet=str(item.get("snippet") or ""),
            )
        )
    return tuple(output)


def _description(panel: Any) -> str | None:
    if isinstance(panel, dict) and isinstance(panel.get("description"), str):
        return panel["description"]
    return None


class FallbackSearchBackend:
    """Serper -> SerpApi -> DuckDuckGo fallback search backend.

    A backend that fails or returns nothing hands over to the next one. When
    nothing came back and at least one backend answered HTTP 429 the call
    raises RateLimitError so the caller can stop its query loop.
    """

    def __init__(
        self,
        session: Session,
        *,
        user_agent: str,
        timeout: float,
        serper_key: str | None,
        serpapi_key: str | None,
        logger: logging.Logger,
        use_duckduckgo: bool = True,
    ) -> None:
        self._session = session
        self._user_agent = user_agent
        self._timeout = timeout
        self._serper_key = serper_key
        self._serpapi_key = serpapi_key
        self._use_duckduckgo = use_duckduckgo
        self._logger = logger

    def search(self, query: str, num: int) -> SearchResponse:
        throttled: list[str] = []
        response: SearchResponse | None = None
        if self._serper_key:
            response = self._search_serper(query, num, throttled)
        if not response and self._serpapi_key:
            response = self._search_serpapi(query, num, throttled)
        if not response and self._use_duckduckgo:
            response = self._search_duckduckgo(query, num, throttled)
        if response:
            return response
        if throttled:
            raise RateLimitError(f"Search rate limited by {', '.join(throttled)}")
        return SearchResponse()

    def _throttled(self, response: Response, backend: str, throttled: list[str]) -> bool:
        if response.status_code != 429:
            return False
        self._logger.warning("%s search rate limited (HTTP 429)", backend)
        throttled.append(backend)
        return True

    def _search_serper(self, query: str, num: int, throttled: list[str]) -> SearchResponse | None:
        try:
            response = self._session.post(
                SERPER_URL,
                json={"q": query, "num": num},
                headers={"X-API-KEY": self._serper_key, "Content-Type": "application/json"},
                timeout=self._timeout,
            )
            if self._throttled(response, "Serper", throttled):
                return None
            response.raise_for_status()
            payload = response.json()
        except (RequestException, ValueError) as exc:
            self._logger.warning("Serper search failed: %s", exc)
            return None
        if not isinstance(payload, dict):
            return None

        organic = _organic(payload.get("organic"))
        description = _description(payload.get("knowledgeGraph"))
        if not organic and description is None:
            return None
        return SearchResponse(organic_results=organic[:num], knowledge_panel_description=description)

    def _search_serpapi(self, query: str, num: int, throttled: list[str]) -> SearchResponse | None:
        try:
            response = self._session.get(
                SERPAPI_URL,
                params={"q": query, "engine": "google", "num": num, "api_key": self._serpapi_key},
                timeout=self._timeout,
            )
            if self._throttled(response, "SerpApi", throttled):
                return None
            response.raise_for_status()
            payload = response.json()
        except (RequestException, ValueError) as exc:
            self._logger.warning("SerpApi search failed: %s", exc)
            return None
        if not isinstance(payload, dict):
            return None

        organic = _organic(payload.get("organic_results"))
        description = _description(payload.get("knowledge_graph"))
        if not organic and description is None:
            return None
        return SearchResponse(organic_results=organic[:num], knowledge_panel_description=description)

    def _search_duckduckgo(self, query: str, num: int, throttled: list[str]) -> SearchResponse | None:
        headers = {"User-Agent": self._user_agent}
        for base in DUCKDUCKGO_URLS:
            try:
                response = self._session.get(
                    base,
                    params={"q": query},
                    headers=headers,
                    timeout=self._timeout,
                )
            except RequestException as exc:
                self._logger.debug("DuckDuckGo search failed: %s", exc)
                continue
            if self._throttled(response, "DuckDuckGo", throttled) or response.status_code != 200:
                continue
            results: list[OrganicResult] = []
            soup = BeautifulSoup(response.text, "html.parser")
            for block in soup.select("div.result"):
                title = block.select_one("a.result__a")
                snippet = block.select_one(".result__snippet")
                if title is None and snippet is None:
                    continue
                results.append(
                    OrganicResult(
                        title=title.get_text(" ", strip=True) if title else "",
                        snippet=snippet.get_text(" ", strip=True) if snippet else "",
                    )
                )
                if len(results) >= num:
                    break
            if results:
                return SearchResponse(organic_results=tuple(results))
        return None
