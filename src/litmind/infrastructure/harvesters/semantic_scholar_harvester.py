# src/litmind/infrastructure/harvesters/semantic_scholar_harvester.py
"""
Semantic Scholar paper harvester.

Uses the Semantic Scholar Academic Graph API for keyword search.
API documentation: https://api.semanticscholar.org/api-docs/
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from litmind.application.services.topic_extractor import MAX_QUERY_LENGTH
from litmind.domain.paper import PaperCandidate

logger = logging.getLogger(__name__)


class SemanticScholarHarvester:
    """
    Semantic Scholar harvester.

    API: https://api.semanticscholar.org/graph/v1/paper/search
    Rate limit: 100 req/min (with API key), 5000/day without key
    Never raises on transport or parse failures; returns an empty list.
    """

    SEARCH_URL = "https://api.semanticscholar.org/graph/v1/paper/search"
    SOURCE_LABEL = "Semantic Scholar"
    FIELDS = ["paperId", "title", "authors", "year", "url", "abstract"]

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        connect_timeout: float = 15.0,
        read_timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(sock_connect=connect_timeout, sock_read=read_timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def source_name(self) -> str:
        return "semantic_scholar"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"User-Agent": "LitMind/1.0"}
            if self.api_key:
                headers["x-api-key"] = self.api_key
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=headers)
        return self._session

    async def search(self, query: str, *, max_results: int = 10) -> List[PaperCandidate]:
        """Search Semantic Scholar API."""
        query = (query or "").strip()[:MAX_QUERY_LENGTH].strip()
        if not query:
            return []
        params = {
            "query": query,
            "limit": min(max(1, max_results), 100),  # S2 limit per request
            "fields": ",".join(self.FIELDS),
        }

        try:
            session = await self._get_session()
            async with session.get(self.SEARCH_URL, params=params) as resp:
                if resp.status != 200:
                    logger.warning(f"Semantic Scholar API returned status {resp.status}")
                    return []
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError:
            logger.warning(f"Semantic Scholar request timed out for query: {query}")
            return []
        except (aiohttp.ClientError, ValueError) as e:
            logger.warning(f"Semantic Scholar harvester error: {e}")
            return []

        items = data.get("data") if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.warning("Semantic Scholar response has no 'data' list")
            return []

        papers = [p for p in (self._to_paper(item) for item in items) if p is not None]
        logger.info(f"Semantic Scholar harvester found {len(papers)} papers for query: {query}")
        return papers[: params["limit"]]

    def _to_paper(self, data: Any) -> Optional[PaperCandidate]:
        """Convert one S2 result object; malformed entries are skipped."""
        if not isinstance(data, dict):
            return None
        title = str(data.get("title") or "").strip()
        if not title:
            return None

        authors: List[str] = []
        for author in data.get("authors") or []:
            if isinstance(author, dict) and author.get("name"):
                authors.append(str(author["name"]))

        paper_id = data.get("paperId")
        return PaperCandidate(
            title=title,
            source=self.SOURCE_LABEL,
            external_id=str(paper_id) if paper_id else None,
            authors=authors,
            url=data.get("url") or None,
            abstract=data.get("abstract") or "",
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
