# src/litmind/infrastructure/harvesters/arxiv_harvester.py
"""
arXiv paper harvester.

Uses the arXiv Atom API for keyword search and for the most recent papers of
subject categories.
API documentation: https://arxiv.org/help/api
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Sequence

import aiohttp

from litmind.application.services.topic_extractor import MAX_QUERY_LENGTH
from litmind.domain.paper import PaperCandidate

logger = logging.getLogger(__name__)

_ATOM_NS = {"atom": "http://www.w3.org/2005/Atom"}
_ABS_ID_RX = re.compile(r"/abs/([^/?#]+)$")
_WS_RX = re.compile(r"\s+")


def _clean(text: Optional[str]) -> str:
    return _WS_RX.sub(" ", text or "").strip()


def parse_atom_feed(xml_text: str) -> List[PaperCandidate]:
    """
    Parse an arXiv Atom feed into candidates.

    Entries whose id is not an ``/abs/<id>`` URL keep an empty external id and
    are filtered out later as placeholders. Raises ``ET.ParseError`` on
    malformed XML.
    """
    root = ET.fromstring(xml_text)
    papers: List[PaperCandidate] = []
    for entry in root.findall("atom:entry", _ATOM_NS):
        title = _clean(entry.findtext("atom:title", default="", namespaces=_ATOM_NS))
        if not title:
            continue

        id_url = _clean(entry.findtext("atom:id", default="", namespaces=_ATOM_NS))
        match = _ABS_ID_RX.search(id_url)
        arxiv_id = match.group(1) if match else None

        authors = [
            _clean(a.findtext("atom:name", default="", namespaces=_ATOM_NS))
            for a in entry.findall("atom:author", _ATOM_NS)
        ]

        papers.append(
            PaperCandidate(
                title=title,
                source=ArxivHarvester.SOURCE_LABEL,
                external_id=arxiv_id,
                authors=[a for a in authors if a],
                url=f"https://arxiv.org/abs/{arxiv_id}" if arxiv_id else (id_url or None),
                abstract=_clean(entry.findtext("atom:summary", default="", namespaces=_ATOM_NS)),
            )
        )
    return papers


class ArxivHarvester:
    """
    arXiv harvester using the Atom API.

    API: https://export.arxiv.org/api/query
    Never raises on transport or parse failures; returns an empty list.
    """

    ARXIV_API_URL = "https://export.arxiv.org/api/query"
    SOURCE_LABEL = "arXiv"
    REQUEST_INTERVAL = 3.0  # seconds between requests

    def __init__(
        self,
        *,
        connect_timeout: float = 15.0,
        read_timeout: float = 60.0,
        request_interval: Optional[float] = None,
    ):
        self.timeout = aiohttp.ClientTimeout(sock_connect=connect_timeout, sock_read=read_timeout)
        self.request_interval = (
            self.REQUEST_INTERVAL if request_interval is None else max(0.0, request_interval)
        )
        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time: float = 0

    @property
    def source_name(self) -> str:
        return "arxiv"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout, headers={"User-Agent": "LitMind/1.0"}
            )
        return self._session

    async def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        now = time.time()
        elapsed = now - self._last_request_time
        if elapsed < self.request_interval:
            await asyncio.sleep(self.request_interval - elapsed)
        self._last_request_time = time.time()

    async def search(self, query: str, *, max_results: int = 10) -> List[PaperCandidate]:
        """Keyword search across all fields."""
        query = (query or "").strip()[:MAX_QUERY_LENGTH].strip()
        if not query:
            return []
        params = {
            "search_query": f"all:{query}",
            "start": 0,
            "max_results": max(1, max_results),
        }
        return await self._fetch(params, description=f"query: {query}")

    async def recent_by_category(
        self, categories: Sequence[str], *, max_results: int = 10
    ) -> List[PaperCandidate]:
        """Most recently submitted papers of any of ``categories``."""
        categories = [c.strip() for c in categories if c and c.strip()]
        if not categories:
            return []
        params = {
            "search_query": " OR ".join(f"cat:{c}" for c in categories),
            "sortBy": "submittedDate",
            "sortOrder": "descending",
            "start": 0,
            "max_results": max(1, max_results),
        }
        return await self._fetch(params, description=f"categories: {', '.join(categories)}")

    async def _fetch(self, params: Dict[str, Any], *, description: str) -> List[PaperCandidate]:
        try:
            await self._rate_limit()
            session = await self._get_session()

            async with session.get(self.ARXIV_API_URL, params=params) as resp:
                if resp.status != 200:
                    logger.warning(f"arXiv API returned status {resp.status} for {description}")
                    return []
                xml_text = await resp.text()

            papers = parse_atom_feed(xml_text)[: params["max_results"]]
            logger.info(f"arXiv harvester found {len(papers)} papers for {description}")
            return papers
        except asyncio.TimeoutError:
            logger.warning(f"arXiv request timed out for {description}")
            return []
        except (aiohttp.ClientError, ET.ParseError, UnicodeDecodeError) as e:
            logger.warning(f"arXiv harvester error: {e}")
            return []

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
