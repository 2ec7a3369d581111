"""
Harvester integration tests with mocked API responses.

Tests ArxivHarvester and SemanticScholarHarvester.
"""

import asyncio

import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from litmind.infrastructure.harvesters import ArxivHarvester, SemanticScholarHarvester
from litmind.infrastructure.harvesters.arxiv_harvester import parse_atom_feed


ARXIV_ATOM_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <entry>
    <id>http://arxiv.org/abs/2301.12345v1</id>
    <title>Attention Is
      All You Need</title>
    <summary>We propose a new architecture called Transformer.</summary>
    <author><name>Ashish Vaswani</name></author>
    <author><name>Noam Shazeer</name></author>
    <published>2023-01-15T00:00:00Z</published>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2301.12346v2</id>
    <title>BERT: Pre-training of Deep Bidirectional Transformers</title>
    <summary>We introduce BERT for language understanding.</summary>
    <author><name>Jacob Devlin</name></author>
    <published>2023-01-16T00:00:00Z</published>
  </entry>
</feed>
"""

S2_API_RESPONSE = {
    "total": 3,
    "data": [
        {
            "paperId": "s2-paper-001",
            "title": "Deep Learning for NLP",
            "abstract": "A comprehensive study on deep learning for NLP.",
            "year": 2023,
            "authors": [{"name": "Alice Smith"}, {"name": "Bob Jones"}],
            "url": "https://www.semanticscholar.org/paper/abc123",
        },
        {
            "paperId": "s2-paper-002",
            "title": "Reinforcement Learning in Robotics",
            "abstract": None,
            "year": 2022,
            "authors": [{"name": "Charlie Brown"}, {"affiliation": "no name"}],
            "url": None,
        },
        {"paperId": "s2-paper-003", "title": ""},
    ],
}


def _mock_get(mock_session, *, status=200, text=None, json_data=None):
    mock_response = AsyncMock()
    mock_response.status = status
    if text is not None:
        mock_response.text = AsyncMock(return_value=text)
    if json_data is not None:
        mock_response.json = AsyncMock(return_value=json_data)
    mock_get = MagicMock(return_value=AsyncMock(__aenter__=AsyncMock(return_value=mock_response)))
    mock_session.return_value.get = mock_get
    return mock_get


class TestArxivHarvester:
    """Tests for ArxivHarvester."""

    @pytest.fixture
    def harvester(self):
        return ArxivHarvester(request_interval=0)

    @pytest.mark.asyncio
    async def test_search_success(self, harvester):
        """Successful search returns candidates in feed order."""
        with patch.object(harvester, "_get_session") as mock_session:
            _mock_get(mock_session, text=ARXIV_ATOM_RESPONSE)

            papers = await harvester.search("transformer", max_results=10)

        assert len(papers) == 2
        first = papers[0]
        assert first.title == "Attention Is All You Need"
        assert first.external_id == "2301.12345v1"
        assert first.url == "https://arxiv.org/abs/2301.12345v1"
        assert first.source == "arXiv"
        assert first.authors_text == "Ashish Vaswani, Noam Shazeer"
        assert papers[1].external_id == "2301.12346v2"

    @pytest.mark.asyncio
    async def test_search_builds_all_fields_query(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_get = _mock_get(mock_session, text=ARXIV_ATOM_RESPONSE)

            await harvester.search("learning network", max_results=7)

        params = mock_get.call_args[1]["params"]
        assert params["search_query"] == "all:learning network"
        assert params["max_results"] == 7

    @pytest.mark.asyncio
    async def test_search_truncates_long_query(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_get = _mock_get(mock_session, text=ARXIV_ATOM_RESPONSE)

            await harvester.search("x" * 250)

        params = mock_get.call_args[1]["params"]
        assert params["search_query"] == "all:" + "x" * 100

    @pytest.mark.asyncio
    async def test_search_respects_max_results(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            _mock_get(mock_session, text=ARXIV_ATOM_RESPONSE)

            papers = await harvester.search("transformer", max_results=1)

        assert len(papers) == 1

    @pytest.mark.asyncio
    async def test_empty_query_makes_no_request(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            papers = await harvester.search("   ")

        assert papers == []
        mock_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_recent_by_category_query(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_get = _mock_get(mock_session, text=ARXIV_ATOM_RESPONSE)

            papers = await harvester.recent_by_category(["cs.AI", "cs.LG", "cs.CV"], max_results=10)

        params = mock_get.call_args[1]["params"]
        assert params["search_query"] == "cat:cs.AI OR cat:cs.LG OR cat:cs.CV"
        assert params["sortBy"] == "submittedDate"
        assert params["sortOrder"] == "descending"
        assert len(papers) == 2

    @pytest.mark.asyncio
    async def test_api_error_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            _mock_get(mock_session, status=503)

            papers = await harvester.search("test")

        assert papers == []

    @pytest.mark.asyncio
    async def test_malformed_xml_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            _mock_get(mock_session, text="<feed><entry>")

            papers = await harvester.search("test")

        assert papers == []

    @pytest.mark.asyncio
    async def test_invalid_utf8_body_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            _mock_get(mock_session, text="")
            response = mock_session.return_value.get.return_value.__aenter__.return_value
            response.text = AsyncMock(
                side_effect=UnicodeDecodeError("utf-8", b"<feed>\xff\xfe", 6, 7, "invalid start byte")
            )

            papers = await harvester.search("graph neural")

        assert papers == []

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_session.return_value.get = MagicMock(side_effect=asyncio.TimeoutError())

            papers = await harvester.recent_by_category(["cs.AI"])

        assert papers == []

    @pytest.mark.asyncio
    async def test_connection_error_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_session.return_value.get = MagicMock(
                side_effect=aiohttp.ClientConnectionError("refused")
            )

            papers = await harvester.search("test")

        assert papers == []

    def test_timeouts_are_configured(self):
        harvester = ArxivHarvester(connect_timeout=3, read_timeout=9)
        assert harvester.timeout.sock_connect == 3
        assert harvester.timeout.sock_read == 9

    def test_source_name(self, harvester):
        assert harvester.source_name == "arxiv"

    @pytest.mark.asyncio
    async def test_close(self, harvester):
        """close() releases resources."""
        mock_session = MagicMock()
        mock_session.closed = False
        mock_session.close = AsyncMock()
        harvester._session = mock_session

        await harvester.close()

        mock_session.close.assert_called_once()
        assert harvester._session is None


def test_parse_atom_feed_without_abs_id_has_no_external_id():
    feed = """<feed xmlns="http://www.w3.org/2005/Atom">
      <entry><id>urn:something</id><title>Odd Entry</title></entry>
      <entry><id>http://arxiv.org/abs/1</id><title>   </title></entry>
    </feed>"""

    papers = parse_atom_feed(feed)

    assert len(papers) == 1
    assert papers[0].external_id is None
    assert papers[0].is_placeholder()


class TestSemanticScholarHarvester:
    """Tests for SemanticScholarHarvester."""

    @pytest.fixture
    def harvester(self):
        return SemanticScholarHarvester()

    @pytest.mark.asyncio
    async def test_search_success(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_get = _mock_get(mock_session, json_data=S2_API_RESPONSE)

            papers = await harvester.search("deep learning", max_results=10)

        params = mock_get.call_args[1]["params"]
        assert params["query"] == "deep learning"
        assert params["fields"] == "paperId,title,authors,year,url,abstract"
        assert params["limit"] == 10

        assert [p.external_id for p in papers] == ["s2-paper-001", "s2-paper-002"]
        first = papers[0]
        assert first.source == "Semantic Scholar"
        assert first.authors_text == "Alice Smith, Bob Jones"
        assert first.url == "https://www.semanticscholar.org/paper/abc123"
        assert papers[1].authors == ["Charlie Brown"]
        assert papers[1].abstract == ""
        assert papers[1].url is None

    @pytest.mark.asyncio
    async def test_api_error_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            _mock_get(mock_session, status=429, json_data={})

            papers = await harvester.search("test")

        assert papers == []

    @pytest.mark.asyncio
    async def test_missing_data_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            _mock_get(mock_session, json_data={"message": "bad query"})

            papers = await harvester.search("test")

        assert papers == []

    @pytest.mark.asyncio
    async def test_undecodable_body_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_response = AsyncMock()
            mock_response.status = 200
            mock_response.json = AsyncMock(side_effect=ValueError("not json"))
            mock_session.return_value.get = MagicMock(
                return_value=AsyncMock(__aenter__=AsyncMock(return_value=mock_response))
            )

            papers = await harvester.search("test")

        assert papers == []

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self, harvester):
        with patch.object(harvester, "_get_session") as mock_session:
            mock_session.return_value.get = MagicMock(side_effect=asyncio.TimeoutError())

            papers = await harvester.search("test")

        assert papers == []

    def test_api_key_header(self):
        harvester = SemanticScholarHarvester(api_key="secret")
        assert harvester.api_key == "secret"

    def test_source_name(self, harvester):
        assert harvester.source_name == "semantic_scholar"
