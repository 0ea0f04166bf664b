"""Tests for upstream news handlers."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from mission_control.handlers.base import BaseHandler
from mission_control.handlers.serpapi import SerpApiHandler


def create_mock_session(
    status: int = 200,
    payload: object = None,
    get_side_effect: Exception | None = None,
    json_side_effect: Exception | None = None,
) -> MagicMock:
    """Helper to create a mock aiohttp session."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload, side_effect=json_side_effect)

    session = MagicMock()
    session.closed = False
    if get_side_effect is not None:
        session.get.side_effect = get_side_effect
    else:
        session.get.return_value.__aenter__.return_value = response
        session.get.return_value.__aexit__.return_value = False
    return session


class TestSerpApiHandlerSearch:
    """Test SerpApiHandler.search()."""

    def test_handler_is_base_handler(self) -> None:
        """SerpApiHandler should implement BaseHandler."""
        assert issubclass(SerpApiHandler, BaseHandler)

    @pytest.mark.asyncio
    async def test_general_news_returns_news_results(self) -> None:
        """Should return the news_results list for general news."""
        results = [{"title": "A"}, {"title": "B"}]
        session = create_mock_session(payload={"news_results": results})

        handler = SerpApiHandler(api_key="key", session=session)
        found = await handler.search("world news", "general-news")

        assert found == results
        session.get.assert_called_once()

    @pytest.mark.asyncio
    async def test_video_returns_video_results(self) -> None:
        """Should return the video_results list for video searches."""
        results = [{"title": "Clip", "views": 1000}]
        session = create_mock_session(payload={"video_results": results})

        handler = SerpApiHandler(api_key="key", session=session)
        found = await handler.search("AI news", "video")

        assert found == results
        params = session.get.call_args[1]["params"]
        assert params["engine"] == "youtube"
        assert params["search_query"] == "AI news"
        assert params["api_key"] == "key"

    @pytest.mark.asyncio
    async def test_news_params_use_query_string_auth(self) -> None:
        """Should send the key and query as query-string parameters."""
        session = create_mock_session(payload={"news_results": []})

        handler = SerpApiHandler(api_key="secret", num_results=7, session=session)
        await handler.search("world news", "general-news")

        params = session.get.call_args[1]["params"]
        assert params["engine"] == "google"
        assert params["tbm"] == "nws"
        assert params["q"] == "world news"
        assert params["num"] == "7"
        assert params["api_key"] == "secret"
        assert "tbs" not in params

    @pytest.mark.asyncio
    async def test_news_search_restricted_to_date(self) -> None:
        """Should restrict news searches to the requested day."""
        session = create_mock_session(payload={"news_results": []})

        handler = SerpApiHandler(api_key="key", session=session)
        await handler.search("world news", "general-news", date=date(2024, 1, 5))

        params = session.get.call_args[1]["params"]
        assert params["tbs"] == "cdr:1,cd_min:01/05/2024,cd_max:01/05/2024"

    @pytest.mark.asyncio
    async def test_missing_results_key_returns_empty(self) -> None:
        """Should return an empty list when the payload has no results."""
        session = create_mock_session(payload={"search_metadata": {}})

        handler = SerpApiHandler(api_key="key", session=session)

        assert await handler.search("q", "general-news") == []

    @pytest.mark.asyncio
    async def test_unknown_kind_raises(self) -> None:
        """Should reject unsupported search kinds."""
        handler = SerpApiHandler(api_key="key", session=create_mock_session())

        with pytest.raises(ValueError):
            await handler.search("q", "podcast")


class TestSerpApiHandlerFailures:
    """Upstream failures degrade to an empty result list."""

    @pytest.mark.asyncio
    async def test_http_error_returns_empty(self) -> None:
        """Should return [] on a non-200 status."""
        session = create_mock_session(status=500, payload={"error": "boom"})

        handler = SerpApiHandler(api_key="key", session=session)

        assert await handler.search("q", "general-news") == []

    @pytest.mark.asyncio
    async def test_provider_error_payload_returns_empty(self) -> None:
        """Should return [] when the provider reports an error."""
        session = create_mock_session(payload={"error": "Invalid API key."})

        handler = SerpApiHandler(api_key="bad", session=session)

        assert await handler.search("q", "video") == []

    @pytest.mark.asyncio
    async def test_connection_error_returns_empty(self) -> None:
        """Should return [] when the connection fails."""
        session = create_mock_session(
            get_side_effect=aiohttp.ClientConnectionError("Connection refused")
        )

        handler = SerpApiHandler(api_key="key", session=session)

        assert await handler.search("q", "general-news") == []

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self) -> None:
        """Should return [] when the request times out."""
        session = create_mock_session(get_side_effect=asyncio.TimeoutError())

        handler = SerpApiHandler(api_key="key", timeout=0.1, session=session)

        assert await handler.search("q", "general-news") == []

    @pytest.mark.asyncio
    async def test_invalid_json_returns_empty(self) -> None:
        """Should return [] when the body is not valid JSON."""
        session = create_mock_session(json_side_effect=ValueError("Expecting value"))

        handler = SerpApiHandler(api_key="key", session=session)

        assert await handler.search("q", "general-news") == []

    @pytest.mark.asyncio
    async def test_non_object_payload_returns_empty(self) -> None:
        """Should return [] when the payload is not a JSON object."""
        session = create_mock_session(payload=["unexpected"])

        handler = SerpApiHandler(api_key="key", session=session)

        assert await handler.search("q", "general-news") == []

    @pytest.mark.asyncio
    async def test_missing_api_key_skips_request(self) -> None:
        """Should not call the provider without an API key."""
        session = create_mock_session(payload={"news_results": [{"title": "A"}]})

        handler = SerpApiHandler(api_key=None, session=session)

        assert await handler.search("q", "general-news") == []
        session.get.assert_not_called()


class TestSerpApiHandlerClose:
    """Test session ownership on close()."""

    @pytest.mark.asyncio
    async def test_close_does_not_close_injected_session(self) -> None:
        """Should leave a caller-provided session open."""
        session = create_mock_session()
        session.close = AsyncMock()

        handler = SerpApiHandler(api_key="key", session=session)
        await handler.close()

        session.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_without_session_is_noop(self) -> None:
        """Should allow close() before any request."""
        handler = SerpApiHandler(api_key="key")

        await handler.close()
