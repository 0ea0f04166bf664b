"""SerpApi handler for Google News and YouTube searches."""

import asyncio
import logging
from datetime import date as Date
from typing import Any

import aiohttp

from ..models import SourceKind, UpstreamUnavailableError
from .base import BaseHandler

logger = logging.getLogger(__name__)


class SerpApiHandler(BaseHandler):
    """Handler for searching news and videos through SerpApi.

    General news goes to the Google News vertical, videos go to the
    YouTube engine. Authentication is the api_key query parameter.

    Attributes:
        api_key: SerpApi key
        base_url: SerpApi search endpoint
        timeout: Total timeout in seconds for each request
    """

    BASE_URL = "https://serpapi.com/search.json"
    REQUEST_TIMEOUT = 10.0
    DEFAULT_NUM_RESULTS = 10

    RESULT_KEYS: dict[str, str] = {
        "general-news": "news_results",
        "video": "video_results",
    }

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout: float | None = None,
        num_results: int | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize SerpApiHandler.

        Args:
            api_key: SerpApi key; searches return no results when missing
            base_url: Endpoint override (defaults to BASE_URL)
            timeout: Per-request timeout in seconds
            num_results: Number of results requested from news searches
            session: Existing aiohttp session to reuse (not closed by close())
        """
        self._api_key = api_key
        self._base_url = base_url or self.BASE_URL
        self._timeout = timeout if timeout is not None else self.REQUEST_TIMEOUT
        self._num_results = num_results or self.DEFAULT_NUM_RESULTS
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def search(
        self,
        query: str,
        kind: SourceKind,
        date: Date | None = None,
    ) -> list[dict[str, Any]]:
        """Search SerpApi and return the raw result records.

        Args:
            query: Free-text search query
            kind: "general-news" or "video"
            date: Optional calendar day (news searches only)

        Returns:
            Raw result records, or an empty list when the provider is
            unreachable, times out, or answers with an error.

        Raises:
            ValueError: If kind is not a supported search vertical
        """
        if kind not in self.RESULT_KEYS:
            raise ValueError(f"Unsupported source kind: {kind}")

        if not self._api_key:
            logger.warning("SERPAPI_API_KEY is not set; skipping %s search %r", kind, query)
            return []

        try:
            return await self._request(query, kind, date)
        except UpstreamUnavailableError as e:
            logger.warning("Upstream %s search %r failed: %s", kind, query, e.message)
            return []

    async def _request(
        self,
        query: str,
        kind: SourceKind,
        date: Date | None,
    ) -> list[dict[str, Any]]:
        """Issue one request and extract the result list.

        Raises:
            UpstreamUnavailableError: On transport, status, or decode failure
        """
        params = self._build_params(query, kind, date)
        session = await self._get_session()

        try:
            async with session.get(
                self._base_url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as response:
                if response.status != 200:
                    raise UpstreamUnavailableError(
                        kind=kind,
                        message=f"SerpApi returned HTTP {response.status}",
                    )
                data = await response.json(content_type=None)
        except UpstreamUnavailableError:
            raise
        except asyncio.TimeoutError as e:
            raise UpstreamUnavailableError(
                kind=kind,
                message=f"SerpApi request timed out after {self._timeout}s",
            ) from e
        except (aiohttp.ClientError, ValueError) as e:
            raise UpstreamUnavailableError(kind=kind, message=str(e)) from e

        return self._parse_response(data, kind)

    def _build_params(
        self,
        query: str,
        kind: SourceKind,
        date: Date | None,
    ) -> dict[str, str]:
        """Build query parameters for SerpApi.

        Args:
            query: Free-text search query
            kind: Search vertical
            date: Optional calendar day to restrict news results to

        Returns:
            Dictionary of query parameters
        """
        if kind == "video":
            return {
                "engine": "youtube",
                "search_query": query,
                "api_key": self._api_key or "",
            }

        params = {
            "engine": "google",
            "tbm": "nws",
            "q": query,
            "num": str(self._num_results),
            "api_key": self._api_key or "",
        }
        if date is not None:
            day = date.strftime("%m/%d/%Y")
            params["tbs"] = f"cdr:1,cd_min:{day},cd_max:{day}"
        return params

    def _parse_response(self, data: Any, kind: SourceKind) -> list[dict[str, Any]]:
        """Extract the result records from a SerpApi payload.

        Args:
            data: Decoded JSON payload
            kind: Search vertical the payload belongs to

        Returns:
            List of result records (empty when the payload has none)

        Raises:
            UpstreamUnavailableError: If the payload carries a provider error
        """
        if not isinstance(data, dict):
            raise UpstreamUnavailableError(kind=kind, message="Unexpected SerpApi payload")

        if data.get("error"):
            raise UpstreamUnavailableError(kind=kind, message=str(data["error"]))

        results = data.get(self.RESULT_KEYS[kind], [])
        if not isinstance(results, list):
            return []
        return [result for result in results if isinstance(result, dict)]
