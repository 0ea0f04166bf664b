"""Base handler interface for upstream news providers."""

from abc import ABC, abstractmethod
from datetime import date as Date
from typing import Any

from ..models import SourceKind


class BaseHandler(ABC):
    """Abstract base class for upstream news search handlers.

    All handlers must implement the search method to retrieve raw
    result records from their provider.
    """

    @abstractmethod
    async def search(
        self,
        query: str,
        kind: SourceKind,
        date: Date | None = None,
    ) -> list[dict[str, Any]]:
        """Search the provider.

        Args:
            query: Free-text search query
            kind: Search vertical ("general-news" or "video")
            date: Optional calendar day to restrict results to

        Returns:
            List of raw provider records. Empty on any transport or
            decode failure; this method never raises for upstream errors.
        """
        pass

    async def close(self) -> None:
        """Release network resources held by the handler."""
        return None
