"""News Aggregator orchestration module.

This module provides the NewsAggregator class for concurrent fetching of
the three news buckets with per-bucket graceful degradation.
"""

import asyncio
import logging
import random
from datetime import date as Date
from typing import Sequence

from .config import MAX_ITEMS_PER_BUCKET, build_bucket_queries
from .handlers.base import BaseHandler
from .models import AggregatedNewsResponse, BucketQuery, NewsItem
from .normalizer import normalize_results

logger = logging.getLogger(__name__)


class NewsAggregator:
    """Fans out one search per bucket and assembles the combined response.

    A failing upstream call degrades to an empty bucket (the handler
    returns no results), so the other buckets are unaffected.
    """

    def __init__(
        self,
        handler: BaseHandler,
        queries: Sequence[BucketQuery] | None = None,
        max_items: int = MAX_ITEMS_PER_BUCKET,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize NewsAggregator.

        Args:
            handler: Upstream search handler
            queries: One BucketQuery per bucket (defaults from configuration)
            max_items: Maximum items per bucket
            rng: Jitter source passed to the normalizer
        """
        self._handler = handler
        self._queries = tuple(queries) if queries is not None else build_bucket_queries()
        self._max_items = max_items
        self._rng = rng

    async def aggregate(self, date: Date | None = None) -> AggregatedNewsResponse:
        """Fetch and normalize all buckets concurrently.

        Args:
            date: Calendar day the news is requested for

        Returns:
            AggregatedNewsResponse with all three buckets present
        """
        results = await asyncio.gather(
            *(self._run_pipeline(query, date) for query in self._queries)
        )

        response = AggregatedNewsResponse()
        for query, items in zip(self._queries, results):
            response.bucket(query.bucket).extend(items)

        logger.info(
            "Aggregated news for %s: global=%d tech=%d ai=%d",
            date.isoformat() if date else "today",
            len(response.global_),
            len(response.tech),
            len(response.ai),
        )
        return response

    async def _run_pipeline(self, query: BucketQuery, date: Date | None) -> list[NewsItem]:
        """Fetch and normalize a single bucket."""
        raw_results = await self._handler.search(query.query, query.kind, date=date)
        return normalize_results(
            raw_results,
            query.categories,
            self._max_items,
            rng=self._rng,
        )
