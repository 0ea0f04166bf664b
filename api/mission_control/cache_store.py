"""Date-keyed news cache for Mission Control.

This module provides a JSON-file cache of aggregated news responses keyed
by calendar date. The whole date -> response mapping is read and written
as a single snapshot.
"""

import asyncio
import json
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from datetime import date as Date
from pathlib import Path
from typing import Any, AsyncIterator

from .aggregator import NewsAggregator
from .models import AggregatedNewsResponse, CachePersistError, CacheReadError

logger = logging.getLogger(__name__)


class NewsCacheStore:
    """Serves cached news per date and refreshes it through the aggregator.

    Refreshes of the same date are serialized so concurrent cache misses
    trigger a single aggregation, and snapshot writes are serialized so
    refreshes of different dates never drop each other's entries.
    """

    def __init__(self, path: str | Path, aggregator: NewsAggregator) -> None:
        """Initialize NewsCacheStore.

        Args:
            path: Location of the JSON snapshot file
            aggregator: Aggregator used on cache miss or forced refresh
        """
        self._path = Path(path)
        self._aggregator = aggregator
        self._key_locks: dict[str, asyncio.Lock] = {}
        self._key_users: dict[str, int] = {}
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def get_news(
        self,
        date: Date,
        force_refresh: bool = False,
    ) -> AggregatedNewsResponse:
        """Return the news for a date, from cache unless forced.

        Args:
            date: Calendar day used as the cache key
            force_refresh: If True, bypass the cache and re-aggregate

        Returns:
            AggregatedNewsResponse for the date

        Raises:
            CachePersistError: If the refreshed snapshot cannot be written
        """
        key = date.isoformat()

        if not force_refresh:
            cached = await self._lookup(key)
            if cached is not None:
                logger.info("News cache hit for %s", key)
                return cached

        async with self._key_lock(key):
            # Another request may have refreshed this date while we waited
            if not force_refresh:
                cached = await self._lookup(key)
                if cached is not None:
                    logger.info("News cache hit for %s", key)
                    return cached

            logger.info(
                "News cache %s for %s; aggregating",
                "refresh" if force_refresh else "miss",
                key,
            )
            response = await self._aggregator.aggregate(date)
            await self._store(key, response)

        return response

    async def load(self) -> dict[str, Any]:
        """Read the whole snapshot.

        Returns:
            The date -> response mapping, or an empty dict when the file
            is absent, unreadable, or not a JSON object.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._read_snapshot)
        except CacheReadError as e:
            logger.warning("Treating news cache as empty: %s", e)
            return {}

    async def _lookup(self, key: str) -> AggregatedNewsResponse | None:
        snapshot = await self.load()
        entry = snapshot.get(key)
        if entry is None:
            return None
        if not isinstance(entry, dict):
            logger.warning("Ignoring malformed news cache entry for %s", key)
            return None
        try:
            return AggregatedNewsResponse.from_dict(entry)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Ignoring malformed news cache entry for %s: %s", key, e)
            return None

    async def _store(self, key: str, response: AggregatedNewsResponse) -> None:
        loop = asyncio.get_running_loop()
        async with self._write_lock:
            snapshot = await self.load()
            snapshot[key] = response.to_dict()
            await loop.run_in_executor(None, self._write_snapshot, snapshot)

    @asynccontextmanager
    async def _key_lock(self, key: str) -> AsyncIterator[None]:
        """Hold the refresh lock for one date.

        Locks are dropped once no request holds or awaits them.
        """
        lock = self._key_locks.setdefault(key, asyncio.Lock())
        self._key_users[key] = self._key_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._key_users[key] -= 1
            if not self._key_users[key]:
                del self._key_users[key]
                del self._key_locks[key]

    def _read_snapshot(self) -> dict[str, Any]:
        """Read and decode the snapshot file.

        Raises:
            CacheReadError: If the file is missing, unreadable, or invalid
        """
        try:
            content = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(f"cannot read {self._path}: {e}") from e

        try:
            data = json.loads(content)
        except ValueError as e:
            raise CacheReadError(f"invalid JSON in {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise CacheReadError(f"{self._path} does not hold a JSON object")
        return data

    def _write_snapshot(self, snapshot: dict[str, Any]) -> None:
        """Write the snapshot atomically (temp file + rename).

        Raises:
            CachePersistError: If the file cannot be written
        """
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(snapshot, tmp, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CachePersistError(f"cannot write {self._path}: {e}") from e
