"""
Dataset retrieval and the per-process record cache.

A dataset is fetched, decoded and parsed at most once per key. Concurrent
callers for a key that is still loading await the same task instead of
fetching again. Failed loads are not cached, so asking again retries.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import httpx

from .config import Settings
from .csvtext import parse_csv, rows_to_records
from .decoding import decode_csv_bytes
from .errors import LoadFailure
from .models import Record

logger = logging.getLogger(__name__)


class DatasetFetcher(Protocol):
    async def fetch(self, path: str) -> bytes:
        ...


class HttpDatasetFetcher:
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.transport = transport

    async def fetch(self, path: str) -> bytes:
        url = self.base_url + path.lstrip("/")
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                res = await client.get(url)
        except httpx.HTTPError as e:
            raise LoadFailure(f"Could not load the CSV file. ({e.__class__.__name__}: {e})") from e

        if not res.is_success:
            raise LoadFailure(
                f"Could not load the CSV file. (HTTP {res.status_code})",
                status_code=res.status_code,
            )
        return res.content


class LocalDatasetFetcher:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    async def fetch(self, path: str) -> bytes:
        target = self.root / path
        try:
            return await asyncio.to_thread(target.read_bytes)
        except OSError as e:
            raise LoadFailure(f"Could not load the CSV file. ({target}: {e.strerror})") from e


def fetcher_for(settings: Settings) -> DatasetFetcher:
    if settings.is_remote:
        return HttpDatasetFetcher(settings.source)
    return LocalDatasetFetcher(settings.source)


def load_records(raw: bytes) -> List[Record]:
    return rows_to_records(parse_csv(decode_csv_bytes(raw)))


class DatasetCache:
    def __init__(self, settings: Settings, fetcher: DatasetFetcher):
        self.settings = settings
        self.fetcher = fetcher
        self._records: Dict[str, List[Record]] = {}
        self._pending: Dict[str, asyncio.Future] = {}

    def is_loaded(self, key: str) -> bool:
        return key in self._records

    def peek(self, key: str) -> Optional[List[Record]]:
        return self._records.get(key)

    async def get_or_load(self, key: str) -> List[Record]:
        if key in self._records:
            logger.debug("dataset %s served from cache", key)
            return self._records[key]

        pending = self._pending.get(key)
        if pending is None:
            if key not in self.settings.datasets:
                raise LoadFailure(f"No data file is configured for dataset '{key}'.")
            # Registered before the first await so concurrent callers join it
            pending = asyncio.ensure_future(self._load(key))
            self._pending[key] = pending
        else:
            logger.debug("dataset %s already loading, waiting", key)

        return await asyncio.shield(pending)

    async def _load(self, key: str) -> List[Record]:
        path = self.settings.datasets[key].path
        try:
            raw = await self.fetcher.fetch(path)
            records = load_records(raw)
        except LoadFailure as e:
            logger.warning("loading dataset %s from %s failed: %s", key, path, e.message)
            raise
        finally:
            self._pending.pop(key, None)

        self._records[key] = records
        logger.info("loaded dataset %s from %s: %d records", key, path, len(records))
        return records
