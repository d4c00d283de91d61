"""Wires store, cache, client, cycle and scheduler from settings.

Shared by the API process (app.py) and the headless worker (worker.py).
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from config import Settings
from services.cache import CollectionCache
from services.hotlist_client import HotlistClient
from services.ingestion import IngestionCycle
from services.merger import Collection, merge_unique
from services.normalizer import RecordNormalizer
from services.scheduler import RecurringTask
from services.store import JsonFileStore

logger = logging.getLogger(__name__)


@dataclass
class HotlistServices:
    settings: Settings
    store: JsonFileStore
    cache: CollectionCache | None
    cycle: IngestionCycle
    scheduler: RecurringTask

    async def current_collection(self) -> Collection:
        """Latest collection: the cache snapshot, or a fresh file load without a cache."""
        if self.cache is not None:
            return self.cache.snapshot()
        return await asyncio.to_thread(self.store.read)

    async def start(self, run_scheduler: bool = True) -> None:
        if self.cache is not None:
            loaded = await asyncio.to_thread(self.store.read)
            # Files written without a cache are in append order
            self.cache.swap(merge_unique((), loaded, sort_desc=True))
            logger.info("Loaded %d records into cache from %s", len(self.cache), self.store.path)
        if run_scheduler:
            self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()


def build_services(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
    use_cache: bool | None = None,
) -> HotlistServices:
    """Build the service graph. ``use_cache`` overrides the READ_MODE setting."""
    if use_cache is None:
        use_cache = settings.cache_enabled

    store = JsonFileStore(settings.data_file, atomic=settings.atomic_writes)
    cache = CollectionCache() if use_cache else None
    client = HotlistClient(
        settings.hotlist_url,
        page=settings.hotlist_page,
        limit=settings.hotlist_limit,
        timeout=settings.hotlist_timeout_seconds,
        transport=transport,
    )
    cycle = IngestionCycle(client, store, RecordNormalizer(settings.source_timezone), cache=cache)
    scheduler = RecurringTask(cycle.run, settings.poll_interval_seconds, name="hotlist-ingestion")
    return HotlistServices(settings=settings, store=store, cache=cache, cycle=cycle, scheduler=scheduler)
