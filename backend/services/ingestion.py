"""One ingestion round: fetch → normalize → merge → (cache swap) → persist."""

import asyncio
import logging
from dataclasses import asdict, dataclass

from services.cache import CollectionCache
from services.hotlist_client import HotlistClient
from services.merger import merge_unique
from services.normalizer import RecordNormalizer
from services.store import JsonFileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    status: str  # "ok" or "no_data"
    fetched: int = 0
    added: int = 0
    total: int | None = None
    persisted: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


class IngestionCycle:
    """Merges each fetched hotlist page into the stored collection.

    With a cache the in-memory snapshot is the source of truth for merging and
    is swapped before the file write, so readers see new records without
    waiting on disk. Without one the file is re-read every round.
    """

    def __init__(
        self,
        client: HotlistClient,
        store: JsonFileStore,
        normalizer: RecordNormalizer,
        cache: CollectionCache | None = None,
    ):
        self.client = client
        self.store = store
        self.normalizer = normalizer
        self.cache = cache
        self.last_result: CycleResult | None = None

    async def run(self) -> CycleResult:
        result = await self._run()
        self.last_result = result
        return result

    async def _run(self) -> CycleResult:
        items = await self.client.fetch()
        if not items:
            logger.info("No hotlist data this cycle")
            return CycleResult(status="no_data")

        records = self.normalizer.normalize_batch(items)

        if self.cache is not None:
            existing = self.cache.snapshot()
        else:
            existing = await asyncio.to_thread(self.store.read)

        merged = merge_unique(existing, records, sort_desc=self.cache is not None)
        added = len(merged) - len(existing)

        if self.cache is not None:
            self.cache.swap(merged)

        persisted = await asyncio.to_thread(self.store.write, merged)

        logger.info(
            "Ingestion cycle: fetched=%d added=%d total=%d persisted=%s",
            len(items), added, len(merged), persisted,
        )
        return CycleResult(
            status="ok",
            fetched=len(items),
            added=added,
            total=len(merged),
            persisted=persisted,
        )
