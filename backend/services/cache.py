"""In-memory mirror of the stored hotlist collection.

Note: Each uvicorn worker has its own cache instance and its own ingestion
schedule. Run a single worker per data file; two workers would both write
the same file.
"""

from collections.abc import Sequence

from services.merger import Collection


class CollectionCache:
    """Holds the latest collection snapshot.

    Snapshots are immutable tuples. ``swap`` replaces the reference in one
    assignment, so a reader either sees the previous snapshot or the new
    one, never a partial merge.
    """

    def __init__(self, initial: Sequence[dict] = ()):
        self._snapshot: Collection = tuple(initial)

    def snapshot(self) -> Collection:
        return self._snapshot

    def swap(self, collection: Sequence[dict]) -> None:
        self._snapshot = tuple(collection)

    def __len__(self) -> int:
        return len(self._snapshot)
