"""Timestamp-keyed merge of newly fetched records into the accumulated collection."""

import math
from collections.abc import Iterable, Sequence

Collection = tuple[dict, ...]


def has_timestamp(record: dict) -> bool:
    ts = record.get("timestamp")
    return isinstance(ts, (int, float)) and not isinstance(ts, bool) and math.isfinite(ts)


def _sort_key(record: dict) -> tuple[bool, float]:
    # Records without a usable timestamp go after every dated record
    if not has_timestamp(record):
        return (False, 0)
    return (True, record["timestamp"])


def merge_unique(
    existing: Sequence[dict],
    incoming: Iterable[dict],
    sort_desc: bool = False,
) -> Collection:
    """Append incoming records whose timestamp is not already in ``existing``.

    Only existing-vs-incoming duplicates are dropped; two incoming records
    sharing a timestamp both survive. Neither input is modified, a new tuple
    is returned. With ``sort_desc`` the result is stably sorted newest first.
    """
    seen = {record.get("timestamp") for record in existing}
    fresh = [record for record in incoming if record.get("timestamp") not in seen]
    merged = [*existing, *fresh]
    if sort_desc:
        merged.sort(key=_sort_key, reverse=True)
    return tuple(merged)
