"""Hotlist item parsing and normalization.

The upstream labels its fields in Chinese. Items are parsed into an explicit
pydantic model first, then flattened into the canonical record shape that is
stored on disk and served by /query.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from errors import MalformedItemError

logger = logging.getLogger(__name__)

# Accepted by pandas as the current time, not a calendar date
_RELATIVE_WORDS = {"now", "today", "tomorrow", "yesterday"}


class RawHotlistItem(BaseModel):
    """One item of the upstream hotlist, keyed by its native labels."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query_time: str = Field(alias="查询时间")
    contract: str = Field(alias="合约")
    coin_name: str = Field(alias="币名")
    color: str | None = Field(default=None, alias="颜色")
    occurrences: int | None = Field(default=None, alias="次数")
    groups: int | None = Field(default=None, alias="群数")
    holders: int | None = Field(default=None, alias="持有人")
    people: int | None = Field(default=None, alias="人数")
    # Metrics are passed through without interpretation
    price: Any = Field(default=None, alias="价格")
    initial_market_cap: Any = Field(default=None, alias="首发市值")
    market_cap: Any = Field(default=None, alias="市值")
    top10_holdings: Any = Field(default=None, alias="Top10持仓")
    popularity: Any = Field(default=None, alias="热度")


def parse_item(raw: Mapping[str, Any]) -> RawHotlistItem:
    """Parse one upstream item, raising MalformedItemError on missing or mistyped fields."""
    if not isinstance(raw, Mapping):
        raise MalformedItemError(f"Hotlist item is not an object: {raw!r}")
    try:
        return RawHotlistItem.model_validate(dict(raw))
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise MalformedItemError(f"Malformed hotlist item (fields: {fields})") from e


def to_timestamp_seconds(text: str, tz: str | None = None) -> int | None:
    """Convert a calendar date-time string to whole seconds since the epoch.

    Naive values are read in ``tz`` when given, otherwise in the process
    local zone. Returns None when the string cannot be parsed.
    """
    if text.strip().lower() in _RELATIVE_WORDS:
        return None
    ts = pd.to_datetime(text, errors="coerce")
    if pd.isna(ts):
        return None
    if tz and ts.tzinfo is None:
        # DST gaps and overlaps have no single instant
        ts = ts.tz_localize(tz, ambiguous="NaT", nonexistent="NaT")
        if pd.isna(ts):
            return None
    return math.floor(ts.to_pydatetime().timestamp())


class RecordNormalizer:
    """Maps raw hotlist items to canonical records."""

    def __init__(self, timezone: str | None = None):
        self.timezone = timezone

    def normalize(self, raw: Mapping[str, Any]) -> dict:
        item = parse_item(raw)
        timestamp = to_timestamp_seconds(item.query_time, self.timezone)
        if timestamp is None:
            # Kept with a null key, same as the original feed consumer
            logger.warning("Unparseable query time %r for %s", item.query_time, item.contract)

        return {
            "timestamp": timestamp,
            "rawTime": item.query_time,
            "color": item.color,
            "contract": item.contract,
            "coinName": item.coin_name,
            "occurrences": item.occurrences,
            "groups": item.groups,
            "price": item.price,
            "initialMarketCap": item.initial_market_cap,
            "marketCap": item.market_cap,
            "top10Holdings": item.top10_holdings,
            "holders": item.holders,
            "popularity": item.popularity,
            "people": item.people,
        }

    def normalize_batch(self, items: Iterable[Mapping[str, Any]]) -> list[dict]:
        """Normalize items in upstream order, skipping the malformed ones."""
        records = []
        for index, raw in enumerate(items):
            try:
                records.append(self.normalize(raw))
            except MalformedItemError as e:
                logger.warning("Skipping hotlist item #%d: %s", index, e)
        return records
