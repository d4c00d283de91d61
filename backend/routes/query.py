"""Recency query over the accumulated hotlist."""

import re

from fastapi import APIRouter, Query, Request

from errors import InvalidTimestampError
from services.merger import has_timestamp

router = APIRouter()

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_bound(value: str | None) -> int:
    """Strict base-10 parse of the ?timestamp= bound."""
    if value is None or not _INTEGER.fullmatch(value.strip()):
        raise InvalidTimestampError()
    try:
        return int(value)
    except ValueError:  # past the interpreter digit limit
        raise InvalidTimestampError() from None


@router.get("/query")
async def query(request: Request, timestamp: str | None = Query(None)) -> list[dict]:
    """Records strictly newer than ``timestamp`` (seconds), in collection order."""
    bound = _parse_bound(timestamp)

    collection = await request.app.state.hotlist.current_collection()
    return [record for record in collection if has_timestamp(record) and record["timestamp"] > bound]
