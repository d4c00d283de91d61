"""Client for the upstream blockchain hotlist endpoint.

The provider answers with an envelope ``{"code": 0, "data": [...]}``. Any
transport failure, non-2xx status or error envelope is logged and reported
as an empty batch, so the ingestion cycle simply skips that round.
"""

import logging

import httpx

from errors import UpstreamError

logger = logging.getLogger(__name__)


class HotlistClient:
    def __init__(
        self,
        url: str,
        page: int = 1,
        limit: int = 10,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.page = page
        self.limit = limit
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> list[dict]:
        """Fetch the current hotlist page. Returns [] when nothing usable came back."""
        try:
            return await self._fetch()
        except UpstreamError as e:
            logger.error("Hotlist fetch failed: %s", e)
            return []

    async def _fetch(self) -> list[dict]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.url, params={"page": self.page, "limit": self.limit})
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"Error while fetching data: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Hotlist response is not JSON: {e}") from e

        code = payload.get("code") if isinstance(payload, dict) else None
        data = payload.get("data") if isinstance(payload, dict) else None
        if isinstance(code, bool) or code != 0 or not isinstance(data, list):
            raise UpstreamError(f"Unexpected response: {str(payload)[:500]}")

        logger.info("Fetched %d hotlist items from %s", len(data), self.url)
        return data
