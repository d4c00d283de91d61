"""Shared fixtures: isolated settings, upstream item factory, mock hotlist transport."""

import httpx
import pytest

from config import Settings

HOTLIST_URL = "https://hotlist.test/blockchain/getHotlist"


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings()
    s.environment = "local"
    s.hotlist_url = HOTLIST_URL
    s.data_file = str(tmp_path / "data.json")
    s.read_mode = "cache"
    s.atomic_writes = False
    s.scheduler_enabled = False
    s.source_timezone = "UTC"
    s.poll_interval_seconds = 30
    s.cors_origins = ["*"]
    return s


@pytest.fixture
def make_item():
    """Build one upstream hotlist item with its native field labels."""

    def _make(query_time: str = "2024-01-01 00:00:00", contract: str = "0xabc", coin: str = "PEPE", **overrides):
        item = {
            "查询时间": query_time,
            "颜色": "红",
            "合约": contract,
            "币名": coin,
            "次数": 3,
            "群数": 2,
            "价格": "0.00012",
            "首发市值": "12.5K",
            "市值": "48K",
            "Top10持仓": "31%",
            "持有人": 120,
            "热度": 88,
            "人数": 40,
        }
        item.update(overrides)
        return item

    return _make


@pytest.fixture
def hotlist_transport():
    """MockTransport answering each request with the next payload (last one repeats)."""

    def _transport(*payloads, status_code: int = 200):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            payload = payloads[min(len(requests), len(payloads)) - 1]
            return httpx.Response(status_code, json=payload)

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return _transport
