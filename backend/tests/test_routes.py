"""API tests for /query, /ready and /health."""

import json
import logging
import time

import pytest
from fastapi.testclient import TestClient

from app import create_app
from services.runtime import build_services

RECORDS = [
    {"timestamp": 1700000200, "contract": "0xc"},
    {"timestamp": 1700000100, "contract": "0xb"},
    {"timestamp": 0, "contract": "0xzero"},
    {"timestamp": -50, "contract": "0xneg"},
    {"timestamp": None, "contract": "0xundated"},
]


@pytest.fixture
def cached_client(settings):
    services = build_services(settings)
    services.cache.swap(RECORDS)
    return TestClient(create_app(settings, services))


class TestQuery:
    @pytest.mark.parametrize("bound", [-100, -50, -1, 0, 1700000100, 1700000200, 1800000000])
    def test_returns_records_strictly_newer(self, cached_client, bound):
        resp = cached_client.get("/query", params={"timestamp": bound})

        assert resp.status_code == 200
        expected = [r for r in RECORDS if r["timestamp"] is not None and r["timestamp"] > bound]
        assert resp.json() == expected

    def test_preserves_collection_order(self, cached_client):
        resp = cached_client.get("/query?timestamp=-1000")
        assert [r["contract"] for r in resp.json()] == ["0xc", "0xb", "0xzero", "0xneg"]

    def test_oversized_integer_is_400(self, cached_client):
        resp = cached_client.get("/query", params={"timestamp": "9" * 5000})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid timestamp provided"}

    def test_whitespace_and_sign_accepted(self, cached_client):
        assert len(cached_client.get("/query", params={"timestamp": " +1700000100 "}).json()) == 1

    @pytest.mark.parametrize("query", ["/query", "/query?timestamp=abc", "/query?timestamp=", "/query?timestamp=1.5"])
    def test_invalid_timestamp_is_400(self, cached_client, query):
        resp = cached_client.get(query)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid timestamp provided"}

    def test_invalid_query_leaves_collection_unchanged(self, settings):
        services = build_services(settings)
        services.cache.swap(RECORDS)
        snapshot = services.cache.snapshot()
        client = TestClient(create_app(settings, services))

        client.get("/query?timestamp=abc")

        assert services.cache.snapshot() is snapshot

    def test_file_mode_reads_the_file_per_request(self, settings):
        settings.read_mode = "file"
        client = TestClient(create_app(settings, build_services(settings)))
        path = settings.data_file

        assert client.get("/query?timestamp=0").json() == []

        with open(path, "w", encoding="utf-8") as f:
            json.dump([{"timestamp": 5, "contract": "0xfile"}], f)

        assert client.get("/query?timestamp=0").json() == [{"timestamp": 5, "contract": "0xfile"}]

    def test_cors_allows_any_origin(self, cached_client):
        resp = cached_client.get("/query?timestamp=0", headers={"Origin": "https://dashboard.example"})
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["x-content-type-options"] == "nosniff"


class TestStartup:
    def test_unsorted_file_is_loaded_newest_first(self, settings):
        with open(settings.data_file, "w", encoding="utf-8") as f:
            json.dump([{"timestamp": 10}, {"timestamp": 30}, {"timestamp": None}, {"timestamp": 20}], f)

        with TestClient(create_app(settings)) as client:
            body = client.get("/query?timestamp=0").json()

        assert [r["timestamp"] for r in body] == [30, 20, 10]

    def test_bad_interval_is_reported_before_failing(self, settings, caplog):
        settings.poll_interval_seconds = 0

        with caplog.at_level(logging.WARNING, logger="app"):
            with pytest.raises(ValueError):
                create_app(settings)

        assert "POLL_INTERVAL_SECONDS must be positive" in caplog.text

    def test_cache_loaded_from_file_on_startup(self, settings):
        with open(settings.data_file, "w", encoding="utf-8") as f:
            json.dump([{"timestamp": 42, "contract": "0xdisk"}], f)

        with TestClient(create_app(settings)) as client:
            assert client.get("/query?timestamp=0").json() == [{"timestamp": 42, "contract": "0xdisk"}]

    def test_scheduler_ingests_on_startup(self, settings, hotlist_transport, make_item):
        settings.scheduler_enabled = True
        transport = hotlist_transport(
            {"code": 0, "data": [make_item("2024-01-01 00:00:00"), make_item("2024-01-01 00:01:00")]}
        )
        services = build_services(settings, transport=transport)

        with TestClient(create_app(settings, services)) as client:
            deadline = time.monotonic() + 5
            while services.cycle.last_result is None and time.monotonic() < deadline:
                time.sleep(0.02)

            body = client.get("/query?timestamp=0").json()
            health = client.get("/health").json()

        assert [r["timestamp"] for r in body] == [1704067260, 1704067200]
        assert health["scheduler"] == "running"
        assert health["last_cycle"]["added"] == 2
        with open(settings.data_file, encoding="utf-8") as f:
            assert len(json.load(f)) == 2
        assert not services.scheduler.running


class TestHealth:
    def test_ready(self, cached_client, settings):
        assert cached_client.get("/ready").json() == {
            "status": "ok",
            "service": "hotlist-api",
            "commit": settings.git_sha,
        }

    def test_health_reports_collection_state(self, cached_client):
        body = cached_client.get("/health").json()
        assert body["read_mode"] == "cache"
        assert body["records"] == len(RECORDS)
        assert body["scheduler"] == "stopped"
        assert body["last_cycle"] is None
