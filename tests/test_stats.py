from concurrent.futures import ThreadPoolExecutor

from conftest import FakeClock
from core.stats import RequestStats


def test_snapshot_shape_and_uptime():
    clock = FakeClock()
    stats = RequestStats(clock=clock)
    stats.record("GET /api/health")
    stats.record("GET /api/health")
    stats.record("GET /api/comics/latest")
    clock.advance(12.5)

    assert stats.snapshot() == {
        "totalRequests": 3,
        "endpointStats": {"GET /api/health": 2, "GET /api/comics/latest": 1},
        "uptime": 12.5,
    }


def test_concurrent_records_are_not_lost():
    stats = RequestStats()

    with ThreadPoolExecutor(max_workers=8) as pool:
        for _ in range(2000):
            pool.submit(stats.record, "GET /api/stats")

    assert stats.total_requests == 2000
    assert stats.snapshot()["endpointStats"]["GET /api/stats"] == 2000


def test_snapshot_is_a_copy():
    stats = RequestStats()
    stats.record("GET /")

    snap = stats.snapshot()
    snap["endpointStats"]["GET /"] = 99

    assert stats.snapshot()["endpointStats"]["GET /"] == 1
