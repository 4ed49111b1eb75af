"""Shared fixtures: fake upstream source, fake clock, payload builders."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from core.cache import TTLCache
from core.config import AppSettings
from core.domain.errors import ComicNotFound, UpstreamError
from core.domain.models import Comic
from core.services.comic_service import ComicService


def make_payload(num: int, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "num": num,
        "title": f"Comic {num}",
        "img": f"https://imgs.xkcd.com/comics/comic_{num}.png",
        "alt": f"Alt text {num}",
        "transcript": "",
        "year": "2023",
        "month": "4",
        "day": "1",
        "safe_title": f"Comic {num}",
    }
    payload.update(overrides)
    return payload


def make_comic(num: int, **overrides: Any) -> Comic:
    data = make_payload(num, **overrides)
    data["id"] = data.pop("num")
    return Comic(**data)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """In-memory `ComicSource` that records every fetch."""

    def __init__(
        self,
        comics: dict[int, Comic] | None = None,
        *,
        latest_id: int | None = None,
        failing: dict[int, Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.comics = dict(comics or {})
        self.latest_id = latest_id if latest_id is not None else max(self.comics, default=0)
        self.failing = dict(failing or {})
        self.delay = delay
        self.latest_calls = 0
        self.by_id_calls: list[int] = []

    @classmethod
    def with_range(cls, max_id: int, **kwargs: Any) -> "FakeSource":
        return cls({i: make_comic(i) for i in range(1, max_id + 1)}, **kwargs)

    async def fetch_latest(self) -> Comic:
        self.latest_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.latest_id not in self.comics:
            raise UpstreamError("Failed to fetch latest comic: HTTP 500", status_code=500)
        return self.comics[self.latest_id]

    async def fetch_by_id(self, comic_id: int) -> Comic:
        self.by_id_calls.append(comic_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if comic_id in self.failing:
            raise self.failing[comic_id]
        if comic_id not in self.comics:
            raise ComicNotFound(comic_id)
        return self.comics[comic_id]

    @property
    def upstream_calls(self) -> int:
        return self.latest_calls + len(self.by_id_calls)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource.with_range(150)


@pytest.fixture
def service(source: FakeSource, clock: FakeClock) -> ComicService:
    return ComicService(source, TTLCache(300, clock=clock))


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        upstream_base_url="https://xkcd.test",
        rate_limit_enabled=False,
    )
