"""Shared fixtures and fakes."""

import asyncio
import json

import pytest

from orderwatch.detect.throttle import AlertThrottle
from orderwatch.ingest.base import BasePayloadFetcher, FetchError
from orderwatch.store import SourceStore
from orderwatch.worker.tasks import SourceChecker


def book(*rows, side=None) -> str:
    """JSON payload with one bid row per (price, qty) pair."""
    bids = []
    for price, qty in rows:
        row = {"price": str(price), "quantity": str(qty)}
        if side:
            row["side"] = side
        bids.append(row)
    return json.dumps({"data": {"orderbook": {"bids": bids}}})


class FakeFetcher(BasePayloadFetcher):
    """Returns queued payload lists, one list per capture call."""

    def __init__(self, *responses: list[str], delay: float = 0.0):
        self.responses = list(responses)
        self.calls: list[str] = []
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self.failing_urls: set[str] = set()

    async def capture(self, url: str) -> list[str]:
        self.calls.append(url)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url in self.failing_urls:
                raise FetchError(url, "boom")
            if not self.responses:
                return []
            if len(self.responses) == 1:
                return self.responses[0]
            return self.responses.pop(0)
        finally:
            self.active -= 1


class RecordingNotifier:
    """Stands in for DiscordWebhook and records alerts."""

    def __init__(self, succeed: bool = True):
        self.alerts = []
        self.succeed = succeed
        self.closed = False

    async def send(self, alert) -> bool:
        self.alerts.append(alert)
        return self.succeed

    async def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, now: int = 1_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def store():
    return SourceStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_checker(store, notifier, clock):
    def _make(fetcher, cooldown_seconds: int = 90) -> SourceChecker:
        return SourceChecker(
            store=store,
            fetcher=fetcher,
            notifier=notifier,
            throttle=AlertThrottle(cooldown_seconds),
            source_delay_seconds=0,
            clock=clock,
        )

    return _make
