"""
Shared fixtures: an in-memory subscriber store, a handler with a controllable
clock, and a TestClient wired to that handler.
"""

from typing import List

import pytest
from fastapi.testclient import TestClient

import app.main as main
from app.subscribe_handler import SubscribeHandler
from app.subscriber_store import InMemorySubscriberStore


class FakeClock:
    """Returns queued millisecond timestamps, repeating the last one."""

    def __init__(self, *times: int):
        self.times: List[int] = list(times) or [1_700_000_000_000]

    def __call__(self) -> int:
        if len(self.times) > 1:
            return self.times.pop(0)
        return self.times[0]


@pytest.fixture
def store() -> InMemorySubscriberStore:
    return InMemorySubscriberStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000_000, 1_700_000_005_000)


@pytest.fixture
def handler(store, clock) -> SubscribeHandler:
    return SubscribeHandler(store, clock=clock)


@pytest.fixture
def client(monkeypatch, store) -> TestClient:
    """TestClient whose subscribe route writes to the in-memory store with the real clock."""
    monkeypatch.setattr(main, "subscribe_handler", SubscribeHandler(store))
    monkeypatch.setattr(main, "subscriber_store", store)
    return TestClient(main.app)
