"""
Pastebin - Test configuration and fixtures
"""
import os
import random
from datetime import datetime, timedelta, timezone

import pytest

# Tests never touch a real Redis
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["REAP_INTERVAL_SECONDS"] = "0.05"
os.environ["APP_DOMAIN"] = "http://test"

from fastapi.testclient import TestClient

from pastebin.config import Settings
from pastebin.main import create_app
from pastebin.slugs import SlugGenerator
from pastebin.store import MemoryClient, PasteStore


class FakeClock:
    """Controllable time source."""

    def __init__(self, now: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock):
    paste_store = PasteStore(
        MemoryClient(),
        slug_generator=SlugGenerator(random.Random(1234)),
        clock=clock,
    )
    yield paste_store
    paste_store.close()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
