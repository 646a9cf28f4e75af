"""Pytest configuration: shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from mxhub.app import app
from mxhub.routes.deps import get_current_user, get_db
from mxhub.routes.lap_times import get_timers
from mxhub.services.auth_service import AuthenticatedUser
from mxhub.services.lap_timer import TimerRegistry

from .fakes import FakeSupabase


USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class FakeClock:
    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def user() -> AuthenticatedUser:
    return AuthenticatedUser(id=USER_ID, email="rider@example.com", access_token="token-1")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=1_000_000)


@pytest.fixture
def registry(clock) -> TimerRegistry:
    return TimerRegistry(clock=clock)


@pytest.fixture
def client(fake_db, user, registry):
    """Authenticated test client backed by the in-memory database."""
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_timers] = lambda: registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    app.dependency_overrides.clear()
    return TestClient(app)
