"""Shared fixtures: settings, a fake Strava upstream and an app client wired to both."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from cycling_profile.api.routes import get_auth_helper, get_strava_service
from cycling_profile.config import Settings, get_settings
from cycling_profile.main import app
from cycling_profile.services.strava_service import StravaService
from cycling_profile.utils.auth import StravaAuthHelper


def make_settings(**overrides) -> Settings:
    values = {
        "strava_client_id": "test_client_id",
        "strava_client_secret": "test_secret",
        "strava_redirect_uri": "http://localhost:8000/auth/strava/callback",
        "frontend_url": "http://localhost:8000",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeStrava:
    """Canned Strava responses keyed by (method, path), recording every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method: str, path: str, status_code: int = 200, json=None):
        self.routes[(method, path)] = (status_code, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Record Not Found"})
        status_code, body = route
        return httpx.Response(status_code, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake_strava():
    return FakeStrava()


@pytest.fixture
def use_settings():
    """Swap the settings seen by the request handlers."""
    def apply(**overrides):
        configured = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: configured
        return configured
    return apply


@pytest.fixture
def client(settings, fake_strava):
    def auth_helper(settings: Settings = Depends(get_settings)):
        return StravaAuthHelper(settings, transport=fake_strava.transport)

    def strava_service(settings: Settings = Depends(get_settings)):
        return StravaService(settings, transport=fake_strava.transport)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_auth_helper] = auth_helper
    app.dependency_overrides[get_strava_service] = strava_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def activity_payload():
    """Build a Strava activity summary dict, started `days_ago` days before now."""
    def build(days_ago: float = 1, **overrides):
        start = datetime.now(timezone.utc) - timedelta(days=days_ago)
        payload = {
            "id": 1,
            "resource_state": 2,
            "name": "Morning Ride",
            "type": "Ride",
            "sport_type": "Ride",
            "start_date": start.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "start_date_local": start.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "timezone": "(GMT+00:00) Europe/London",
            "distance": 10000.0,
            "total_elevation_gain": 100.0,
            "moving_time": 1800,
            "elapsed_time": 2000,
            "kudos_count": 3,
        }
        payload.update(overrides)
        return payload
    return build
