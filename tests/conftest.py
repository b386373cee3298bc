"""
Test configuration and fixtures for the Link QR API.

Resolution and encoding are swapped for deterministic stubs through FastAPI
dependency overrides so tests never touch the network.
"""

import os
from typing import Generator, List

# The default TestClient host is exempt from rate limiting; the rate limit
# tests use their own client addresses.
os.environ.setdefault("WHITELIST_IPS", '["testclient"]')

import pytest
from fastapi.testclient import TestClient

from app.features.qr.services.encoder import EncodingFailure, get_encoder
from app.features.qr.services.resolver import get_resolver


class StubResolver:
    """Answers every lookup with a fixed result and records hostnames."""

    def __init__(self, exists: bool = True):
        self.exists = exists
        self.calls: List[str] = []

    async def domain_exists(self, hostname: str) -> bool:
        self.calls.append(hostname)
        return self.exists


class StubEncoder:
    """Returns a fake data URL that carries the encoded text."""

    def __init__(self, error: Exception = None):
        self.error = error
        self.calls: List[str] = []

    async def encode(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return f"data:image/png;base64,stub:{url}"


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    Dependency overrides are cleared after every test.
    """
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()


@pytest.fixture
def resolver() -> StubResolver:
    return StubResolver(exists=True)


@pytest.fixture
def encoder() -> StubEncoder:
    return StubEncoder()


@pytest.fixture
def stubbed_client(client, test_app, resolver, encoder):
    """Client whose pipeline resolves every domain and fakes the QR image."""
    test_app.dependency_overrides[get_resolver] = lambda: resolver
    test_app.dependency_overrides[get_encoder] = lambda: encoder
    yield client


@pytest.fixture
def failing_encoder() -> StubEncoder:
    return StubEncoder(error=EncodingFailure("data too long"))
