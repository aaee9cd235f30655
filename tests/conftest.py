"""Shared pytest fixtures for unit and integration tests."""

import random

import pytest
from httpx import ASGITransport, AsyncClient

from schoolid.api import deps
from schoolid.config import settings
from schoolid.main import app
from schoolid.services.id_service import IdentifierService, initialize


@pytest.fixture
def config():
    """Tenant config for school ABC in academic year 2024-25 (year code 25)."""
    return initialize("ABC", "2024-25")


@pytest.fixture
def rng() -> random.Random:
    """Seeded RNG so random suffixes are reproducible."""
    return random.Random(20240315)


@pytest.fixture
def service(config, rng) -> IdentifierService:
    return IdentifierService(config, rng=rng)


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
async def async_client(api_base: str, config):
    """Async HTTP client against the app, with the tenant config lookup stubbed."""
    async def _scope_config():
        return config

    app.dependency_overrides[deps.get_scope_config] = _scope_config
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()
    app.dependency_overrides.clear()
