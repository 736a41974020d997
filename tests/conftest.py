"""Root conftest — test infrastructure for all backend tests.

Provides:
- Safety guard: no test may reach a real Jira site
- API client with the activity aggregator dependency overridden
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

# ─────────────────────────────────────────────────────────────────────────────
# Async Backend
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def anyio_backend():
    """The application runs on asyncio (``asyncio.gather``); run async tests there."""
    return "asyncio"


# ─────────────────────────────────────────────────────────────────────────────
# External Service Guard
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def block_real_jira_client():
    """SAFETY: Tests patch the client they need; anything else must not hit the network.

    Tests that patch ``get_jira_client`` at its point of use override this.
    """
    with patch("app.services.jira.read_operations.get_jira_client") as mock_get_client:
        client = AsyncMock()
        client.get.side_effect = AssertionError("Unexpected real Jira request in tests")
        mock_get_client.return_value = client
        yield mock_get_client


# ─────────────────────────────────────────────────────────────────────────────
# API Client
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def stub_aggregator():
    """Aggregator stand-in whose aggregate() result each test configures."""
    from app.services.activity import ActivityEnvelope

    aggregator = AsyncMock()
    aggregator.aggregate.return_value = ActivityEnvelope.empty()
    return aggregator


@pytest.fixture
async def api_client(stub_aggregator):
    """HTTP client with the aggregator dependency replaced by ``stub_aggregator``."""
    from app.api.deps import get_activity_aggregator
    from app.main import app

    app.dependency_overrides[get_activity_aggregator] = lambda: stub_aggregator

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
