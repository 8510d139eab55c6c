# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - Fixtures shared across heartbeat tests
# PURPOSE: Fake dependency endpoints served through httpx.MockTransport
# CREATED: 17 OCT 2026
# ============================================================================
"""
Shared fixtures.

FakeEndpoints answers requests by path:
    /ok        200
    /slow      200 after `slow_delay` seconds
    /error     500
    /missing   404
    /moved     301
    /hang      200 after 30 seconds
Anything else returns 200. Every request URL is recorded in `calls`.
"""

import asyncio
from typing import Dict, List, Tuple

import httpx
import pytest


class FakeEndpoints:
    """Routes for a MockTransport plus a record of requests made."""

    def __init__(self, slow_delay: float = 0.1):
        self.calls: List[str] = []
        self.routes: Dict[str, Tuple[int, float]] = {
            "/ok": (200, 0.0),
            "/slow": (200, slow_delay),
            "/error": (500, 0.0),
            "/missing": (404, 0.0),
            "/moved": (301, 0.0),
            "/hang": (200, 30.0),
        }

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(str(request.url))
        status_code, delay = self.routes.get(request.url.path, (200, 0.0))
        if delay:
            await asyncio.sleep(delay)
        return httpx.Response(status_code, text="Hello, client")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def endpoints():
    """Fake dependency endpoints."""
    return FakeEndpoints()


@pytest.fixture
def fast_slow_threshold(monkeypatch):
    """Lower the slow-response threshold so /slow (100ms) counts as slow."""
    monkeypatch.setattr("heartbeat.core.SLOW_RESPONSE_THRESHOLD_SECONDS", 0.05)
    return 0.05
