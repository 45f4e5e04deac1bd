"""
Shared pytest fixtures for the wow-ah test suite.

Provides:
  - ``fast_retry``: a RetryPolicy with zero delay, for tests that retry.
  - ``make_client``: builds a BattleNetApiClient over an ``httpx.MockTransport``.
  - Sample wire payloads for the realm, item and auction endpoints.
"""

from __future__ import annotations

from typing import Callable, Optional

import httpx
import pytest

from wow_ah_client.client.api_client import BattleNetApiClient
from wow_ah_client.client.executor import RequestExecutor
from wow_ah_client.client.rate_limiter import RateLimiter
from wow_ah_client.client.retry import RetryPolicy
from wow_ah_client.config import AppConfig


# ── Policies ──────────────────────────────────────────────────────────────────

@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Zero-delay policy with a generous ceiling."""
    return RetryPolicy(strategy="fixed", base_seconds=0.0, jitter=False, max_retries=20)


@pytest.fixture
def limiter() -> RateLimiter:
    return RateLimiter(capacity=1000, window_seconds=1.0)


# ── Sample payloads ───────────────────────────────────────────────────────────

@pytest.fixture
def realm_status_payload() -> dict:
    return {
        "realms": [
            {
                "type": "pvp",
                "population": "high",
                "name": "Area 52",
                "slug": "area-52",
                "connected_realms": ["area-52"],
            },
            {
                "name": "Aegwynn",
                "slug": "aegwynn",
                "connected_realms": ["aegwynn", "bonechewer", "daggerspine"],
            },
            {
                "name": "Bonechewer",
                "slug": "bonechewer",
                "connected_realms": ["bonechewer", "aegwynn", "daggerspine"],
            },
            {
                "name": "Daggerspine",
                "slug": "daggerspine",
                "connected_realms": ["aegwynn", "bonechewer", "daggerspine"],
            },
        ]
    }


@pytest.fixture
def item_payload() -> dict:
    return {
        "id": 19019,
        "name": "Thunderfury, Blessed Blade of the Windseeker",
        "icon": "inv_sword_39",
        "quality": 5,
        "itemLevel": 29,
    }


# ── Client factory ────────────────────────────────────────────────────────────

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_client(fast_retry, limiter):
    """Return a factory: ``make_client(handler, retry_policy=None) -> BattleNetApiClient``."""
    clients: list[BattleNetApiClient] = []

    def _factory(handler: Handler, retry_policy: Optional[RetryPolicy] = None) -> BattleNetApiClient:
        http = httpx.Client(transport=httpx.MockTransport(handler))
        executor = RequestExecutor(
            http, limiter, retry_policy or fast_retry, sleep=lambda _s: None
        )
        client = BattleNetApiClient("test-key", AppConfig(), executor=executor)
        clients.append(client)
        return client

    yield _factory
    for c in clients:
        c.executor.http.close()
