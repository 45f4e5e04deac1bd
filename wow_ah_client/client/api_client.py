"""
Battle.net community API client - realms, items, and auction snapshots.

Endpoints (all take ``locale`` and ``apikey`` query parameters)::

  GET {base_url}/wow/realm/status          → RealmStatusReply
  GET {base_url}/wow/item/{item_id}        → ItemInfo
  GET {base_url}/wow/auction/data/{slug}   → AuctionDataReply (pointer)
  GET <pointer.url>                        → AuctionListingsReply

Usage::

    from wow_ah_client.config import load_config, resolve_api_key

    config = load_config()
    with BattleNetApiClient(resolve_api_key(config), config) as client:
        groups = client.get_connected_realm_groups()
        snapshot = client.get_auction_listings(groups[0].primary_slug, cutoff=0)

Every request goes through one shared ``RateLimiter``.  Pass the same limiter
to every client built with the same API key.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import httpx

from wow_ah_client.client.clustering import cluster_connected_realms, group_connected_realms
from wow_ah_client.client.executor import RequestExecutor
from wow_ah_client.client.freshness import FreshnessDecision, check_freshness
from wow_ah_client.client.rate_limiter import RateLimiter
from wow_ah_client.client.retry import RetryPolicy
from wow_ah_client.client.sanitize import OWNER_SANITIZER
from wow_ah_client.config import AppConfig
from wow_ah_client.models.auction import AuctionDataReply, AuctionListingsReply, AuctionSnapshot
from wow_ah_client.models.item import ItemInfo
from wow_ah_client.models.realm import ConnectedRealmGroup, RealmInfo, RealmStatusReply

logger = logging.getLogger(__name__)


class BattleNetApiClient:
    """Client for the three Battle.net endpoints this project needs.

    Args:
        api_key:      Battle.net API key (sent as the ``apikey`` parameter).
        config:       Application config; defaults to built-in defaults.
        rate_limiter: Shared limiter.  Built from ``config.rate_limit`` if omitted.
        retry_policy: Overrides ``config.retry``.
        http:         Pre-built ``httpx.Client`` (e.g. with a mock transport).
                      If omitted the client creates and owns one.
        executor:     Pre-built executor; takes precedence over the three
                      arguments above.
    """

    def __init__(
        self,
        api_key: str,
        config: Optional[AppConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        retry_policy: Optional[RetryPolicy] = None,
        http: Optional[httpx.Client] = None,
        executor: Optional[RequestExecutor] = None,
    ) -> None:
        self.config = config or AppConfig()
        self._api_key = api_key
        self._owns_http = executor is None and http is None

        if executor is None:
            if http is None:
                http = httpx.Client(timeout=self.config.api.timeout_seconds)
            executor = RequestExecutor(
                http,
                rate_limiter or RateLimiter.from_config(self.config.rate_limit),
                retry_policy or self.config.retry,
            )
        self.executor = executor

    # ── Lifecycle ──────────────────────────────────────────────────────────────

    def close(self) -> None:
        if self._owns_http:
            self.executor.http.close()

    def __enter__(self) -> "BattleNetApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── URL helpers ────────────────────────────────────────────────────────────

    def _endpoint(self, path: str) -> str:
        return f"{self.config.api.base_url}/wow/{path.lstrip('/')}"

    def _params(self) -> dict[str, Any]:
        return {"locale": self.config.api.locale, "apikey": self._api_key}

    # ── Public operations ──────────────────────────────────────────────────────

    def list_realms(self) -> list[RealmInfo]:
        """Download every realm in the region."""
        reply = self.executor.fetch(
            self._endpoint("realm/status"), RealmStatusReply, "realm status",
            params=self._params(),
        )
        logger.info("Fetched %d realms", len(reply.realms))
        return reply.realms

    def get_item_info(self, item_id: int) -> ItemInfo:
        """Download metadata for one item.

        Raises:
            UpstreamFailure: With ``status_code == 404`` if the item does not exist.
        """
        return self.executor.fetch(
            self._endpoint(f"item/{item_id}"), ItemInfo, f"item info {item_id}",
            params=self._params(),
        )

    def get_auction_listings(self, realm_slug: str, cutoff: int) -> Optional[AuctionSnapshot]:
        """Download a realm's auction listings if they changed after ``cutoff``.

        Args:
            realm_slug: Any member slug of the connected realm group.
            cutoff:     ``last_modified`` of the snapshot the caller already has
                        (0 to always download).

        Returns:
            ``AuctionSnapshot`` with the new ``last_modified`` and listings, or
            ``None`` if the snapshot has not advanced past ``cutoff``.
        """
        status = self.executor.fetch(
            self._endpoint(f"auction/data/{realm_slug}"), AuctionDataReply,
            f"auction data for {realm_slug}",
            params=self._params(),
        )
        pointer = status.pointer
        if check_freshness(pointer.last_modified, cutoff) is FreshnessDecision.SKIP:
            logger.info(
                "Auctions for %s unchanged (last_modified=%d <= cutoff=%d); skipping",
                realm_slug, pointer.last_modified, cutoff,
            )
            return None

        reply = self.executor.fetch(
            pointer.url, AuctionListingsReply, f"auction listings for {realm_slug}",
            sanitizer=OWNER_SANITIZER,
        )
        logger.info(
            "Fetched %d auctions for %s (last_modified=%d)",
            len(reply.auctions), realm_slug, pointer.last_modified,
        )
        return AuctionSnapshot(last_modified=pointer.last_modified, listings=reply.auctions)

    @staticmethod
    def cluster_connected_realms(realms: Iterable[RealmInfo]) -> list[list[str]]:
        """Collapse realms into distinct connected-realm slug lists."""
        return cluster_connected_realms(realms)

    def get_connected_realm_groups(self) -> list[ConnectedRealmGroup]:
        """List realms and collapse them into one group per auction house."""
        return group_connected_realms(self.list_realms())
