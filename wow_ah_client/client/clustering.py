"""
Connected-realm clustering.

Every realm reports the full list of realms it shares an auction house with.
Collapsing those lists gives one entry per auction house, so each house is
scanned once rather than once per member realm.

Lists are compared as sets: ``["a", "b"]`` and ``["b", "a"]`` describe the
same group.  Upstream does not guarantee a stable member ordering, so an
order-sensitive comparison would report spurious extra groups.
"""

from __future__ import annotations

import logging
from typing import Iterable

from wow_ah_client.models.realm import ConnectedRealmGroup, RealmInfo

logger = logging.getLogger(__name__)


def group_connected_realms(realms: Iterable[RealmInfo]) -> list[ConnectedRealmGroup]:
    """Collapse realms into distinct connected-realm groups.

    A realm with an empty ``connected_realms`` list is treated as a group of
    one (itself).

    Args:
        realms: All realms from the realm status endpoint.

    Returns:
        Distinct groups ordered by their first (alphabetically smallest) slug.
    """
    seen: dict[frozenset[str], ConnectedRealmGroup] = {}
    n_realms = 0
    for realm in realms:
        n_realms += 1
        members = realm.connected_realms or [realm.slug]
        group = ConnectedRealmGroup.from_slugs(members)
        if realm.slug not in group:
            logger.warning(
                "Realm %s is not listed in its own connected realms %s",
                realm.slug, list(group.slugs),
            )
        seen.setdefault(group.key, group)

    groups = sorted(seen.values(), key=lambda g: g.slugs)
    logger.debug("Clustered %d realms into %d connected groups", n_realms, len(groups))
    return groups


def cluster_connected_realms(realms: Iterable[RealmInfo]) -> list[list[str]]:
    """Plain-list form of :func:`group_connected_realms`."""
    return [list(g.slugs) for g in group_connected_realms(realms)]
