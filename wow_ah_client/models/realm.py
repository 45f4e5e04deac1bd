"""
Realm topology models.

``RealmInfo`` is one entry of the realm status reply.  Realms that share an
auction house list each other in ``connected_realms`` (including themselves),
so the connected-realm topology is derived, never fetched directly.

``ConnectedRealmGroup`` is that derived unit: a canonical, order-independent
set of slugs.  Two groups are equal when they contain the same slugs, no
matter in which order the upstream listed them.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, field_validator


class RealmInfo(BaseModel):
    """A realm as reported by the realm status endpoint.

    Attributes:
        name: Display name (e.g. ``"Area 52"``).
        slug: Stable identifier used in URLs (e.g. ``"area-52"``).
        connected_realms: Slugs of every realm sharing this realm's auction
            house, including this realm.  Upstream ordering is not stable
            across members of the same group.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    slug: str
    connected_realms: list[str] = []

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        if not v:
            raise ValueError("Realm slug must be non-empty.")
        return v


class ConnectedRealmGroup(BaseModel):
    """A deduplicated set of realm slugs sharing one auction house.

    ``slugs`` is always sorted and unique; build instances through
    :meth:`from_slugs` so that the canonical form is enforced.
    """

    model_config = ConfigDict(frozen=True)

    slugs: tuple[str, ...]

    @field_validator("slugs")
    @classmethod
    def canonical_slugs(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("A connected realm group needs at least one slug.")
        return tuple(sorted(set(v)))

    @classmethod
    def from_slugs(cls, slugs: Iterable[str]) -> "ConnectedRealmGroup":
        return cls(slugs=tuple(slugs))

    @property
    def key(self) -> frozenset[str]:
        return frozenset(self.slugs)

    @property
    def primary_slug(self) -> str:
        """First slug in canonical order; used to address the group's auctions."""
        return self.slugs[0]

    def __contains__(self, slug: object) -> bool:
        return slug in self.slugs

    def __len__(self) -> int:
        return len(self.slugs)


class RealmStatusReply(BaseModel):
    """Envelope of the realm status endpoint: ``{"realms": [...]}``."""

    model_config = ConfigDict(frozen=True)

    realms: list[RealmInfo]
