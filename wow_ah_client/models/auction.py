"""
Auction house wire models.

Fetching a realm's listings is a two-step exchange:

  1. ``GET /wow/auction/data/{realm}`` returns an ``AuctionDataReply`` whose
     single ``files`` entry is an ``AuctionDataPointer`` (listings URL +
     ``lastModified``).
  2. ``GET <pointer.url>`` returns an ``AuctionListingsReply`` with the bulk
     ``auctions`` array.

All monetary values are integer copper; a ``buyout`` of 0 means the auction
is bid-only.  The ``owner`` field present on every upstream auction is not
modelled (it is frequently corrupt and is blanked before decoding).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuctionListing(BaseModel):
    """One auction from the bulk listings payload.

    Attributes:
        item: Item ID being sold.
        buyout: Buyout price in copper (0 = no buyout).
        quantity: Stack size, always positive.
    """

    model_config = ConfigDict(frozen=True)

    item: int
    buyout: int
    quantity: int

    @field_validator("buyout")
    @classmethod
    def non_negative_buyout(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"buyout must be >= 0, got {v}.")
        return v

    @field_validator("quantity")
    @classmethod
    def positive_quantity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"quantity must be a positive integer, got {v}.")
        return v


class AuctionDataPointer(BaseModel):
    """Where to download a realm's listings, and when they last changed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    last_modified: int = Field(alias="lastModified")


class AuctionDataReply(BaseModel):
    """Envelope of the auction status endpoint: ``{"files": [pointer]}``."""

    model_config = ConfigDict(frozen=True)

    files: list[AuctionDataPointer]

    @field_validator("files")
    @classmethod
    def exactly_one_file(cls, v: list[AuctionDataPointer]) -> list[AuctionDataPointer]:
        if len(v) != 1:
            raise ValueError(f"Expected exactly one auction data file, got {len(v)}.")
        return v

    @property
    def pointer(self) -> AuctionDataPointer:
        return self.files[0]


class AuctionListingsReply(BaseModel):
    """Bulk listings payload.

    ``realms`` here is loose per-realm metadata (name/slug only, no
    connected realms), so it is kept as plain string maps rather than
    ``RealmInfo``.
    """

    model_config = ConfigDict(frozen=True)

    realms: list[dict[str, str]] = []
    auctions: list[AuctionListing]


class AuctionSnapshot(BaseModel):
    """Result of a fresh listings download for one realm group."""

    model_config = ConfigDict(frozen=True)

    last_modified: int
    listings: list[AuctionListing]
