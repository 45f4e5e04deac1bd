"""
Tests for models/auction.py and models/item.py - wire shapes and validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wow_ah_client.models.auction import (
    AuctionDataPointer,
    AuctionDataReply,
    AuctionListing,
    AuctionListingsReply,
)
from wow_ah_client.models.item import ItemInfo


class TestAuctionListing:
    def test_owner_and_extras_ignored(self):
        listing = AuctionListing.model_validate(
            {"auc": 1, "item": 25, "owner": "Bob", "bid": 90, "buyout": 100,
             "quantity": 1, "timeLeft": "LONG"}
        )
        assert listing == AuctionListing(item=25, buyout=100, quantity=1)

    def test_zero_buyout_means_bid_only(self):
        assert AuctionListing(item=25, buyout=0, quantity=1).buyout == 0

    def test_negative_buyout_rejected(self):
        with pytest.raises(ValidationError):
            AuctionListing(item=25, buyout=-1, quantity=1)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError):
            AuctionListing(item=25, buyout=1, quantity=quantity)


class TestAuctionDataReply:
    def test_pointer_uses_wire_alias(self):
        reply = AuctionDataReply.model_validate(
            {"files": [{"url": "http://example/auctions.json", "lastModified": 1475000000000}]}
        )
        assert reply.pointer.last_modified == 1475000000000
        assert reply.pointer.url == "http://example/auctions.json"

    def test_pointer_by_field_name(self):
        assert AuctionDataPointer(url="u", last_modified=5).last_modified == 5

    @pytest.mark.parametrize("n_files", [0, 2])
    def test_requires_exactly_one_file(self, n_files):
        files = [{"url": f"u{i}", "lastModified": i} for i in range(n_files)]
        with pytest.raises(ValidationError):
            AuctionDataReply.model_validate({"files": files})


class TestAuctionListingsReply:
    def test_loose_realm_metadata(self):
        reply = AuctionListingsReply.model_validate({
            "realms": [{"name": "Area 52", "slug": "area-52"}],
            "auctions": [{"item": 1, "buyout": 500, "quantity": 10, "owner": "_"}],
        })
        assert reply.realms[0]["slug"] == "area-52"
        assert reply.auctions == [AuctionListing(item=1, buyout=500, quantity=10)]

    def test_missing_auctions_rejected(self):
        with pytest.raises(ValidationError):
            AuctionListingsReply.model_validate({"realms": []})


class TestItemInfo:
    def test_parses_item(self, item_payload):
        item = ItemInfo.model_validate(item_payload)
        assert (item.id, item.icon) == (19019, "inv_sword_39")

    def test_non_positive_id_rejected(self):
        with pytest.raises(ValidationError):
            ItemInfo(id=0, name="x", icon="y")

    def test_missing_icon_rejected(self):
        with pytest.raises(ValidationError):
            ItemInfo.model_validate({"id": 1, "name": "x"})
