"""Tests for wishlist/models.py."""

import pytest

from ecobazaar.modules.wishlist.exceptions import InvalidWishlistEntryError
from ecobazaar.modules.wishlist.models import (
    BareEntry,
    ProductEntry,
    WishlistState,
    entry_matches,
    parse_entry,
    product_id_of,
)


class TestParseEntry:
    def test_bare_entry(self):
        entry = parse_entry({"id": 1, "productId": 7})
        assert isinstance(entry, BareEntry)
        assert entry.entry_id == 1
        assert product_id_of(entry) == 7

    def test_entry_with_product(self):
        entry = parse_entry({"id": 2, "product": {"id": 8, "name": "Solar lamp"}})
        assert isinstance(entry, ProductEntry)
        assert product_id_of(entry) == 8
        assert entry.product.name == "Solar lamp"

    def test_explicit_product_id_wins(self):
        entry = parse_entry({"id": 3, "productId": 9, "product": {"id": 9}})
        assert product_id_of(entry) == 9

    def test_malformed_product_falls_back_to_bare(self):
        entry = parse_entry({"id": 2, "product": {"id": 8, "stock": 2.5}})
        assert isinstance(entry, BareEntry)
        assert product_id_of(entry) == 8

    def test_unusable_product_id(self):
        with pytest.raises(InvalidWishlistEntryError):
            parse_entry({"id": 2, "productId": ["7"]})

    def test_entry_id_alias(self):
        assert parse_entry({"entryId": "w-1", "productId": 7}).entry_id == "w-1"

    @pytest.mark.parametrize("raw", [{"id": 4}, {"id": 4, "product": {"name": "no id"}}, "7", None])
    def test_invalid_entries(self, raw):
        with pytest.raises(InvalidWishlistEntryError):
            parse_entry(raw)


class TestEntryMatches:
    def test_matches_product_id_across_types(self):
        entry = parse_entry({"productId": 7})
        assert entry_matches(entry, "7") is True
        assert entry_matches(entry, 8) is False

    def test_matches_nested_product(self):
        entry = parse_entry({"productId": "7", "product": {"id": 7}})
        assert entry_matches(entry, 7) is True


class TestWishlistState:
    def test_holds_both_variants(self):
        state = WishlistState(
            wishlist=[parse_entry({"productId": 1}), parse_entry({"product": {"id": 2}})]
        )
        assert [e.kind for e in state.wishlist] == ["bare", "with_product"]
