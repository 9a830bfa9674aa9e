"""
Tests for the bitmask codec and the /api/masks endpoints.
"""

from dataclasses import dataclass

import pytest

from shared.utils.exceptions import (
    BitIndexRangeError,
    MaskTypeError,
    MaskValueError,
    MissingBitIndexError,
)
from shared.utils.masks import (
    bits_of,
    clear_bits,
    contains,
    count_set_bits,
    decode,
    encode,
    filter_by_mask,
    mask_from_bits,
    matches_all,
    matches_any,
    normalize_mask,
    required_mask,
    set_bit,
)


@dataclass
class Item:
    id: int
    bit_index: int | None


# ids 10, 11, 12 own bits 0, 3, 5
ITEMS = [Item(10, 0), Item(11, 3), Item(12, 5)]


class TestEncodeDecode:
    """Encoding selections and decoding masks."""

    def test_encode_sets_the_bits_of_selected_items(self):
        assert encode([10, 12], ITEMS) == 0b100001

    def test_encode_ignores_order_and_duplicates(self):
        assert encode([12, 10, 12], ITEMS) == encode([10, 12], ITEMS)

    def test_encode_ignores_unknown_ids(self):
        assert encode([11, 999], ITEMS) == 0b1000

    def test_encode_empty_selection_is_zero(self):
        assert encode([], ITEMS) == 0

    def test_decode_keeps_item_order(self):
        assert [item.id for item in decode(0b101001, ITEMS)] == [10, 11, 12]

    def test_decode_ignores_bits_without_item(self):
        assert [item.id for item in decode(0b1000 | (1 << 20), ITEMS)] == [11]

    def test_decode_none_and_zero_are_empty(self):
        assert decode(None, ITEMS) == []
        assert decode(0, ITEMS) == []

    def test_item_without_bit_index_fails_loudly(self):
        items = ITEMS + [Item(13, None)]
        with pytest.raises(MissingBitIndexError):
            encode([13], items)
        with pytest.raises(MissingBitIndexError):
            decode(1, items)


class TestValidation:
    """Mask and bit_index validation."""

    def test_none_normalizes_to_zero(self):
        assert normalize_mask(None) == 0

    @pytest.mark.parametrize("value", ["3", 1.5, True])
    def test_non_integer_mask_rejected(self, value):
        with pytest.raises(MaskTypeError):
            normalize_mask(value)

    def test_negative_mask_rejected(self):
        with pytest.raises(MaskValueError):
            normalize_mask(-1)

    @pytest.mark.parametrize("mask", [1 << 31, 1 << 40])
    def test_mask_wider_than_usable_bits_rejected(self, mask):
        with pytest.raises(MaskValueError):
            normalize_mask(mask)

    def test_every_usable_bit_set(self):
        assert normalize_mask((1 << 31) - 1) == (1 << 31) - 1

    @pytest.mark.parametrize("bit_index", [-1, 31, 64])
    def test_bit_index_out_of_range(self, bit_index):
        with pytest.raises(BitIndexRangeError):
            mask_from_bits([bit_index])

    def test_bit_30_is_usable(self):
        assert mask_from_bits([30]) == 1 << 30


class TestDietsExample:
    """Vegan, Vegetarian and Gluten-free on bits 0, 1 and 2."""

    DIETS = [Item(1, 0), Item(2, 1), Item(3, 2)]

    def test_encode_vegan_and_gluten_free(self):
        assert encode({1, 3}, self.DIETS) == 5

    def test_decode_five(self):
        assert decode(5, self.DIETS) == [self.DIETS[0], self.DIETS[2]]

    def test_vegetarian_not_required_by_five(self):
        assert matches_all(5, {2}, self.DIETS) is False
        assert matches_all(5, {1, 3}, self.DIETS) is True


class TestContains:
    """Single-item membership."""

    def test_set_bit(self):
        assert contains(0b1000, ITEMS[1])

    def test_unset_bit(self):
        assert not contains(0b1000, ITEMS[0])

    def test_unset_mask(self):
        assert not contains(None, ITEMS[0])
        assert not contains(0, ITEMS[2])

    def test_orphan_bits_do_not_count(self):
        # Bits 1 and 20 belong to no item
        assert not contains(0b10 | (1 << 20), ITEMS[0])

    def test_item_without_bit_index(self):
        with pytest.raises(MissingBitIndexError):
            contains(1, Item(13, None))


class TestBitHelpers:
    """Single-bit helpers and counting."""

    def test_set_bit_is_idempotent(self):
        assert set_bit(set_bit(0, 4), 4) == 16

    def test_clear_bits_leaves_other_bits(self):
        assert clear_bits(0b1111, [1, 2]) == 0b1001

    def test_clear_bits_on_unset_mask(self):
        assert clear_bits(None, [3]) == 0

    def test_bits_of_ascending(self):
        assert bits_of(0b100101) == [0, 2, 5]

    def test_count_set_bits(self):
        assert count_set_bits(None) == 0
        assert count_set_bits(0b1011) == 3


class TestFilters:
    """Subset and intersection predicates."""

    def test_matches_all_requires_every_bit(self):
        assert matches_all(0b101001, [10, 12], ITEMS)
        assert not matches_all(0b000001, [10, 12], ITEMS)

    def test_empty_requirement_matches_unset_subject(self):
        assert matches_all(None, [], ITEMS)

    def test_unknown_required_id_never_matches(self):
        assert required_mask([999], ITEMS) is None
        assert not matches_all(0b101001, [10, 999], ITEMS)

    def test_matches_any(self):
        assert matches_any(0b1000, [10, 11], ITEMS)
        assert not matches_any(0b0001, [11, 12], ITEMS)
        assert matches_any(0, [], ITEMS)

    def test_filter_by_mask(self):
        records = [("a", 0b1001), ("b", 0b0001), ("c", None)]
        kept = filter_by_mask(records, lambda record: record[1], required_mask([10, 11], ITEMS))
        assert [name for name, _ in kept] == ["a"]

    def test_filter_by_mask_with_impossible_requirement(self):
        assert filter_by_mask([("a", 0b1001)], lambda record: record[1], None) == []


class TestMaskEndpoints:
    """Test /api/masks endpoints against seeded reference tables."""

    def test_encode(self, client, seed_diets):
        response = client.post(
            "/api/masks/encode",
            json={"reference_table": "diets", "selected_ids": [1, 2, 42]},
        )
        assert response.status_code == 200
        assert response.json() == {"reference_table": "diets", "mask": 0b1010}

    def test_encode_unknown_table(self, client):
        response = client.post("/api/masks/encode", json={"reference_table": "colors", "selected_ids": [1]})
        assert response.status_code == 422

    def test_decode(self, client, seed_allergies):
        # Lactose (bit 0) and Eggs (bit 5); bit 9 has no owner
        response = client.get("/api/masks/decode", params={"reference_table": "allergies", "mask": 0b1000100001})
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert [item["label"] for item in data["items"]] == ["Lactose", "Oeufs"]
        assert data["items"][0] == {"id": 2, "bit_index": 0, "label": "Lactose", "emoji": "🥛"}

    def test_decode_blank_mask_is_empty(self, client, seed_allergies):
        response = client.get("/api/masks/decode", params={"reference_table": "allergies"})
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["mask"] == 0

    def test_decode_seasonality(self, client):
        # January and December
        response = client.get("/api/masks/decode", params={"reference_table": "seasonality", "mask": 1 | 1 << 11})
        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == [1, 12]

    @pytest.mark.parametrize("mask", ["-4", "abc", "1.5", str(1 << 31)])
    def test_decode_rejects_bad_mask(self, client, seed_allergies, mask):
        response = client.get("/api/masks/decode", params={"reference_table": "allergies", "mask": mask})
        assert response.status_code == 400

    def test_decode_unknown_table(self, client):
        response = client.get("/api/masks/decode", params={"reference_table": "colors", "mask": 1})
        assert response.status_code == 400

    def test_decode_with_missing_bit_index_is_server_error(self, client, db_session, seed_allergies):
        seed_allergies[0].bit_index = None
        db_session.commit()
        response = client.get("/api/masks/decode", params={"reference_table": "allergies", "mask": 1})
        assert response.status_code == 500
        assert "backfill" in response.json()["detail"]

    def test_count(self, client):
        response = client.get("/api/masks/count", params={"mask": 0b10110})
        assert response.status_code == 200
        assert response.json() == {"mask": 22, "count": 3}

    def test_count_rejects_wide_mask(self, client):
        response = client.get("/api/masks/count", params={"mask": 1 << 40})
        assert response.status_code == 400
