"""
Property-based tests for the bitmask codec with Hypothesis.
"""

from dataclasses import dataclass

from hypothesis import given, settings, strategies as st

from shared.config.constants import BitLimits
from shared.utils.masks import (
    bits_of,
    clear_bits,
    count_set_bits,
    decode,
    encode,
    mask_from_bits,
    matches_all,
    set_bit,
)


@dataclass(frozen=True)
class Item:
    id: int
    bit_index: int


bit_indexes = st.integers(min_value=BitLimits.MIN_BIT_INDEX, max_value=BitLimits.MAX_BIT_INDEX)
masks = st.integers(min_value=0, max_value=(1 << (BitLimits.MAX_BIT_INDEX + 1)) - 1)


@st.composite
def reference_tables(draw):
    """Items with distinct ids and distinct bit indexes."""
    bits = draw(st.lists(bit_indexes, unique=True, max_size=BitLimits.BIT_COUNT))
    return [Item(id=100 + position, bit_index=b) for position, b in enumerate(bits)]


@st.composite
def tables_with_selection(draw):
    items = draw(reference_tables())
    selected = draw(st.lists(st.sampled_from(items), unique=True)) if items else []
    return items, selected


class TestCodecProperties:
    """Properties that hold for every reference table."""

    @given(data=tables_with_selection())
    @settings(max_examples=100)
    def test_decode_inverts_encode(self, data):
        """Property: decoding an encoded selection gives the selection back."""
        items, selected = data
        mask = encode([item.id for item in selected], items)
        assert set(decode(mask, items)) == set(selected)

    @given(data=tables_with_selection())
    @settings(max_examples=100)
    def test_popcount_equals_selection_size(self, data):
        """Property: one bit per selected item."""
        items, selected = data
        assert count_set_bits(encode([item.id for item in selected], items)) == len(selected)

    @given(items=reference_tables(), mask=masks)
    @settings(max_examples=100)
    def test_reencoding_a_decoded_mask_drops_orphan_bits_only(self, items, mask):
        """Property: encode(decode(m)) keeps exactly the bits owned by an item."""
        owned = mask_from_bits(item.bit_index for item in items)
        reencoded = encode([item.id for item in decode(mask, items)], items)
        assert reencoded == mask & owned

    @given(data=tables_with_selection())
    @settings(max_examples=100)
    def test_a_mask_matches_its_own_selection(self, data):
        items, selected = data
        mask = encode([item.id for item in selected], items)
        assert matches_all(mask, [item.id for item in selected], items)


class TestBitProperties:
    """Properties of the single-bit helpers."""

    @given(mask=masks, bit_index=bit_indexes)
    def test_set_then_clear_removes_only_that_bit(self, mask, bit_index):
        assert clear_bits(set_bit(mask, bit_index), [bit_index]) == mask & ~(1 << bit_index)

    @given(mask=masks, bit_index=bit_indexes)
    def test_set_bit_is_idempotent(self, mask, bit_index):
        once = set_bit(mask, bit_index)
        assert set_bit(once, bit_index) == once

    @given(mask=masks)
    def test_bits_of_rebuilds_the_mask(self, mask):
        assert mask_from_bits(bits_of(mask)) == mask
        assert len(bits_of(mask)) == count_set_bits(mask)
