"""
Bitmask codec for multi-valued reference attributes.

A mask is a non-negative integer where bit ``b`` set means "associated
with the reference item whose bit_index is b". Reference items are any
objects exposing ``id`` and ``bit_index`` attributes (ORM rows, the
static season months, test doubles).

``None`` and ``0`` are both read as the empty set. Every function here is
pure; nothing touches the database.

Usage:
    from shared.utils.masks import encode, decode, matches_all

    mask = encode([diet.id for diet in chosen], all_diets)
    labels = [d.title["fr"] for d in decode(recipe.diet_mask, all_diets)]
    keep = matches_all(recipe.diet_mask, requested_ids, all_diets)
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol, TypeVar

from shared.config.constants import BitLimits
from shared.utils.exceptions import (
    BitIndexRangeError,
    MaskTypeError,
    MaskValueError,
    MissingBitIndexError,
)


class BitIndexed(Protocol):
    id: int
    bit_index: int | None


ItemT = TypeVar("ItemT", bound=BitIndexed)
RecordT = TypeVar("RecordT")


# =============================================================================
# Validation
# =============================================================================


def normalize_mask(mask: Any) -> int:
    """
    Return ``mask`` as an int, reading ``None`` as 0.

    Raises:
        MaskTypeError: mask is not an int (bool is rejected too)
        MaskValueError: mask is negative or wider than the usable bits
    """
    if mask is None:
        return 0
    if isinstance(mask, bool) or not isinstance(mask, int):
        raise MaskTypeError(f"Mask must be an integer, got {type(mask).__name__}")
    if mask < 0:
        raise MaskValueError(f"Mask must be non-negative, got {mask}")
    if mask > BitLimits.MAX_MASK:
        raise MaskValueError(
            f"Mask must fit in bits {BitLimits.MIN_BIT_INDEX}-{BitLimits.MAX_BIT_INDEX}, got {mask}"
        )
    return mask


def validate_bit_index(bit_index: Any) -> int:
    """Raise BitIndexRangeError unless bit_index is an int in [0, 30]."""
    if isinstance(bit_index, bool) or not isinstance(bit_index, int):
        raise BitIndexRangeError(f"bit_index must be an integer, got {type(bit_index).__name__}")
    if not BitLimits.MIN_BIT_INDEX <= bit_index <= BitLimits.MAX_BIT_INDEX:
        raise BitIndexRangeError(
            f"bit_index must be between {BitLimits.MIN_BIT_INDEX} and "
            f"{BitLimits.MAX_BIT_INDEX}, got {bit_index}"
        )
    return bit_index


def item_bit_index(item: BitIndexed) -> int:
    bit_index = getattr(item, "bit_index", None)
    if bit_index is None:
        raise MissingBitIndexError(
            f"Reference item {getattr(item, 'id', '?')} has no bit_index; "
            "run the backfill-bit-indexes command"
        )
    return validate_bit_index(bit_index)


# =============================================================================
# Bit helpers
# =============================================================================


def bit(bit_index: int) -> int:
    """Single-bit mask for ``bit_index``."""
    return 1 << validate_bit_index(bit_index)


def mask_from_bits(bit_indexes: Iterable[int]) -> int:
    mask = 0
    for bit_index in bit_indexes:
        mask |= bit(bit_index)
    return mask


def set_bit(mask: Any, bit_index: int) -> int:
    return normalize_mask(mask) | bit(bit_index)


def clear_bits(mask: Any, bit_indexes: Iterable[int]) -> int:
    return normalize_mask(mask) & ~mask_from_bits(bit_indexes)


def bits_of(mask: Any) -> list[int]:
    """Positions of the set bits, ascending."""
    value = normalize_mask(mask)
    positions = []
    position = 0
    while value:
        if value & 1:
            positions.append(position)
        value >>= 1
        position += 1
    return positions


def count_set_bits(mask: Any) -> int:
    """Number of set bits. None and 0 count as 0."""
    return bin(normalize_mask(mask)).count("1")


# =============================================================================
# Codec
# =============================================================================


def encode(selected_ids: Iterable[int], items: Sequence[BitIndexed]) -> int:
    """
    OR together the bits of the selected reference items.

    Ids that do not belong to ``items`` are ignored. Order and duplicates
    in ``selected_ids`` do not matter. An empty selection encodes to 0.
    """
    wanted = set(selected_ids)
    mask = 0
    for item in items:
        if item.id in wanted:
            mask |= 1 << item_bit_index(item)
    return mask


def decode(mask: Any, items: Sequence[ItemT]) -> list[ItemT]:
    """
    Reference items whose bit is set in ``mask``, in the order of ``items``.

    Bits with no matching item are ignored.
    """
    value = normalize_mask(mask)
    if value == 0:
        return []
    return [item for item in items if value & (1 << item_bit_index(item))]


def contains(mask: Any, item: BitIndexed) -> bool:
    return bool(normalize_mask(mask) & (1 << item_bit_index(item)))


# =============================================================================
# Filters
# =============================================================================


def required_mask(required_ids: Iterable[int], items: Sequence[BitIndexed]) -> int | None:
    """
    Mask a subject must contain to satisfy every id in ``required_ids``.

    Returns None when one of the ids is not in ``items``: such a
    requirement can never be met.
    """
    by_id = {item.id: item for item in items}
    mask = 0
    for item_id in set(required_ids):
        item = by_id.get(item_id)
        if item is None:
            return None
        mask |= 1 << item_bit_index(item)
    return mask


def matches_all(subject_mask: Any, required_ids: Iterable[int], items: Sequence[BitIndexed]) -> bool:
    """
    True when the subject carries every required item.

    An empty requirement matches every subject, including unset ones.
    """
    subject = normalize_mask(subject_mask)
    required = required_mask(required_ids, items)
    if required is None:
        return False
    return subject & required == required


def matches_any(subject_mask: Any, ids: Iterable[int], items: Sequence[BitIndexed]) -> bool:
    """
    True when the subject carries at least one of ``ids``.

    An empty id list places no constraint and matches every subject.
    Unknown ids are ignored.
    """
    wanted = set(ids)
    if not wanted:
        return True
    subject = normalize_mask(subject_mask)
    return bool(subject & encode(wanted, items))


def filter_by_mask(
    records: Iterable[RecordT],
    get_mask: Callable[[RecordT], Any],
    required: int | None,
) -> list[RecordT]:
    """
    Keep the records whose mask contains every bit of ``required``.

    ``required`` normally comes from required_mask(); None keeps nothing.
    """
    if required is None:
        return []
    required = normalize_mask(required)
    return [record for record in records if normalize_mask(get_mask(record)) & required == required]
