"""
Mask Service - encode, decode and count masks against a reference table.

Codec errors become HTTP errors here: malformed masks give 400, a
reference row without bit_index gives 500.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from shared.config.logging import masks_logger
from shared.utils.admin_schemas import MaskCountOutput, MaskDecodeOutput, MaskEncodeOutput
from shared.utils.exceptions import MaskError, to_http_error
from shared.utils.masks import count_set_bits, decode, encode, normalize_mask
from .reference_service import reference_items, summarize


class MaskService:
    def __init__(self, db: Session):
        self._db = db

    def encode(self, selected_ids: list[int], table: str) -> MaskEncodeOutput:
        items = reference_items(self._db, table)
        try:
            mask = encode(selected_ids, items)
        except MaskError as e:
            raise to_http_error(e, table=table)

        known = {item.id for item in items}
        unknown = sorted(set(selected_ids) - known)
        if unknown:
            masks_logger.debug("Ignoring unknown ids while encoding", table=table, unknown_ids=unknown)

        return MaskEncodeOutput(reference_table=table, mask=mask)

    def decode(self, mask: int | None, table: str) -> MaskDecodeOutput:
        items = reference_items(self._db, table)
        try:
            value = normalize_mask(mask)
            decoded = decode(value, items)
        except MaskError as e:
            raise to_http_error(e, table=table, mask=mask)

        return MaskDecodeOutput(
            reference_table=table,
            mask=value,
            count=count_set_bits(value),
            items=summarize(decoded, table),
        )

    def count(self, mask: int | None) -> MaskCountOutput:
        try:
            value = normalize_mask(mask)
        except MaskError as e:
            raise to_http_error(e, mask=mask)
        return MaskCountOutput(mask=value, count=count_set_bits(value))


def get_mask_service(db: Session) -> MaskService:
    return MaskService(db)
