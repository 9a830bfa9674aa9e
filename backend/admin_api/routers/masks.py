"""
Mask codec endpoints: encode id selections, decode and count masks.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from admin_api.routers._common import parse_mask
from admin_api.services.domain import get_mask_service
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    MaskCountOutput,
    MaskDecodeOutput,
    MaskEncodeOutput,
    MaskEncodeRequest,
)


router = APIRouter(prefix="/masks", tags=["masks"])


@router.post("/encode", response_model=MaskEncodeOutput)
def encode_mask(
    body: MaskEncodeRequest,
    db: Session = Depends(get_db),
) -> MaskEncodeOutput:
    """OR the bits of the selected items. Unknown ids are ignored."""
    return get_mask_service(db).encode(body.selected_ids, body.reference_table)


@router.get("/decode", response_model=MaskDecodeOutput)
def decode_mask(
    reference_table: str,
    mask: str | None = Query(default=None, description="Non-negative integer; blank means unset"),
    db: Session = Depends(get_db),
) -> MaskDecodeOutput:
    """Items of ``reference_table`` whose bit is set in ``mask``, in display order."""
    return get_mask_service(db).decode(parse_mask(mask), reference_table)


@router.get("/count", response_model=MaskCountOutput)
def count_mask(
    mask: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> MaskCountOutput:
    return get_mask_service(db).count(parse_mask(mask))
