"""
Migration script: assign a bit_index to reference rows created before masks.

Rows of allergies, diets, kitchen_equipments and
ingredient_search_namespaces whose bit_index is NULL get the lowest free
bit of their table, in id order. Masks cannot reference such rows until
this has run.

Usage:
    cd backend
    python -m cli backfill-bit-indexes

The script is idempotent - rows that already have a bit_index are skipped.
"""

from sqlalchemy.orm import Session

from admin_api.repositories import ReferenceItemRepository
from admin_api.services.domain import REFERENCE_TABLES
from shared.config.constants import BitLimits
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit

logger = get_logger(__name__)


def backfill_table(db: Session, table: str) -> dict[str, int]:
    """
    Fill the NULL bit_indexes of one table.

    Rows that no longer fit in the bit range are counted as errors and
    left NULL.
    """
    repo = ReferenceItemRepository(db, REFERENCE_TABLES[table].model)
    used = repo.used_bit_indexes()
    free = [b for b in range(BitLimits.MIN_BIT_INDEX, BitLimits.MAX_BIT_INDEX + 1) if b not in used]

    skipped_count = len(used)
    migrated_count = 0
    error_count = 0

    for row in repo.find_missing_bit_index():
        if not free:
            logger.error("No free bit left", table=table, entity_id=row.id)
            error_count += 1
            continue
        row.bit_index = free.pop(0)
        migrated_count += 1
        logger.debug("Assigned bit_index", table=table, entity_id=row.id, bit_index=row.bit_index)

    if migrated_count:
        safe_commit(db)

    logger.info(
        "Backfill complete",
        table=table,
        migrated=migrated_count,
        skipped=skipped_count,
        errors=error_count,
    )
    return {"migrated": migrated_count, "skipped": skipped_count, "errors": error_count}


def backfill_bit_indexes(db: Session) -> dict[str, dict[str, int]]:
    """Backfill every persisted reference table. Returns counts per table."""
    return {
        name: backfill_table(db, name)
        for name, info in REFERENCE_TABLES.items()
        if info.model is not None
    }
