"""
Sequence Service

Allocates content ids: one named integer sequence per content-group table.

Allocators:
    NativeSequenceAllocator — database sequences (PostgreSQL), created on first use
    TableSequenceAllocator  — counter rows in ``content_sequences`` (any database)

Both run inside the caller's session so an allocation belongs to the same
unit of work as the create that needs it. Callers pass the highest id already
stored as ``floor``; the value returned is always above it, so rows created
with an explicit content id never collide with later allocations.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import Sequence, case, func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002
from sqlalchemy.schema import CreateSequence

from cms_i18n.config import settings
from cms_i18n.exceptions import SequenceAllocationError
from cms_i18n.models.content_sequence import ContentSequence

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class SequenceAllocator(Protocol):
    async def next_value(self, db: AsyncSession, name: str, floor: int = 0) -> int: ...


class NativeSequenceAllocator:
    """Uses ``CREATE SEQUENCE IF NOT EXISTS`` and ``nextval``."""

    async def next_value(self, db: AsyncSession, name: str, floor: int = 0) -> int:
        sequence = Sequence(name)
        await db.execute(CreateSequence(sequence, if_not_exists=True))
        value = int(await db.scalar(select(sequence.next_value())))
        if value <= floor:
            # Sequence is behind explicitly assigned ids; move it past them
            await db.scalar(select(func.setval(name, floor)))
            value = int(await db.scalar(select(sequence.next_value())))
        return value


class TableSequenceAllocator:
    """Increments the counter row for ``name``, creating it on first use."""

    async def next_value(self, db: AsyncSession, name: str, floor: int = 0) -> int:
        table = ContentSequence.__table__
        advanced = case((table.c.value > floor, table.c.value + 1), else_=floor + 1)

        upsert_insert = UPSERT_INSERTS.get(db.get_bind().dialect.name)
        if upsert_insert is not None:
            stmt = (
                upsert_insert(table)
                .values(name=name, value=floor + 1)
                .on_conflict_do_update(index_elements=[table.c.name], set_={"value": advanced})
                .returning(table.c.value)
            )
            return int(await db.scalar(stmt))

        result = await db.execute(update(table).where(table.c.name == name).values(value=advanced))
        if result.rowcount == 0:
            await db.execute(insert(table).values(name=name, value=floor + 1))
            return floor + 1
        return int(await db.scalar(select(table.c.value).where(table.c.name == name)))


def get_allocator(db: AsyncSession) -> SequenceAllocator:
    """Pick the allocator configured by ``settings.sequence_backend``."""
    backend = settings.sequence_backend
    if backend == "auto":
        backend = "native" if db.get_bind().dialect.name == "postgresql" else "table"
    if backend == "native":
        return NativeSequenceAllocator()
    return TableSequenceAllocator()


async def next_value(
    db: AsyncSession,
    name: str,
    allocator: SequenceAllocator | None = None,
    floor: int = 0,
) -> int:
    """Allocate the next value of sequence ``name``, greater than ``floor``.

    Raises:
        SequenceAllocationError: if the database rejects the allocation.
    """
    allocator = allocator or get_allocator(db)
    try:
        value = await allocator.next_value(db, name, floor=floor)
    except SQLAlchemyError as e:
        logger.error("Sequence allocation failed for %s: %s", name, e)
        raise SequenceAllocationError(name) from e
    logger.debug("Allocated %s=%d", name, value)
    return value
