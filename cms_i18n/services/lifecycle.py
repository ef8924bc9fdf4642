"""
Lifecycle Service

Create and update entry points for content-group rows. Each write runs a fixed
pipeline of named stages before the row's own INSERT/UPDATE:

    create: assign_content_id → assign_default_locale → apply_column_defaults
            → sync_on_create → INSERT
    update: sync_on_update → UPDATE

The stages and the row's own write share one transaction: if any of them
fails, the session is rolled back and nothing of the logical write is kept.
Concurrent writers to the same content group are last-writer-wins.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from cms_i18n.exceptions import CMSError, ContentSyncError, ValidationError
from cms_i18n.i18n.locale import get_current_locale
from cms_i18n.i18n.partition import EntityType, registry
from cms_i18n.services import sequence_service
from cms_i18n.services.sync_service import WriteKind, sync_translations

logger = logging.getLogger(__name__)

Stage = Callable[[AsyncSession, Any, EntityType], Awaitable[None]]

# Marks a column whose create-time value only the database knows
_SERVER_SIDE = object()


# ── Stages ────────────────────────────────────────────────────────────────────


async def assign_content_id(db: AsyncSession, row: Any, entity: EntityType) -> None:
    if entity.translatable and row.content_id is None:
        # Groups created with an explicit content id may be ahead of the sequence
        highest = await db.scalar(select(func.max(entity.model.content_id)))
        row.content_id = await sequence_service.next_value(db, entity.sequence_name, floor=highest or 0)


async def assign_default_locale(db: AsyncSession, row: Any, entity: EntityType) -> None:
    if hasattr(entity.model, "locale") and row.locale is None:
        row.locale = get_current_locale()


def _column_default(column) -> Any:
    default = column.default
    if default is None:
        return _SERVER_SIDE if column.server_default is not None else None
    if default.is_scalar:
        return default.arg
    if default.is_callable:
        return default.arg(None)
    return _SERVER_SIDE


async def apply_column_defaults(db: AsyncSession, row: Any, entity: EntityType) -> None:
    """Resolve Python-side defaults of unset ordinary fields.

    The row is inserted after its siblings are synced, so the values it will
    be inserted with must be known before propagation.
    """
    if not entity.translatable:
        return
    mapper = sa_inspect(entity.model)
    for name in entity.ordinary_fields():
        if name in row.__dict__:
            continue
        value = _column_default(mapper.attrs[name].columns[0])
        if value is not _SERVER_SIDE:
            setattr(row, name, value)


async def sync_on_create(db: AsyncSession, row: Any, entity: EntityType) -> None:
    await sync_translations(db, row, WriteKind.CREATE)


async def sync_on_update(db: AsyncSession, row: Any, entity: EntityType) -> None:
    await sync_translations(db, row, WriteKind.UPDATE)


BEFORE_CREATE: tuple[Stage, ...] = (
    assign_content_id,
    assign_default_locale,
    apply_column_defaults,
    sync_on_create,
)

BEFORE_UPDATE: tuple[Stage, ...] = (sync_on_update,)


# ── Entry points ──────────────────────────────────────────────────────────────


async def _run_stages(db: AsyncSession, row: Any, entity: EntityType, stages: tuple[Stage, ...]) -> None:
    for stage in stages:
        logger.debug("%s: running stage %s", entity.name, stage.__name__)
        await stage(db, row, entity)


async def _load_columns(db: AsyncSession, row: Any, entity: EntityType) -> None:
    """Make sure every column of a persistent row is loaded before it is read."""
    state = sa_inspect(row)
    if state.detached:
        db.add(row)
    unloaded = [name for name in state.unloaded if name in entity.column_names() or name == "id"]
    if state.persistent and unloaded:
        await db.refresh(row, attribute_names=unloaded)


async def create_row(db: AsyncSession, row: Any) -> Any:
    """Insert ``row`` after running the create pipeline, then commit.

    Raises:
        ContentSyncError: if sibling propagation or the insert fails.
        SequenceAllocationError: if no content id could be allocated.
        InvalidLocaleError: if the row's locale cannot be normalized.
    """
    entity = registry.get(type(row))
    try:
        await _run_stages(db, row, entity, BEFORE_CREATE)
        db.add(row)
        await db.flush()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error creating %s: %s", entity.name, e)
        raise ContentSyncError(f"Failed to create {entity.name}: {e}", operation="create") from e
    except CMSError:
        await db.rollback()
        raise

    await db.refresh(row)
    logger.info("%s created: id=%s content_id=%s locale=%s", entity.name, row.id, row.content_id, row.locale)
    return row


async def update_row(db: AsyncSession, row: Any, updates: dict[str, Any] | None = None) -> Any:
    """Apply ``updates`` to ``row``, propagate ordinary fields, then commit.

    Only mapped columns may be updated; the primary key and ``content_id``
    are fixed.

    Raises:
        ValidationError: if ``updates`` names a field that cannot be written,
            or sets a NOT NULL field to None.
        ContentSyncError: if sibling propagation or the update fails.
    """
    entity = registry.get(type(row))
    await _load_columns(db, row, entity)

    writable = set(entity.column_names()) - {"content_id"}
    mapper = sa_inspect(entity.model)
    row_id = row.id
    try:
        for name, value in (updates or {}).items():
            if name not in writable:
                raise ValidationError(f"{entity.name}.{name} cannot be updated", field=name)
            if value is None and not mapper.attrs[name].columns[0].nullable:
                raise ValidationError(f"{entity.name}.{name} cannot be null", field=name)
            setattr(row, name, value)
        await _run_stages(db, row, entity, BEFORE_UPDATE)
        await db.flush()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error updating %s id=%s: %s", entity.name, row_id, e)
        raise ContentSyncError(f"Failed to update {entity.name}: {e}", operation="update") from e
    except CMSError:
        await db.rollback()
        raise

    await db.refresh(row)
    logger.info("%s updated: id=%s content_id=%s locale=%s", entity.name, row.id, row.content_id, row.locale)
    return row


async def delete_row(db: AsyncSession, row: Any) -> None:
    """Delete one row; the rest of its content group is kept."""
    entity = registry.get(type(row))
    row_id, content_id = row.id, row.content_id
    try:
        await db.delete(row)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error deleting %s id=%s: %s", entity.name, row_id, e)
        raise ContentSyncError(f"Failed to delete {entity.name}: {e}", operation="delete") from e
    logger.info("%s deleted: id=%s content_id=%s", entity.name, row_id, content_id)
