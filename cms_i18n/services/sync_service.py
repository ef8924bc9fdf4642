"""
Sync Service

Keeps the ordinary (non-translatable, non-global) fields of a content group
identical across its rows. Whenever one row is written, its ordinary values are
copied onto every other row with the same ``content_id``, narrowed by the
type's sync scopes. Translatable and global fields are never touched.

The propagation statement runs in the caller's session; lifecycle services
commit it together with the row's own write.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from sqlalchemy import ColumnElement, text, update
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from cms_i18n.i18n.partition import EntityType, ScopeRule, registry

logger = logging.getLogger(__name__)


class WriteKind(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"


def untranslatable_attributes(entity: EntityType) -> list[str]:
    """Column keys whose values are shared by the whole content group."""
    return entity.ordinary_fields()


def untranslatable_values(row: Any, entity: EntityType | None = None) -> dict[str, Any]:
    """Current values of the row's ordinary fields."""
    entity = entity or registry.get(type(row))
    return {name: getattr(row, name) for name in untranslatable_attributes(entity)}


def _scope_clause(rule: ScopeRule, row: Any) -> ColumnElement:
    condition = rule(row) if callable(rule) else rule
    return text(condition) if isinstance(condition, str) else condition


def scope_conditions(entity: EntityType, row: Any) -> list[ColumnElement]:
    """Evaluate every sync scope of ``entity`` against ``row``."""
    return [_scope_clause(rule, row) for rule in entity.sync_scopes]


def sibling_criteria(entity: EntityType, row: Any) -> list[ColumnElement]:
    """WHERE criteria matching the other rows of ``row``'s content group."""
    model = entity.model
    criteria = [model.content_id == row.content_id]
    if row.id is not None:
        criteria.append(model.id != row.id)
    criteria.extend(scope_conditions(entity, row))
    return criteria


async def sync_translations(db: AsyncSession, row: Any, write_kind: WriteKind) -> int:
    """Copy ``row``'s ordinary field values onto its sibling rows.

    Returns the number of sibling rows updated. Types not declared
    translatable, and rows without a content id, are left alone.
    """
    entity = registry.get(type(row))
    if not entity.translatable or row.content_id is None:
        return 0

    values = untranslatable_values(row, entity)
    if not values:
        return 0

    stmt = (
        update(entity.model)
        .where(*sibling_criteria(entity, row))
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    result = await db.execute(stmt)
    logger.debug(
        "Synced %d sibling(s) of %s content_id=%s on %s",
        result.rowcount,
        entity.name,
        row.content_id,
        write_kind.value,
    )
    return result.rowcount
