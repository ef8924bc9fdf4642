"""
Translation Service

Async functions for the locale rows of a content group.

Functions:
    translate                  — unsaved new row cloned from the group's shared fields
    create_translation         — translate + apply translated values + create
    get_translation            — fetch by (content_id, locale)
    list_translations          — the other-locale rows of a row's group
    get_content_in_locale      — best row of a group for a preference list
    list_languages_for_content — locale codes present in a group
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from cms_i18n.exceptions import ValidationError
from cms_i18n.i18n.partition import registry
from cms_i18n.i18n.query import GroupQuery
from cms_i18n.services.lifecycle import create_row
from cms_i18n.services.sync_service import scope_conditions, untranslatable_values

logger = logging.getLogger(__name__)


async def representative(db: AsyncSession, model: type, content_id: int) -> Any | None:
    """The row of a content group that new translations are cloned from (lowest id)."""
    result = await db.execute(
        select(model).where(model.content_id == content_id).order_by(model.id).limit(1)
    )
    return result.scalars().first()


async def translate(db: AsyncSession, model: type, content_id: int | None, locale: Any) -> Any:
    """Build an unsaved ``model`` row for ``content_id`` in ``locale``.

    Ordinary field values and the content id are copied from the group's
    representative row. If the group has no rows (or ``content_id`` is None)
    a fresh, otherwise empty row is returned. The caller creates it.
    """
    entity = registry.get(model)
    new_translation = model()
    existing = await representative(db, model, content_id) if content_id is not None else None
    if existing is not None:
        for name, value in untranslatable_values(existing, entity).items():
            setattr(new_translation, name, value)
        new_translation.content_id = existing.content_id
    new_translation.locale = locale
    logger.debug(
        "Prepared %s translation content_id=%s locale=%s (cloned=%s)",
        entity.name,
        content_id,
        new_translation.locale,
        existing is not None,
    )
    return new_translation


async def create_translation(
    db: AsyncSession,
    model: type,
    content_id: int,
    locale: Any,
    values: dict[str, Any],
) -> Any:
    """Create a new locale row of an existing (or new) content group.

    ``values`` may set translatable and global fields only; shared fields
    come from the group.

    Raises:
        ValidationError: if ``values`` names a shared field.
        ContentSyncError: if the insert fails.
    """
    entity = registry.get(model)
    shared = set(entity.ordinary_fields())
    for name in values:
        if name in shared:
            raise ValidationError(f"{entity.name}.{name} is shared by the content group", field=name)

    translation = await translate(db, model, content_id, locale)
    for name, value in values.items():
        setattr(translation, name, value)
    translation = await create_row(db, translation)
    logger.info("Translation created: content_id=%s locale=%s", translation.content_id, translation.locale)
    return translation


async def get_translation(
    db: AsyncSession,
    model: type,
    content_id: int,
    locale: Any,
) -> Any | None:
    """Fetch a row by (content_id, locale). Returns None if not found."""
    return await GroupQuery(model).content(content_id).locale(locale).first(db)


async def list_translations(db: AsyncSession, row: Any) -> list[Any]:
    """Rows of ``row``'s content group in other locales.

    The type's sync scopes decide which rows count as translations; ``row``
    itself is never returned.
    """
    model = type(row)
    entity = registry.get(model)
    query = (
        GroupQuery(model)
        .where(model.content_id == row.content_id, model.locale != row.locale)
        .where(*scope_conditions(entity, row))
        .order_by(model.locale)
    )
    return await query.all(db)


async def get_content_in_locale(
    db: AsyncSession,
    model: type,
    content_id: int,
    *locales: Any,
) -> Any | None:
    """Best row of a content group for the preference list ``locales``.

    Tries each locale in order and returns None if the group has no row in
    any of them.
    """
    return await GroupQuery(model).content(content_id).locale(*locales).first(db)


async def list_languages_for_content(
    db: AsyncSession,
    model: type,
    content_id: int,
) -> list[str]:
    """Return locale codes that have a row in this content group."""
    result = await db.execute(
        select(model.locale)
        .where(model.content_id == content_id)
        .distinct()
        .order_by(model.locale)
    )
    return list(result.scalars().all())
