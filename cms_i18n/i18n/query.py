"""
Locale-resolving queries over content groups

A query over a translatable type may request a locale preference list. When it
does, each content group collapses to one row: among the rows whose locale is
in the list, the one whose locale comes first in the list (lowest id on ties).
Groups without a row in any preferred locale contribute nothing. Including
``ALL`` in the list turns filtering off.

    GroupQuery(Article).locale("es", "ca")          # es, else ca, per group
    GroupQuery(Article).locale("es").locale("en")   # same as locale("es", "en")
    GroupQuery(Article).locale("es", ALL)           # every row, unfiltered
    GroupQuery(Article)                             # no locale scope at all

Builders are immutable: every method returns a new builder and the final
statement is computed from the accumulated state by ``resolve_scope``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from sqlalchemy import ColumnElement, Select, case, func, literal, select
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from cms_i18n.exceptions import InvalidLocaleError
from cms_i18n.i18n.locale import ALL, LocaleSelector, normalize_locale
from cms_i18n.i18n.partition import registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocaleScope:
    """Accumulated locale request of one query."""

    locales: tuple[str | LocaleSelector, ...] = ()

    def extend(self, *locales: str | LocaleSelector) -> LocaleScope:
        return LocaleScope(self.locales + tuple(locales))

    @property
    def includes_all(self) -> bool:
        return ALL in self.locales

    def preference(self) -> list[str]:
        """Requested codes in order, duplicates and ALL removed."""
        seen: list[str] = []
        for locale in self.locales:
            if locale is not ALL and locale not in seen:
                seen.append(locale)
        return seen


def locale_rank(model: type, preference: list[str]) -> ColumnElement:
    """0 for the first preferred locale, 1 for the second, ... len() otherwise."""
    if not preference:
        return literal(0)
    return case(
        *[(model.locale == code, position) for position, code in enumerate(preference)],
        else_=len(preference),
    )


def resolve_scope(model: type, scope: LocaleScope | None, base: Select) -> Select:
    """Rewrite ``base`` to return at most one row per content group.

    The base statement's joins and conditions also restrict the candidate
    rows. ``base`` itself is never modified.
    """
    if scope is None or not registry.is_translatable(model):
        return base
    if scope.includes_all:
        logger.debug("%s: ALL requested, locale filter disabled", model.__name__)
        return base

    preference = scope.preference()
    position = func.row_number().over(
        partition_by=model.content_id,
        order_by=(locale_rank(model, preference), model.id),
    )
    candidates = (
        base.with_only_columns(
            model.id.label("row_id"),
            position.label("position"),
            maintain_column_froms=True,
        )
        .where(model.locale.in_(preference))
        .order_by(None)
        .limit(None)
        .offset(None)
        .correlate(None)
        .subquery("locale_candidates")
    )
    representatives = select(candidates.c.row_id).where(candidates.c.position == 1).correlate(None)
    logger.debug("%s: locale preference %s", model.__name__, preference)
    return base.where(model.id.in_(representatives))


def _coerce_locale(locale: Any) -> str | LocaleSelector:
    if locale is ALL:
        return ALL
    code = normalize_locale(locale)
    if code is None:
        raise InvalidLocaleError(locale)
    return code


@dataclass(frozen=True)
class GroupQuery:
    """Immutable query builder for a content-group type."""

    model: type
    base: Select = field(default=None)
    scope: LocaleScope | None = None

    def __post_init__(self):
        if self.base is None:
            object.__setattr__(self, "base", select(self.model))

    # ── Scopes ────────────────────────────────────────────────────────────────

    def locale(self, *locales: Any) -> GroupQuery:
        """Append to the locale preference list (``ALL`` disables filtering)."""
        requested = tuple(_coerce_locale(locale) for locale in locales)
        return replace(self, scope=(self.scope or LocaleScope()).extend(*requested))

    def content(self, *content_ids: int) -> GroupQuery:
        """Restrict to the given content groups."""
        return self.where(self.model.content_id.in_(content_ids))

    # ── Plain statement building ──────────────────────────────────────────────

    def where(self, *criteria: Any) -> GroupQuery:
        return replace(self, base=self.base.where(*criteria))

    def join(self, target: Any, onclause: Any = None, **kwargs: Any) -> GroupQuery:
        if onclause is None:
            return replace(self, base=self.base.join(target, **kwargs))
        return replace(self, base=self.base.join(target, onclause, **kwargs))

    def order_by(self, *clauses: Any) -> GroupQuery:
        return replace(self, base=self.base.order_by(*clauses))

    def limit(self, limit: int | None) -> GroupQuery:
        return replace(self, base=self.base.limit(limit))

    def offset(self, offset: int | None) -> GroupQuery:
        return replace(self, base=self.base.offset(offset))

    def statement(self) -> Select:
        return resolve_scope(self.model, self.scope, self.base)

    # ── Execution ─────────────────────────────────────────────────────────────

    async def all(self, db: AsyncSession) -> list[Any]:
        result = await db.execute(self.statement())
        return list(result.scalars().all())

    async def first(self, db: AsyncSession) -> Any | None:
        result = await db.execute(self.statement().limit(1))
        return result.scalars().first()

    async def count(self, db: AsyncSession) -> int:
        """Number of matching rows, ignoring limit and offset."""
        stmt = self.statement().order_by(None).limit(None).offset(None)
        count_stmt = select(func.count()).select_from(stmt.subquery())
        return int(await db.scalar(count_stmt))
