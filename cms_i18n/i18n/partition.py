"""
Attribute partition for content groups

Every entity type that stores content groups classifies its fields into:

- translatable: may differ between the locale rows of one content group
- global: always independent per row (``locale``, ``content_id`` and any
  field added through ``add_translatable_attributes``)
- ordinary: everything else; kept identical across a content group

Classifications live in an explicit registry keyed by type. A type's entry is
created when the type is derived (``ContentGroupMixin`` subclasses register
themselves) by copying the nearest registered ancestor's entry, so later
changes to an ancestor never leak into types that were already derived.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from sqlalchemy import ColumnElement, event
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper

from cms_i18n.config import settings
from cms_i18n.exceptions import TranslatableConfigurationError
from cms_i18n.i18n.locale import normalize_locale

logger = logging.getLogger(__name__)

DEFAULT_GLOBAL_FIELDS: tuple[str, ...] = ("locale", "content_id")
TIMESTAMP_FIELDS: tuple[str, ...] = ("created_at", "updated_at")

# A literal SQL condition, a SQLAlchemy expression, or a callable building
# either from the row being written
ScopeRule = Union[str, ColumnElement, Callable[[Any], Union[str, ColumnElement]]]


class FieldKind(str, enum.Enum):
    TRANSLATABLE = "translatable"
    GLOBAL = "global"
    ORDINARY = "ordinary"


@dataclass
class EntityType:
    """Static field classification of one entity type."""

    model: type
    translatable: bool = False
    translatable_fields: list[str] = field(default_factory=list)
    # Per-row timestamps added by translatable() unless suppressed
    independent_fields: list[str] = field(default_factory=list)
    global_fields: list[str] = field(default_factory=lambda: list(DEFAULT_GLOBAL_FIELDS))
    sync_scopes: list[ScopeRule] = field(default_factory=list)

    def derive(self, model: type) -> EntityType:
        """Snapshot this entry for a newly derived subtype."""
        return EntityType(
            model=model,
            translatable=self.translatable,
            translatable_fields=list(self.translatable_fields),
            independent_fields=list(self.independent_fields),
            global_fields=list(self.global_fields),
            sync_scopes=list(self.sync_scopes),
        )

    @property
    def name(self) -> str:
        return self.model.__name__

    @property
    def table_name(self) -> str:
        return getattr(self.model, "__tablename__", None) or self.model.__name__.lower()

    @property
    def sequence_name(self) -> str:
        return f"{self.table_name}{settings.content_id_sequence_suffix}"

    def classify(self, name: str) -> FieldKind:
        if name in self.global_fields:
            return FieldKind.GLOBAL
        if name in self.translatable_fields or name in self.independent_fields:
            return FieldKind.TRANSLATABLE
        return FieldKind.ORDINARY

    def column_names(self) -> list[str]:
        """Mapped column attribute keys, primary keys excluded."""
        mapper = _mapper_for(self.model)
        if mapper is None:
            return []
        primary_keys = {column.key for column in mapper.primary_key}
        return [
            prop.key
            for prop in mapper.column_attrs
            if not any(column.key in primary_keys for column in prop.columns)
        ]

    def ordinary_fields(self) -> list[str]:
        return [name for name in self.column_names() if self.classify(name) is FieldKind.ORDINARY]


def _mapper_for(model: type) -> Mapper | None:
    mapper = sa_inspect(model, raiseerr=False)
    return mapper if isinstance(mapper, Mapper) else None


def _normalize_locale_on_set(target, value, oldvalue, initiator):
    return normalize_locale(value)


class PartitionRegistry:
    """Registry of EntityType entries keyed by type identity."""

    def __init__(self) -> None:
        self._entries: dict[type, EntityType] = {}
        self._normalized: set[type] = set()

    def __contains__(self, model: type) -> bool:
        return model in self._entries

    def _parent_entry(self, model: type) -> EntityType | None:
        for base in model.__mro__[1:]:
            entry = self._entries.get(base)
            if entry is not None:
                return entry
        return None

    def register(self, model: type) -> EntityType:
        """Create the entry for ``model`` from its nearest registered ancestor."""
        entry = self._entries.get(model)
        if entry is not None:
            return entry
        parent = self._parent_entry(model)
        entry = parent.derive(model) if parent is not None else EntityType(model=model)
        self._entries[model] = entry
        logger.debug("Registered entity type %s", model.__name__)
        return entry

    def get(self, model: type) -> EntityType:
        """Return the entry for ``model``, registering it on first use."""
        entry = self._entries.get(model)
        if entry is None:
            entry = self.register(model)
        return entry

    def is_translatable(self, model: type) -> bool:
        entry = self._entries.get(model)
        return entry is not None and entry.translatable

    def translatable(self, model: type, *fields: str, timestamps: bool | None = None) -> EntityType:
        """Declare ``fields`` translatable on ``model``.

        The type's list becomes its parent's current list followed by
        ``fields``. Unless ``timestamps`` is False (default from settings),
        ``created_at`` and ``updated_at`` also become per-row fields.
        """
        entry = self.register(model)
        parent = self._parent_entry(model)
        self._validate(entry, fields)

        inherited = parent.translatable_fields if parent is not None else []
        entry.translatable_fields = list(inherited) + list(fields)

        independent = list(parent.independent_fields) if parent is not None else []
        if settings.translatable_timestamps if timestamps is None else timestamps:
            independent += [name for name in TIMESTAMP_FIELDS if name not in independent]
        entry.independent_fields = independent

        entry.translatable = True
        self._install_locale_normalizer(model)
        logger.debug("%s translatable fields: %s", entry.name, entry.translatable_fields)
        return entry

    def add_global_fields(self, model: type, *fields: str) -> EntityType:
        entry = self.register(model)
        entry.global_fields += list(fields)
        return entry

    def add_sync_scope(self, model: type, rule: ScopeRule) -> EntityType:
        entry = self.register(model)
        entry.sync_scopes.append(rule)
        return entry

    def classify(self, model: type, name: str) -> FieldKind:
        return self.get(model).classify(name)

    def ordinary_fields(self, model: type) -> list[str]:
        return self.get(model).ordinary_fields()

    def _validate(self, entry: EntityType, fields: Iterable[str]) -> None:
        mapper = _mapper_for(entry.model)
        for name in fields:
            if name in entry.global_fields:
                raise TranslatableConfigurationError(
                    f"'{name}' is independent per row and cannot be declared translatable",
                    model=entry.name,
                    field=name,
                )
            if mapper is not None and name not in mapper.attrs:
                raise TranslatableConfigurationError(
                    f"{entry.name} has no attribute '{name}'",
                    model=entry.name,
                    field=name,
                )

    def _install_locale_normalizer(self, model: type) -> None:
        mapper = _mapper_for(model)
        if mapper is None or "locale" not in mapper.attrs:
            return
        if any(base in self._normalized for base in model.__mro__):
            return
        event.listen(getattr(model, "locale"), "set", _normalize_locale_on_set, retval=True, propagate=True)
        self._normalized.add(model)


registry = PartitionRegistry()


def translatable(*fields: str, timestamps: bool | None = None):
    """Class decorator declaring the translatable fields of a model.

    EXAMPLE:

        @translatable("title", "body")
        class Article(ContentGroupMixin, Base):
            ...
    """

    def decorator(cls):
        registry.translatable(cls, *fields, timestamps=timestamps)
        return cls

    return decorator


def add_translatable_attributes(model: type, *fields: str) -> None:
    """Make ``fields`` independent per row on ``model`` and types derived later."""
    registry.add_global_fields(model, *fields)


def add_translatable_scope(model: type, condition: ScopeRule) -> None:
    """Restrict sibling propagation on ``model`` to rows matching ``condition``.

    ``condition`` is a SQL string (``"articles.is_active = 1"``), a SQLAlchemy
    expression, or a callable receiving the row being written and returning
    either.
    """
    registry.add_sync_scope(model, condition)
