"""
i18n (Internationalization) package

Locale helpers, the translatable attribute partition, and locale-resolving
queries for content groups.
"""

from .locale import (
    ALL,
    LANGUAGE_NAMES,
    RTL_LOCALES,
    LocaleDescriptor,
    LocaleSelector,
    get_current_locale,
    get_language_info,
    is_rtl_locale,
    normalize_locale,
    parse_accept_language,
    set_current_locale,
    use_locale,
)
from .partition import (
    EntityType,
    FieldKind,
    add_translatable_attributes,
    add_translatable_scope,
    registry,
    translatable,
)
from .query import GroupQuery, LocaleScope, resolve_scope

__all__ = [
    "ALL",
    "LANGUAGE_NAMES",
    "RTL_LOCALES",
    "EntityType",
    "FieldKind",
    "GroupQuery",
    "LocaleDescriptor",
    "LocaleScope",
    "LocaleSelector",
    "add_translatable_attributes",
    "add_translatable_scope",
    "get_current_locale",
    "get_language_info",
    "is_rtl_locale",
    "normalize_locale",
    "parse_accept_language",
    "registry",
    "resolve_scope",
    "set_current_locale",
    "translatable",
    "use_locale",
]
