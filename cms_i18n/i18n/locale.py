"""
Locale helpers

Functions for locale handling across content groups:
- Normalizing locale descriptors to the plain code string that is stored
- The ambient "current locale" used when a row is created without one
- The ALL selector that disables locale filtering on a query
- Accept-Language header parsing with quality-value (q=) support
- Language metadata lookup
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Protocol, runtime_checkable

from cms_i18n.config import settings
from cms_i18n.exceptions import InvalidLocaleError

# ── Constants ─────────────────────────────────────────────────────────────────

# BCP 47 base language codes whose scripts read right-to-left
RTL_LOCALES: frozenset[str] = frozenset({"ar", "he", "fa", "ur", "yi", "ku"})

# Human-readable names for supported locales (subset of BCP 47 code space)
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "es": "Español",
    "ca": "Català",
    "fr": "Français",
    "de": "Deutsch",
    "ar": "العربية",
    "zh": "中文",
    "ja": "日本語",
    "pt": "Português",
    "it": "Italiano",
    "nl": "Nederlands",
}


class LocaleSelector(enum.Enum):
    """Special values accepted wherever a locale preference list is expected."""

    ALL = "ALL"


# Presence of ALL in a preference list disables locale filtering
ALL = LocaleSelector.ALL


@runtime_checkable
class LocaleDescriptor(Protocol):
    """Any object that knows its canonical locale code."""

    @property
    def iso_code(self) -> str: ...


# Request-scoped locale; falls back to settings.default_language
_current_locale: ContextVar[str | None] = ContextVar("current_locale", default=None)


# ── Public helpers ────────────────────────────────────────────────────────────


def normalize_locale(value: Any) -> str | None:
    """Return the canonical code string for a locale descriptor.

    Accepts a code string or any object exposing ``iso_code``. ``None`` is
    passed through so unset locales can be defaulted later.

    Raises:
        InvalidLocaleError: if the value cannot be resolved to a non-empty code.
    """
    if value is None:
        return None
    if isinstance(value, LocaleSelector):
        raise InvalidLocaleError(value)
    if isinstance(value, str):
        code = value.strip()
    else:
        code = getattr(value, "iso_code", None)
        if not isinstance(code, str):
            raise InvalidLocaleError(value)
        code = code.strip()
    if not code:
        raise InvalidLocaleError(value)
    return code


def get_current_locale() -> str:
    """Return the locale of the running context, or the configured default."""
    return _current_locale.get() or settings.default_language


def set_current_locale(locale: Any) -> Token:
    """Set the current locale for this context; returns a token for reset."""
    return _current_locale.set(normalize_locale(locale))


def reset_current_locale(token: Token) -> None:
    _current_locale.reset(token)


@contextmanager
def use_locale(locale: Any) -> Iterator[str]:
    """Temporarily make ``locale`` the current locale."""
    token = set_current_locale(locale)
    try:
        yield get_current_locale()
    finally:
        reset_current_locale(token)


def is_rtl_locale(locale: str) -> bool:
    """Return True when the given BCP 47 locale is right-to-left.

    Compares only the base language tag (before the first hyphen), so
    both "ar" and "ar-SA" are correctly identified as RTL.
    """
    base = locale.split("-")[0].lower()
    return base in RTL_LOCALES


def parse_accept_language(header: str, supported: list[str]) -> str | None:
    """Parse an Accept-Language header and return the best matching locale.

    Algorithm:
    1. Split header into tags with optional q-values (default q=1.0).
    2. Sort by q-value descending.
    3. For each tag, try exact match in `supported`, then base-language match.
    4. Return the first match or None if nothing matches.

    Args:
        header:    Value of the Accept-Language HTTP header, e.g.
                   "ca-ES,ca;q=0.9,es;q=0.8,en;q=0.7".
        supported: Ordered list of locale codes the server supports.

    Returns:
        The best matching locale from `supported`, or None.
    """
    if not header:
        return None

    weighted: list[tuple[float, str]] = []
    for part in header.split(","):
        part = part.strip()
        if not part:
            continue
        if ";q=" in part:
            tag, q_str = part.split(";q=", 1)
            try:
                q = float(q_str.strip())
            except ValueError:
                q = 1.0
        else:
            tag = part
            q = 1.0
        weighted.append((q, tag.strip()))

    # Stable sort keeps header order for equal q
    weighted.sort(key=lambda x: x[0], reverse=True)

    supported_lower = [s.lower() for s in supported]

    for _, tag in weighted:
        tag_lower = tag.lower()
        if tag_lower in supported_lower:
            return supported[supported_lower.index(tag_lower)]
        base = tag_lower.split("-")[0]
        if base in supported_lower:
            return supported[supported_lower.index(base)]

    return None


def get_language_info(locale: str) -> dict[str, str | bool]:
    """Return a metadata dict describing the given locale.

    Returns:
        Dict with keys: ``code`` (str), ``name`` (str), ``is_rtl`` (bool).
    """
    return {
        "code": locale,
        "name": LANGUAGE_NAMES.get(locale, locale),
        "is_rtl": is_rtl_locale(locale),
    }
