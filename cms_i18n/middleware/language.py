"""
Language Detection Middleware

Sets request.state.locale, and the current locale used by content-group
creates, from:
  1. X-Language request header (exact match against supported list)
  2. Accept-Language header (quality-weighted, best-match)
  3. settings.default_language (fallback)

No DB lookups — pure header parsing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from cms_i18n.config import settings
from cms_i18n.i18n.locale import parse_accept_language, reset_current_locale, set_current_locale

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import Request
    from starlette.responses import Response


class LanguageMiddleware(BaseHTTPMiddleware):
    """Detect the request locale and make it the current locale.

    Detection order:
    1. ``X-Language`` header — must be an exact member of supported_languages.
    2. ``Accept-Language`` header — quality-weighted BCP 47 matching.
    3. ``settings.default_language`` — always a valid fallback.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        locale = request.headers.get("X-Language", "").strip()
        if locale not in settings.supported_languages:
            locale = (
                parse_accept_language(
                    request.headers.get("Accept-Language", ""),
                    settings.supported_languages,
                )
                or settings.default_language
            )
        request.state.locale = locale
        token = set_current_locale(locale)
        try:
            return await call_next(request)
        finally:
            reset_current_locale(token)
