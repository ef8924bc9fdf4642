"""
Tests for the language middleware
"""

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from cms_i18n.config import settings
from cms_i18n.i18n.locale import get_current_locale
from cms_i18n.middleware.language import LanguageMiddleware


def make_client():
    app = FastAPI()

    @app.get("/locale")
    async def locale_route(request: Request):
        return {"state": request.state.locale, "current": get_current_locale()}

    app.add_middleware(LanguageMiddleware)
    return TestClient(app)


class TestLanguageMiddleware:
    def test_x_language_header_wins(self):
        response = make_client().get("/locale", headers={"X-Language": "ca", "Accept-Language": "es"})
        assert response.json() == {"state": "ca", "current": "ca"}

    def test_unsupported_x_language_falls_back_to_accept_language(self):
        response = make_client().get("/locale", headers={"X-Language": "xx", "Accept-Language": "es;q=0.9,ca;q=0.8"})
        assert response.json() == {"state": "es", "current": "es"}

    def test_default_language_without_headers(self):
        response = make_client().get("/locale")
        assert response.json()["current"] == settings.default_language

    def test_current_locale_is_reset_after_request(self):
        make_client().get("/locale", headers={"X-Language": "de"})
        assert get_current_locale() == settings.default_language
