"""
Locale helper tests

Pure unit tests; no database.
"""

from __future__ import annotations

import pytest

from cms_i18n.exceptions import InvalidLocaleError


class IsoLocale:
    def __init__(self, iso_code):
        self.iso_code = iso_code


class TestNormalizeLocale:
    def test_string_passes_through(self):
        from cms_i18n.i18n.locale import normalize_locale

        assert normalize_locale("ca") == "ca"

    def test_surrounding_whitespace_is_dropped(self):
        from cms_i18n.i18n.locale import normalize_locale

        assert normalize_locale(" fr-CA ") == "fr-CA"

    def test_descriptor_resolves_to_iso_code(self):
        from cms_i18n.i18n.locale import normalize_locale

        assert normalize_locale(IsoLocale("es")) == "es"

    def test_descriptor_matches_protocol(self):
        from cms_i18n.i18n.locale import LocaleDescriptor

        assert isinstance(IsoLocale("es"), LocaleDescriptor)

    def test_none_is_kept_for_later_defaulting(self):
        from cms_i18n.i18n.locale import normalize_locale

        assert normalize_locale(None) is None

    @pytest.mark.parametrize("value", ["", "   ", 12, object(), IsoLocale(None), IsoLocale("")])
    def test_malformed_descriptor_raises(self, value):
        from cms_i18n.i18n.locale import normalize_locale

        with pytest.raises(InvalidLocaleError):
            normalize_locale(value)

    def test_all_selector_is_not_a_locale(self):
        from cms_i18n.i18n.locale import ALL, normalize_locale

        with pytest.raises(InvalidLocaleError):
            normalize_locale(ALL)


class TestCurrentLocale:
    def test_defaults_to_configured_language(self):
        from cms_i18n.config import settings
        from cms_i18n.i18n.locale import get_current_locale

        assert get_current_locale() == settings.default_language

    def test_use_locale_sets_and_restores(self):
        from cms_i18n.config import settings
        from cms_i18n.i18n.locale import get_current_locale, use_locale

        with use_locale("ca") as current:
            assert current == "ca"
            assert get_current_locale() == "ca"
            with use_locale(IsoLocale("es")):
                assert get_current_locale() == "es"
            assert get_current_locale() == "ca"
        assert get_current_locale() == settings.default_language

    def test_set_and_reset(self):
        from cms_i18n.i18n.locale import get_current_locale, reset_current_locale, set_current_locale

        token = set_current_locale("de")
        try:
            assert get_current_locale() == "de"
        finally:
            reset_current_locale(token)
        assert get_current_locale() != "de"


class TestLocaleHelpers:
    def test_is_rtl_arabic(self):
        from cms_i18n.i18n.locale import is_rtl_locale

        assert is_rtl_locale("ar") is True

    def test_is_rtl_with_region_tag(self):
        """ar-SA should also detect as RTL (strips the region part)."""
        from cms_i18n.i18n.locale import is_rtl_locale

        assert is_rtl_locale("ar-SA") is True

    def test_is_ltr_catalan(self):
        from cms_i18n.i18n.locale import is_rtl_locale

        assert is_rtl_locale("ca") is False

    def test_parse_accept_language_exact_match(self):
        from cms_i18n.i18n.locale import parse_accept_language

        assert parse_accept_language("ca", ["en", "ca", "es"]) == "ca"

    def test_parse_accept_language_quality_ordering(self):
        from cms_i18n.i18n.locale import parse_accept_language

        result = parse_accept_language("es;q=0.9,ca;q=0.8,en;q=0.7", ["en", "ca", "es"])
        assert result == "es"

    def test_parse_accept_language_base_fallback(self):
        """ca-ES not in supported list but base 'ca' is → should match 'ca'."""
        from cms_i18n.i18n.locale import parse_accept_language

        assert parse_accept_language("ca-ES", ["en", "ca"]) == "ca"

    def test_parse_accept_language_no_match(self):
        from cms_i18n.i18n.locale import parse_accept_language

        assert parse_accept_language("ja", ["en", "fr"]) is None

    def test_parse_accept_language_empty_header(self):
        from cms_i18n.i18n.locale import parse_accept_language

        assert parse_accept_language("", ["en", "fr"]) is None

    def test_get_language_info_structure(self):
        from cms_i18n.i18n.locale import get_language_info

        info = get_language_info("ca")
        assert info == {"code": "ca", "name": "Català", "is_rtl": False}

    def test_get_language_info_unknown_locale(self):
        from cms_i18n.i18n.locale import get_language_info

        info = get_language_info("xx")
        assert info["name"] == "xx"  # falls back to code itself
