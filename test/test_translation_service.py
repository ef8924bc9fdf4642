"""
Tests for translation_service
"""

import pytest

from cms_i18n.exceptions import ValidationError
from cms_i18n.services.lifecycle import create_row
from cms_i18n.services.translation_service import (
    create_translation,
    get_content_in_locale,
    get_translation,
    list_languages_for_content,
    list_translations,
    representative,
    translate,
)
from utils.models import ScopedModel, TestModel


class IsoLocale:
    def __init__(self, iso_code):
        self.iso_code = iso_code


async def make_group(db, *locales, **shared):
    """Create one row per locale in a single content group."""
    rows = []
    content_id = None
    for locale in locales:
        row = await create_row(db, TestModel(field1=f"text-{locale}", locale=locale, content_id=content_id, **shared))
        content_id = row.content_id
        rows.append(row)
    return rows


class TestTranslate:
    @pytest.mark.asyncio
    async def test_should_copy_untranslatable_fields_when_translating(self, test_db):
        (original,) = await make_group(test_db, "ca", field2="shared", field3=3)

        translated = await translate(test_db, TestModel, original.content_id, "es")
        assert translated.id is None
        assert translated.locale == "es"
        assert translated.content_id == original.content_id
        assert translated.field2 == "shared"
        assert translated.field3 == original.field3
        assert translated.field1 is None

    @pytest.mark.asyncio
    async def test_translate_accepts_locale_descriptor(self, test_db):
        (original,) = await make_group(test_db, "ca")
        translated = await translate(test_db, TestModel, original.content_id, IsoLocale("en"))
        assert translated.locale == "en"

    @pytest.mark.asyncio
    async def test_translate_missing_group_gives_empty_row(self, test_db):
        translated = await translate(test_db, TestModel, 999, "es")
        assert translated.locale == "es"
        assert translated.content_id is None
        assert translated.field2 is None

    @pytest.mark.asyncio
    async def test_translate_without_content_id(self, test_db):
        translated = await translate(test_db, TestModel, None, "ca")
        assert translated.content_id is None
        assert translated.locale == "ca"

    @pytest.mark.asyncio
    async def test_representative_is_lowest_id(self, test_db):
        first, second = await make_group(test_db, "es", "ca")
        found = await representative(test_db, TestModel, first.content_id)
        assert found.id == first.id
        assert found.id < second.id

    @pytest.mark.asyncio
    async def test_saving_translation_joins_group(self, test_db):
        (original,) = await make_group(test_db, "ca", field2="shared")
        translated = await translate(test_db, TestModel, original.content_id, "es")
        translated.field1 = "hola"
        saved = await create_row(test_db, translated)

        assert saved.content_id == original.content_id
        assert await list_languages_for_content(test_db, TestModel, original.content_id) == ["ca", "es"]


class TestCreateTranslation:
    @pytest.mark.asyncio
    async def test_create_translation_applies_values(self, test_db):
        (original,) = await make_group(test_db, "ca", field2="shared")
        translation = await create_translation(test_db, TestModel, original.content_id, "es", {"field1": "hola"})

        assert translation.id is not None
        assert translation.field1 == "hola"
        assert translation.field2 == "shared"
        assert translation.content_id == original.content_id

    @pytest.mark.asyncio
    async def test_create_translation_rejects_shared_fields(self, test_db):
        (original,) = await make_group(test_db, "ca")
        with pytest.raises(ValidationError) as exc_info:
            await create_translation(test_db, TestModel, original.content_id, "es", {"field2": "x"})
        assert exc_info.value.details["field"] == "field2"
        assert await list_languages_for_content(test_db, TestModel, original.content_id) == ["ca"]


class TestLookups:
    @pytest.mark.asyncio
    async def test_get_translation(self, test_db):
        ca, es = await make_group(test_db, "ca", "es")
        found = await get_translation(test_db, TestModel, ca.content_id, "es")
        assert found.id == es.id
        assert await get_translation(test_db, TestModel, ca.content_id, "en") is None

    @pytest.mark.asyncio
    async def test_list_translations_excludes_own_locale(self, test_db):
        ca, es, en = await make_group(test_db, "ca", "es", "en")
        await make_group(test_db, "fr")

        translations = await list_translations(test_db, ca)
        assert [row.locale for row in translations] == ["en", "es"]

    @pytest.mark.asyncio
    async def test_list_translations_respects_sync_scopes(self, test_db):
        north = await create_row(test_db, ScopedModel(title="n", region="north", locale="ca"))
        await create_row(test_db, ScopedModel(title="n-es", region="north", locale="es", content_id=north.content_id))
        await create_row(test_db, ScopedModel(title="s-en", region="south", locale="en", content_id=north.content_id))

        translations = await list_translations(test_db, north)
        assert [row.title for row in translations] == ["n-es"]

    @pytest.mark.asyncio
    async def test_get_content_in_locale_uses_preference(self, test_db):
        ca, es = await make_group(test_db, "ca", "es")
        assert (await get_content_in_locale(test_db, TestModel, ca.content_id, "fr", "es", "ca")).id == es.id
        assert await get_content_in_locale(test_db, TestModel, ca.content_id, "fr") is None

    @pytest.mark.asyncio
    async def test_list_languages_for_content(self, test_db):
        ca, _, _ = await make_group(test_db, "ca", "es", "en")
        assert await list_languages_for_content(test_db, TestModel, ca.content_id) == ["ca", "en", "es"]
        assert await list_languages_for_content(test_db, TestModel, 12345) == []
