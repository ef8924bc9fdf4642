"""
Article & i18n Routes

Two APIRouter objects exported from this module:

articles_router  (prefix: /api/v1/articles)
    GET    /                                      → list rows (repeatable ?locale=, ALL accepted)
    POST   /                                      → create row (joins or starts a content group)
    GET    /{article_id}                          → get one row
    PUT    /{article_id}                          → update row, shared fields propagate
    DELETE /{article_id}                          → delete one row (group kept)
    GET    /content/{content_id}                  → best row for the locale preference
    GET    /content/{content_id}/translations     → every row of the group
    POST   /content/{content_id}/translations     → create a translation
    GET    /content/{content_id}/languages        → locale codes in the group

i18n_router  (prefix: /api/v1/i18n)
    GET    /languages                             → supported languages
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from cms_i18n.config import settings
from cms_i18n.database import get_db
from cms_i18n.exceptions import ContentGroupNotFoundError, ResourceNotFoundError
from cms_i18n.i18n.locale import ALL, get_current_locale, get_language_info
from cms_i18n.i18n.query import GroupQuery
from cms_i18n.models.article import Article
from cms_i18n.schemas.article import (
    ArticleCreate,
    ArticleResponse,
    ArticleUpdate,
    LanguageInfo,
    TranslationCreate,
)
from cms_i18n.services.lifecycle import create_row, delete_row, update_row
from cms_i18n.services.translation_service import (
    create_translation,
    get_content_in_locale,
    list_languages_for_content,
)

articles_router = APIRouter(prefix="/api/v1/articles", tags=["Articles"])
i18n_router = APIRouter(prefix="/api/v1/i18n", tags=["Internationalization"])
logger = logging.getLogger(__name__)


def _locale_preference(locales: list[str]) -> list:
    return [ALL if locale.upper() == ALL.value else locale for locale in locales]


async def _get_article(article_id: int, db: AsyncSession) -> Article:
    article = await db.get(Article, article_id)
    if article is None:
        raise ResourceNotFoundError("Article", article_id)
    return article


# ── Article routes ─────────────────────────────────────────────────────────────


@articles_router.get("/", response_model=list[ArticleResponse])
async def list_articles_route(
    locale: list[str] = Query(default=[]),
    content_id: list[int] = Query(default=[]),
    category: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> list[ArticleResponse]:
    """List article rows; with ``locale`` given, one row per content group."""
    query = GroupQuery(Article)
    if locale:
        query = query.locale(*_locale_preference(locale))
    if content_id:
        query = query.content(*content_id)
    if category:
        query = query.where(Article.category == category)
    articles = await query.order_by(Article.content_id, Article.id).offset(skip).limit(limit).all(db)
    return [ArticleResponse.model_validate(a) for a in articles]


@articles_router.post("/", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article_route(
    payload: ArticleCreate,
    db: AsyncSession = Depends(get_db),
) -> ArticleResponse:
    """Create an article row. Without ``locale`` the request locale is used."""
    article = await create_row(db, Article(**payload.model_dump()))
    return ArticleResponse.model_validate(article)


@articles_router.get("/{article_id}", response_model=ArticleResponse)
async def get_article_route(
    article_id: int,
    db: AsyncSession = Depends(get_db),
) -> ArticleResponse:
    return ArticleResponse.model_validate(await _get_article(article_id, db))


@articles_router.put("/{article_id}", response_model=ArticleResponse)
async def update_article_route(
    article_id: int,
    payload: ArticleUpdate,
    db: AsyncSession = Depends(get_db),
) -> ArticleResponse:
    """Update one row; shared fields are copied to the rest of its group."""
    article = await _get_article(article_id, db)
    article = await update_row(db, article, payload.model_dump(exclude_unset=True))
    return ArticleResponse.model_validate(article)


@articles_router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article_route(
    article_id: int,
    db: AsyncSession = Depends(get_db),
) -> None:
    await delete_row(db, await _get_article(article_id, db))


@articles_router.get("/content/{content_id}", response_model=ArticleResponse)
async def get_content_route(
    content_id: int,
    locale: list[str] = Query(default=[]),
    db: AsyncSession = Depends(get_db),
) -> ArticleResponse:
    """Best row of a group: ``locale`` order, else request locale then default language."""
    preference = _locale_preference(locale) or [get_current_locale(), settings.default_language]
    article = await get_content_in_locale(db, Article, content_id, *preference)
    if article is None:
        raise ContentGroupNotFoundError(content_id)
    return ArticleResponse.model_validate(article)


@articles_router.get("/content/{content_id}/translations", response_model=list[ArticleResponse])
async def list_group_route(
    content_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[ArticleResponse]:
    articles = await GroupQuery(Article).content(content_id).order_by(Article.locale).all(db)
    return [ArticleResponse.model_validate(a) for a in articles]


@articles_router.post(
    "/content/{content_id}/translations",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_translation_route(
    content_id: int,
    payload: TranslationCreate,
    db: AsyncSession = Depends(get_db),
) -> ArticleResponse:
    """Create a translation; shared fields are cloned from the group."""
    if not await list_languages_for_content(db, Article, content_id):
        raise ContentGroupNotFoundError(content_id)
    values = payload.model_dump(exclude={"locale"})
    article = await create_translation(db, Article, content_id, payload.locale, values)
    return ArticleResponse.model_validate(article)


@articles_router.get("/content/{content_id}/languages", response_model=list[str])
async def list_content_languages(
    content_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[str]:
    """List locale codes that have a row in this content group."""
    return await list_languages_for_content(db, Article, content_id)


# ── i18n info routes ───────────────────────────────────────────────────────────


@i18n_router.get("/languages", response_model=list[LanguageInfo])
async def list_supported_languages() -> list[LanguageInfo]:
    """List all supported languages with name and RTL flag."""
    return [LanguageInfo(**get_language_info(code)) for code in settings.supported_languages]
