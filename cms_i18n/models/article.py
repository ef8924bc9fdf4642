"""
Article model

One row per (content group, locale). Title, summary, body and slug are
translated per locale; category, author, featured flag and publish date are
shared by every translation of the article.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from cms_i18n.database import Base
from cms_i18n.i18n.partition import translatable
from cms_i18n.models.mixins import ContentGroupMixin


@translatable("title", "summary", "body", "slug")
class Article(ContentGroupMixin, Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # ── Translatable fields ───────────────────────────────────────────────────
    title = Column(String, nullable=False)
    summary = Column(Text, nullable=True)
    body = Column(Text, nullable=False)
    slug = Column(String, nullable=True)  # locale-specific slug

    # ── Shared across the content group ───────────────────────────────────────
    category = Column(String(50), nullable=True)
    author_name = Column(String(100), nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    publish_date = Column(DateTime, nullable=True)

    # ── Per-row timestamps ────────────────────────────────────────────────────
    created_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_article_content_locale", "content_id", "locale"),
        Index("idx_article_locale_slug", "locale", "slug"),
    )
