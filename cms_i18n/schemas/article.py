from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ArticleCreate(BaseModel):
    title: str = Field(..., title="Title", description="Title in this row's locale.")
    body: str = Field(..., title="Body", description="Body in this row's locale.")
    summary: Optional[str] = Field(None, title="Summary", description="Short summary in this row's locale.")
    slug: Optional[str] = Field(None, title="Slug", description="Locale-specific slug.")
    locale: Optional[str] = Field(None, title="Locale", description="Defaults to the request locale.")
    content_id: Optional[int] = Field(
        None, title="Content ID", description="Existing content group to join; a new one is allocated when omitted."
    )
    category: Optional[str] = Field(None, title="Category", description="Shared by every translation.")
    author_name: Optional[str] = Field(None, title="Author", description="Shared by every translation.")
    is_featured: bool = Field(False, title="Featured", description="Shared by every translation.")
    publish_date: Optional[datetime] = Field(None, title="Publish Date", description="Shared by every translation.")


class ArticleUpdate(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    summary: Optional[str] = None
    slug: Optional[str] = None
    category: Optional[str] = None
    author_name: Optional[str] = None
    is_featured: Optional[bool] = None
    publish_date: Optional[datetime] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Títol actualitzat",
                "category": "news",
            }
        }
    )


class TranslationCreate(BaseModel):
    """Translated values for a new locale row; shared fields come from the group."""

    locale: str
    title: str
    body: str
    summary: Optional[str] = None
    slug: Optional[str] = None


class ArticleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content_id: int
    locale: str
    title: str
    body: str
    summary: Optional[str]
    slug: Optional[str]
    category: Optional[str]
    author_name: Optional[str]
    is_featured: bool
    publish_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class LanguageInfo(BaseModel):
    code: str
    name: str
    is_rtl: bool
