from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "CMS i18n"
    app_version: str = "0.7.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./cms_i18n.db"
    create_tables_on_startup: bool = False

    # Locale settings
    default_language: str = "en"
    supported_languages: list[str] = ["en", "es", "ca", "fr", "de"]

    # Content group settings
    translatable_timestamps: bool = True
    content_id_sequence_suffix: str = "_content_id"
    sequence_backend: Literal["auto", "native", "table"] = "auto"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
