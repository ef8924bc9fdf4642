from .article import ArticleCreate, ArticleResponse, ArticleUpdate, LanguageInfo, TranslationCreate

__all__ = [
    "ArticleCreate",
    "ArticleResponse",
    "ArticleUpdate",
    "LanguageInfo",
    "TranslationCreate",
]
