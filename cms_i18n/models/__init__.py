from .article import Article
from .content_sequence import ContentSequence
from .mixins import ContentGroupMixin

__all__ = [
    "Article",
    "ContentGroupMixin",
    "ContentSequence",
]
