from sqlalchemy import Column, Integer, String

from cms_i18n.i18n.partition import registry


class ContentGroupMixin:
    """Columns shared by every row type that stores content groups.

    ``content_id`` links the locale rows of one logical piece of content;
    ``locale`` holds the row's locale code. Subclasses are registered in the
    partition registry when they are derived.
    """

    content_id = Column(Integer, nullable=False, index=True)
    locale = Column(String(10), nullable=False, index=True)  # BCP 47 e.g. "en", "fr-CA"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        registry.register(cls)
