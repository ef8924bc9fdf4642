from sqlalchemy import Column, Integer, String

from cms_i18n.database import Base


class ContentSequence(Base):
    """Named integer counter used where the database has no native sequences."""

    __tablename__ = "content_sequences"

    name = Column(String(100), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
