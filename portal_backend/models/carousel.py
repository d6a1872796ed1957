"""Carousel insight card model definitions."""

from sqlalchemy import Column, DateTime, Integer, String, Text
from portal_backend.database import Base
from portal_backend.models.user import _utcnow

TITLE_MAX_LENGTH = 255
DATE_MAX_LENGTH = 64
SUBTITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 10000


class CarouselCard(Base):
    """A promotional card with nested parent groups of dropdown entries."""
    __tablename__ = "carousel_insights"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    date = Column(String(DATE_MAX_LENGTH), nullable=True)
    subtitle = Column(String(SUBTITLE_MAX_LENGTH), nullable=True)
    description = Column(Text, nullable=True)
    parents = Column(Text, nullable=True)  # JSON, hierarchical shape
    dropdowns = Column(Text, nullable=True)  # JSON, legacy flat shape (read only)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
