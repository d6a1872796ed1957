"""Competition model definitions."""

from sqlalchemy import Column, DateTime, Integer, String
from portal_backend.database import Base
from portal_backend.models.user import _utcnow

NAME_MAX_LENGTH = 255
ICON_MAX_LENGTH = 512


class Competition(Base):
    """A competition that carousel dropdown entries may point at."""
    __tablename__ = "competitions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), unique=True, nullable=False)
    icon = Column(String(ICON_MAX_LENGTH), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
