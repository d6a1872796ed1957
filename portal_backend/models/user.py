"""User model definitions."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from portal_backend.database import Base


ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255


def _new_public_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(32), unique=True, index=True, nullable=False, default=_new_public_id)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=ROLE_USER)  # user/admin
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
