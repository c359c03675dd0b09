# src/authgateway/app/db/models.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String

from .session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthUser(Base):
    """
    Local mirror of a user pool identity.

    Rules:
      - cognito_sub: subject id issued by the identity provider (unique)
      - username: same username the provider knows the user by (unique)
      - user_confirmed: false until confirm-signup succeeds
    """

    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    cognito_sub = Column(String(64), unique=True, nullable=False)
    username = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(320), nullable=False)
    phone_number = Column(String(20), nullable=True)
    name = Column(String(100), nullable=False)
    user_confirmed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
