# /quadriparlanti/db/models/user_model.py

"""
ORM models for identities.

`AuthAccount` is what the auth provider owns: the login email, the password
hash and the confirmation timestamp. `User` is the application profile that
shares the same id. Keeping them apart lets a failed profile insert be
compensated by deleting the account, and lets a soft-deleted teacher keep
their credentials.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, JSON, DateTime, Text

from ..base_class import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthAccount(Base):
    __tablename__ = "auth_accounts"

    id = Column(String(36), primary_key=True, index=True, default=_new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)
    email_confirmed_at = Column(DateTime(timezone=True), nullable=True)
    user_metadata = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class User(Base):
    """
    Application profile. `role` is one of admin / docente / studente and
    `status` one of active / inactive / suspended / invited.
    """
    id = Column(String(36), primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, index=True, nullable=True)
    role = Column(String, index=True, nullable=False, default="docente")
    status = Column(String, index=True, nullable=False, default="invited")
    bio = Column(Text, nullable=True)
    profile_image_url = Column(String, nullable=True)
    storage_used_mb = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
