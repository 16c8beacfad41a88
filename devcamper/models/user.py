from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from devcamper.db.session import Base
from devcamper.models.common import TimestampMixin, UUIDMixin

ROLE_USER = "user"
ROLE_PUBLISHER = "publisher"
ROLE_ADMIN = "admin"


class User(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "users"
    # Never serialized, not even when explicitly selected.
    HIDDEN_FIELDS = frozenset({"password_hash", "reset_password_token", "reset_password_expire"})

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    reset_password_token: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    reset_password_expire: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
