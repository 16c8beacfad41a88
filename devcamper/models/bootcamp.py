from __future__ import annotations

import re

from sqlalchemy import Boolean, Float, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.db.session import Base
from devcamper.models.common import OwnedMixin, TimestampMixin, UUIDMixin

DEFAULT_PHOTO = "no-photo.jpg"

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    return _SLUG_STRIP_RE.sub("-", str(value or "").lower()).strip("-")


class Bootcamp(Base, UUIDMixin, TimestampMixin, OwnedMixin):
    __tablename__ = "bootcamps"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    website: Mapped[str | None] = mapped_column(String(300), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    address: Mapped[str] = mapped_column(String(300), nullable=False)

    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    formatted_address: Mapped[str | None] = mapped_column(String(300), nullable=True)
    street: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zipcode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str | None] = mapped_column(String(10), nullable=True)

    careers: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    average_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    photo: Mapped[str] = mapped_column(String(200), nullable=False, default=DEFAULT_PHOTO)
    housing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_assistance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_guarantee: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    accept_gi: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    courses: Mapped[list["Course"]] = relationship(
        back_populates="bootcamp", cascade="all, delete-orphan", order_by="Course.created_at"
    )
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="bootcamp", cascade="all, delete-orphan", order_by="Review.created_at"
    )
