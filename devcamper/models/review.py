from __future__ import annotations

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.db.session import Base
from devcamper.models.common import BootcampChildMixin, OwnedMixin, TimestampMixin, UUIDMixin


class Review(Base, UUIDMixin, TimestampMixin, OwnedMixin, BootcampChildMixin):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("bootcamp_id", "user_id", name="uq_reviews_bootcamp_user"),)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)

    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="reviews")
