from __future__ import annotations

from sqlalchemy import Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.db.session import Base
from devcamper.models.common import BootcampChildMixin, OwnedMixin, TimestampMixin, UUIDMixin


class Course(Base, UUIDMixin, TimestampMixin, OwnedMixin, BootcampChildMixin):
    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    weeks: Mapped[int] = mapped_column(Integer, nullable=False)
    tuition: Mapped[float] = mapped_column(Float, nullable=False)
    minimum_skill: Mapped[str] = mapped_column(String(20), nullable=False)
    scholarship_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="courses")
