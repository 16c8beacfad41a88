from __future__ import annotations

import math
import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session

from devcamper.models.bootcamp import Bootcamp
from devcamper.models.course import Course
from devcamper.models.review import Review


def recalculate_average_cost(db: Session, bootcamp_id: uuid.UUID) -> float | None:
    bootcamp = db.get(Bootcamp, bootcamp_id)
    if bootcamp is None:
        return None
    db.flush()
    avg = db.query(func.avg(Course.tuition)).filter(Course.bootcamp_id == bootcamp_id).scalar()
    # Rounded up to the next multiple of ten.
    bootcamp.average_cost = float(math.ceil(float(avg) / 10) * 10) if avg is not None else None
    db.add(bootcamp)
    return bootcamp.average_cost


def recalculate_average_rating(db: Session, bootcamp_id: uuid.UUID) -> float | None:
    bootcamp = db.get(Bootcamp, bootcamp_id)
    if bootcamp is None:
        return None
    db.flush()
    avg = db.query(func.avg(Review.rating)).filter(Review.bootcamp_id == bootcamp_id).scalar()
    bootcamp.average_rating = round(float(avg), 2) if avg is not None else None
    db.add(bootcamp)
    return bootcamp.average_rating
