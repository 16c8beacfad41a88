from __future__ import annotations

import argparse
import uuid

from sqlalchemy.orm import Session

from devcamper.core.security import hash_password
from devcamper.data.seed_data import BOOTCAMPS, COURSES, REVIEWS, USERS
from devcamper.db.session import SessionLocal
from devcamper.models.bootcamp import Bootcamp, slugify
from devcamper.models.course import Course
from devcamper.models.review import Review
from devcamper.models.user import User
from devcamper.services.bootcamp_stats import recalculate_average_cost, recalculate_average_rating


def _with_uuids(item: dict, *keys: str) -> dict:
    data = dict(item)
    for key in keys:
        data[key] = uuid.UUID(str(data[key]))
    return data


def import_data(db: Session) -> dict[str, int]:
    created = {"users": 0, "bootcamps": 0, "courses": 0, "reviews": 0}

    for item in USERS:
        data = _with_uuids(item, "id")
        if db.get(User, data["id"]) is not None:
            continue
        password = data.pop("password")
        db.add(User(**data, password_hash=hash_password(password)))
        created["users"] += 1
    db.flush()

    for item in BOOTCAMPS:
        data = _with_uuids(item, "id", "user_id")
        if db.get(Bootcamp, data["id"]) is not None:
            continue
        db.add(Bootcamp(**data, slug=slugify(data["name"])))
        created["bootcamps"] += 1
    db.flush()

    for item in COURSES:
        data = _with_uuids(item, "id", "bootcamp_id", "user_id")
        if db.get(Course, data["id"]) is not None:
            continue
        db.add(Course(**data))
        created["courses"] += 1

    for item in REVIEWS:
        data = _with_uuids(item, "id", "bootcamp_id", "user_id")
        if db.get(Review, data["id"]) is not None:
            continue
        db.add(Review(**data))
        created["reviews"] += 1
    db.flush()

    for item in BOOTCAMPS:
        bootcamp_id = uuid.UUID(item["id"])
        recalculate_average_cost(db, bootcamp_id)
        recalculate_average_rating(db, bootcamp_id)

    db.commit()
    return created


def delete_data(db: Session) -> None:
    db.query(Review).delete()
    db.query(Course).delete()
    db.query(Bootcamp).delete()
    db.query(User).delete()
    db.commit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Load or remove the bundled sample data")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-i", "--import", dest="do_import", action="store_true", help="import sample data")
    group.add_argument("-d", "--delete", dest="do_delete", action="store_true", help="delete all data")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if args.do_import:
            created = import_data(db)
            print("data imported: " + ", ".join(f"{key}={value}" for key, value in created.items()))
        else:
            delete_data(db)
            print("data destroyed")
    finally:
        db.close()


if __name__ == "__main__":
    main()
