from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from devcamper.api.v1.common import _apply_fields, _detail, _load_row_or_404, _ok
from devcamper.core.deps import authorize
from devcamper.core.security import hash_password
from devcamper.db.session import get_db
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.course import Course
from devcamper.models.review import Review
from devcamper.models.user import ROLE_ADMIN, User
from devcamper.schemas.advanced import ResultPage
from devcamper.schemas.user import UserCreate, UserUpdate
from devcamper.services.advanced_results import advanced_results
from devcamper.services.bootcamp_stats import recalculate_average_cost, recalculate_average_rating

router = APIRouter(dependencies=[Depends(authorize(ROLE_ADMIN))])


@router.get("")
def get_users(results: ResultPage = Depends(advanced_results(User))):
    return results.to_response()


@router.get("/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    return _detail(_load_row_or_404(db, User, user_id, "User"))


@router.post("", status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = User(
        name=payload.name,
        email=payload.email.strip().lower(),
        role=payload.role,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return _detail(user)


@router.put("/{user_id}")
def update_user(user_id: str, payload: UserUpdate, db: Session = Depends(get_db)):
    user = _load_row_or_404(db, User, user_id, "User")
    values = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    password = values.pop("password", None)
    if "email" in values:
        values["email"] = values["email"].strip().lower()
    _apply_fields(user, values)
    if password:
        user.password_hash = hash_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return _detail(user)


@router.delete("/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user = _load_row_or_404(db, User, user_id, "User")

    # Bootcamps of other publishers whose averages include this user's rows.
    touched = {row.bootcamp_id for row in db.query(Course).filter(Course.user_id == user.id)}
    touched |= {row.bootcamp_id for row in db.query(Review).filter(Review.user_id == user.id)}
    owned = db.query(Bootcamp).filter(Bootcamp.user_id == user.id).all()
    touched -= {bootcamp.id for bootcamp in owned}

    db.query(Review).filter(Review.user_id == user.id).delete()
    db.query(Course).filter(Course.user_id == user.id).delete()
    for bootcamp in owned:
        db.delete(bootcamp)
    db.flush()
    db.delete(user)
    db.flush()
    for bootcamp_id in touched:
        recalculate_average_cost(db, bootcamp_id)
        recalculate_average_rating(db, bootcamp_id)
    db.commit()
    return _ok()
