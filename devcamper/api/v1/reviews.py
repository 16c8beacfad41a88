from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from devcamper.api.v1.common import _apply_fields, _ensure_owner_or_admin, _load_row_or_404, _ok
from devcamper.core.config import settings
from devcamper.core.deps import authorize
from devcamper.core.errors import ErrorResponse
from devcamper.db.session import get_db
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.review import Review
from devcamper.models.user import ROLE_ADMIN, ROLE_USER, User
from devcamper.schemas.advanced import Populate, ResultPage
from devcamper.schemas.review import ReviewCreate, ReviewUpdate
from devcamper.services.advanced_results import advanced_results, parse_advanced_query, run_advanced_query
from devcamper.services.bootcamp_stats import recalculate_average_rating
from devcamper.services.documents import row_to_dict

router = APIRouter()
bootcamp_router = APIRouter()

BOOTCAMP_SUMMARY = Populate(path="bootcamp", select=("name", "description"))


def _review_detail(review: Review) -> dict:
    doc = row_to_dict(review)
    doc["bootcamp"] = row_to_dict(review.bootcamp, BOOTCAMP_SUMMARY.select) if review.bootcamp else None
    return _ok(doc)


@router.get("")
def get_reviews(results: ResultPage = Depends(advanced_results(Review, BOOTCAMP_SUMMARY))):
    return results.to_response()


@router.get("/{review_id}")
def get_review(review_id: str, db: Session = Depends(get_db)):
    return _review_detail(_load_row_or_404(db, Review, review_id, "Review"))


@router.put("/{review_id}")
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    user: User = Depends(authorize(ROLE_USER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    review = _load_row_or_404(db, Review, review_id, "Review")
    _ensure_owner_or_admin(user, review, "review", "update")
    values = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    _apply_fields(review, values)
    db.add(review)
    recalculate_average_rating(db, review.bootcamp_id)
    db.commit()
    db.refresh(review)
    return _review_detail(review)


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    user: User = Depends(authorize(ROLE_USER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    review = _load_row_or_404(db, Review, review_id, "Review")
    _ensure_owner_or_admin(user, review, "review", "delete")
    bootcamp_id = review.bootcamp_id
    db.delete(review)
    recalculate_average_rating(db, bootcamp_id)
    db.commit()
    return _ok()


@bootcamp_router.get("")
def get_bootcamp_reviews(bootcamp_id: str, request: Request, db: Session = Depends(get_db)):
    bootcamp = _load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp")
    query = parse_advanced_query(request.query_params, default_limit=settings.ADVANCED_RESULTS_DEFAULT_LIMIT)
    results = run_advanced_query(db, Review, query, scope=[Review.bootcamp_id == bootcamp.id])
    return results.to_response()


@bootcamp_router.post("", status_code=201)
def add_review(
    bootcamp_id: str,
    payload: ReviewCreate,
    user: User = Depends(authorize(ROLE_USER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    bootcamp = _load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp")
    existing = (
        db.query(Review)
        .filter(Review.bootcamp_id == bootcamp.id, Review.user_id == user.id)
        .first()
    )
    if existing is not None:
        raise ErrorResponse("User has already submitted a review for this bootcamp", 400)
    review = Review(**payload.model_dump(), bootcamp_id=bootcamp.id, user_id=user.id)
    db.add(review)
    recalculate_average_rating(db, bootcamp.id)
    db.commit()
    db.refresh(review)
    return _ok(row_to_dict(review))
