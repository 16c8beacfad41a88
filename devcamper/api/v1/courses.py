from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from devcamper.api.v1.common import _apply_fields, _ensure_owner_or_admin, _load_row_or_404, _ok
from devcamper.core.config import settings
from devcamper.core.deps import authorize
from devcamper.db.session import get_db
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.course import Course
from devcamper.models.user import ROLE_ADMIN, ROLE_PUBLISHER, User
from devcamper.schemas.advanced import Populate, ResultPage
from devcamper.schemas.course import CourseCreate, CourseUpdate
from devcamper.services.advanced_results import advanced_results, parse_advanced_query, run_advanced_query
from devcamper.services.bootcamp_stats import recalculate_average_cost
from devcamper.services.documents import row_to_dict

router = APIRouter()
bootcamp_router = APIRouter()

BOOTCAMP_SUMMARY = Populate(path="bootcamp", select=("name", "description"))


def _course_detail(course: Course) -> dict:
    doc = row_to_dict(course)
    doc["bootcamp"] = row_to_dict(course.bootcamp, BOOTCAMP_SUMMARY.select) if course.bootcamp else None
    return _ok(doc)


@router.get("")
def get_courses(results: ResultPage = Depends(advanced_results(Course, BOOTCAMP_SUMMARY))):
    return results.to_response()


@router.get("/{course_id}")
def get_course(course_id: str, db: Session = Depends(get_db)):
    return _course_detail(_load_row_or_404(db, Course, course_id, "Course"))


@router.put("/{course_id}")
def update_course(
    course_id: str,
    payload: CourseUpdate,
    user: User = Depends(authorize(ROLE_PUBLISHER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    course = _load_row_or_404(db, Course, course_id, "Course")
    _ensure_owner_or_admin(user, course, "course", "update")
    values = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    _apply_fields(course, values)
    db.add(course)
    recalculate_average_cost(db, course.bootcamp_id)
    db.commit()
    db.refresh(course)
    return _course_detail(course)


@router.delete("/{course_id}")
def delete_course(
    course_id: str,
    user: User = Depends(authorize(ROLE_PUBLISHER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    course = _load_row_or_404(db, Course, course_id, "Course")
    _ensure_owner_or_admin(user, course, "course", "delete")
    bootcamp_id = course.bootcamp_id
    db.delete(course)
    recalculate_average_cost(db, bootcamp_id)
    db.commit()
    return _ok()


@bootcamp_router.get("")
def get_bootcamp_courses(bootcamp_id: str, request: Request, db: Session = Depends(get_db)):
    bootcamp = _load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp")
    query = parse_advanced_query(request.query_params, default_limit=settings.ADVANCED_RESULTS_DEFAULT_LIMIT)
    results = run_advanced_query(db, Course, query, scope=[Course.bootcamp_id == bootcamp.id])
    return results.to_response()


@bootcamp_router.post("", status_code=201)
def add_course(
    bootcamp_id: str,
    payload: CourseCreate,
    user: User = Depends(authorize(ROLE_PUBLISHER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    bootcamp = _load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp")
    _ensure_owner_or_admin(user, bootcamp, "bootcamp", "add a course to")
    course = Course(**payload.model_dump(), bootcamp_id=bootcamp.id, user_id=user.id)
    db.add(course)
    recalculate_average_cost(db, bootcamp.id)
    db.commit()
    db.refresh(course)
    return _ok(row_to_dict(course))
