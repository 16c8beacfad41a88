import logging
import math
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from devcamper.api.v1.common import (
    _apply_fields,
    _detail,
    _ensure_owner_or_admin,
    _load_row_or_404,
    _ok,
)
from devcamper.core.config import settings
from devcamper.core.deps import authorize
from devcamper.core.errors import ErrorResponse
from devcamper.db.session import get_db
from devcamper.models.bootcamp import Bootcamp, slugify
from devcamper.models.user import ROLE_ADMIN, ROLE_PUBLISHER, User
from devcamper.schemas.advanced import ResultPage
from devcamper.schemas.bootcamp import BootcampCreate, BootcampUpdate
from devcamper.services.advanced_results import advanced_results
from devcamper.services.documents import row_to_dict
from devcamper.services.geocoder import EARTH_RADIUS_MILES, GeocodingError, distance_miles, geocode

router = APIRouter()
_LOG = logging.getLogger("devcamper.bootcamps")


def _apply_location(bootcamp: Bootcamp, address: str) -> None:
    try:
        loc = geocode(address)
    except GeocodingError as exc:
        raise ErrorResponse(f"Could not geocode address: {exc}", 502) from exc
    if loc is None:
        _LOG.info("address for bootcamp %s was not geocoded", bootcamp.name)
        return
    bootcamp.latitude = loc.latitude
    bootcamp.longitude = loc.longitude
    bootcamp.formatted_address = loc.formatted_address
    bootcamp.street = loc.street
    bootcamp.city = loc.city
    bootcamp.state = loc.state
    bootcamp.zipcode = loc.zipcode
    bootcamp.country = loc.country


@router.get("")
def get_bootcamps(results: ResultPage = Depends(advanced_results(Bootcamp, "courses"))):
    return results.to_response()


@router.get("/radius/{zipcode}/{distance}")
def get_bootcamps_in_radius(zipcode: str, distance: float, db: Session = Depends(get_db)):
    if distance <= 0:
        raise ErrorResponse("Distance must be a positive number of miles", 400)
    try:
        center = geocode(zipcode)
    except GeocodingError as exc:
        raise ErrorResponse(f"Could not geocode {zipcode}: {exc}", 502) from exc
    if center is None:
        raise ErrorResponse(f"Could not geocode {zipcode}", 400)

    # Latitude band first, exact great-circle distance after.
    lat_delta = math.degrees(distance / EARTH_RADIUS_MILES)
    candidates = (
        db.query(Bootcamp)
        .filter(
            Bootcamp.latitude.is_not(None),
            Bootcamp.longitude.is_not(None),
            Bootcamp.latitude >= center.latitude - lat_delta,
            Bootcamp.latitude <= center.latitude + lat_delta,
        )
        .order_by(Bootcamp.created_at.desc(), Bootcamp.id.asc())
        .all()
    )
    rows = [
        row
        for row in candidates
        if distance_miles(center.latitude, center.longitude, row.latitude, row.longitude) <= distance
    ]
    return {"success": True, "count": len(rows), "data": [row_to_dict(row) for row in rows]}


@router.get("/{bootcamp_id}")
def get_bootcamp(bootcamp_id: str, db: Session = Depends(get_db)):
    return _detail(_load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp"))


@router.post("", status_code=201)
def create_bootcamp(
    payload: BootcampCreate,
    user: User = Depends(authorize(ROLE_PUBLISHER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    if user.role != ROLE_ADMIN:
        published = db.query(Bootcamp).filter(Bootcamp.user_id == user.id).first()
        if published is not None:
            raise ErrorResponse(f"The user with ID {user.id} has already published a bootcamp", 400)

    bootcamp = Bootcamp(**payload.model_dump(), slug=slugify(payload.name), user_id=user.id)
    _apply_location(bootcamp, payload.address)
    db.add(bootcamp)
    db.commit()
    db.refresh(bootcamp)
    return _detail(bootcamp)


@router.put("/{bootcamp_id}")
def update_bootcamp(
    bootcamp_id: str,
    payload: BootcampUpdate,
    user: User = Depends(authorize(ROLE_PUBLISHER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    bootcamp = _load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp")
    _ensure_owner_or_admin(user, bootcamp, "bootcamp", "update")

    values = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    _apply_fields(bootcamp, values)
    if "name" in values:
        bootcamp.slug = slugify(values["name"])
    if "address" in values:
        _apply_location(bootcamp, values["address"])
    db.add(bootcamp)
    db.commit()
    db.refresh(bootcamp)
    return _detail(bootcamp)


@router.delete("/{bootcamp_id}")
def delete_bootcamp(
    bootcamp_id: str,
    user: User = Depends(authorize(ROLE_PUBLISHER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    bootcamp = _load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp")
    _ensure_owner_or_admin(user, bootcamp, "bootcamp", "delete")
    db.delete(bootcamp)
    db.commit()
    return _ok()


@router.put("/{bootcamp_id}/photo")
def upload_bootcamp_photo(
    bootcamp_id: str,
    file: UploadFile | None = File(default=None),
    user: User = Depends(authorize(ROLE_PUBLISHER, ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    bootcamp = _load_row_or_404(db, Bootcamp, bootcamp_id, "Bootcamp")
    _ensure_owner_or_admin(user, bootcamp, "bootcamp", "update")

    if file is None:
        raise ErrorResponse("Please upload a file", 400)
    if not str(file.content_type or "").startswith("image"):
        raise ErrorResponse("Please upload an image file", 400)
    content = file.file.read(settings.MAX_FILE_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_FILE_UPLOAD_BYTES:
        raise ErrorResponse(f"Please upload an image less than {settings.MAX_FILE_UPLOAD_BYTES} bytes", 400)

    ext = Path(file.filename or "").suffix.lower()
    filename = f"photo_{bootcamp.id}{ext}"
    upload_dir = Path(settings.FILE_UPLOAD_PATH)
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        (upload_dir / filename).write_bytes(content)
    except OSError as exc:
        _LOG.error("photo upload for bootcamp %s failed: %s", bootcamp.id, exc)
        raise ErrorResponse("Problem with file upload", 500) from exc

    bootcamp.photo = filename
    db.add(bootcamp)
    db.commit()
    return _ok(filename)
