from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.orm import Session

from devcamper.core.errors import ErrorResponse, not_found
from devcamper.models.user import ROLE_ADMIN, User
from devcamper.services.documents import row_to_dict


def _load_row_or_404(db: Session, model: type, row_id: str, resource: str):
    try:
        pk = uuid.UUID(str(row_id))
    except (TypeError, ValueError):
        raise not_found(resource, row_id)
    entity = db.get(model, pk)
    if entity is None:
        raise not_found(resource, row_id)
    return entity


def _ensure_owner_or_admin(user: User, row: Any, resource: str, action: str) -> None:
    if user.role == ROLE_ADMIN or row.user_id == user.id:
        return
    raise ErrorResponse(f"User {user.id} is not authorized to {action} this {resource}", 403)


def _apply_fields(row: Any, values: dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(row, key, value)


def _ok(data: Any = None) -> dict[str, Any]:
    return {"success": True, "data": {} if data is None else data}


def _detail(row: Any) -> dict[str, Any]:
    return _ok(row_to_dict(row))
