from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy.inspection import inspect as sa_inspect


def serialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: serialize_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


def hidden_fields(model: type) -> frozenset[str]:
    return frozenset(getattr(model, "HIDDEN_FIELDS", ()))


def visible_fields(model: type) -> list[str]:
    """Column keys of ``model`` in declaration order, hidden ones removed."""
    hidden = hidden_fields(model)
    return [attr.key for attr in sa_inspect(model).column_attrs if attr.key not in hidden]


def row_to_dict(row: Any, fields: Iterable[str] | None = None) -> dict[str, Any]:
    model = type(row)
    allowed = visible_fields(model)
    if fields is not None:
        wanted = set(fields)
        allowed = [key for key in allowed if key == "id" or key in wanted]
    return {key: serialize_value(getattr(row, key)) for key in allowed}
