from __future__ import annotations

import json
import logging
import operator
import re
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from fastapi import Depends, Request
from sqlalchemy import JSON, String, and_, asc, cast, desc, false, or_
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import Query, Session, selectinload

from devcamper.core.config import settings
from devcamper.core.errors import ErrorResponse
from devcamper.db.session import get_db
from devcamper.schemas.advanced import (
    RESERVED_PARAMS,
    AdvancedQuery,
    PageRef,
    Pagination,
    Populate,
    Projection,
    ResultPage,
    SortClause,
)
from devcamper.services.documents import row_to_dict, visible_fields

_LOG = logging.getLogger("devcamper.query")

DEFAULT_PAGE = 1
# page and limit both stay within int32, so (page - 1) * limit fits a signed 64-bit OFFSET
MAX_PAGINATION_VALUE = 2**31 - 1
_MAX_BIGINT = 2**63 - 1
DEFAULT_SORT = (SortClause(field="created_at", dir="desc"),)

_BRACKET_KEY_RE = re.compile(r"^(?P<field>[^\[\]]+)\[(?P<op>[^\[\]]*)\]$")
_COMPARATORS = {
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}


class QueryError(ErrorResponse):
    def __init__(self, message: str):
        super().__init__(message, 400)


# --- parsing -----------------------------------------------------------------


def _iter_params(params) -> Iterable[tuple[str, Any]]:
    if hasattr(params, "multi_items"):
        return params.multi_items()
    items: list[tuple[str, Any]] = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            items.extend((key, item) for item in value)
        else:
            items.append((key, value))
    return items


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in str(raw or "").split(",") if part.strip()]


def _parse_positive_int(raw, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if 1 <= value <= MAX_PAGINATION_VALUE else default


def _add_literal(filters: dict[str, Any], field: str, value: str) -> None:
    if field not in filters:
        filters[field] = value
        return
    existing = filters[field]
    if isinstance(existing, dict):
        raise QueryError(f'Conflicting filters for field "{field}"')
    if isinstance(existing, list):
        existing.append(value)
    else:
        filters[field] = [existing, value]


def _add_operator(filters: dict[str, Any], field: str, op: str, value: str) -> None:
    existing = filters.setdefault(field, {})
    if not isinstance(existing, dict):
        raise QueryError(f'Conflicting filters for field "{field}"')
    if op == "in":
        existing.setdefault("in", []).extend(_split_csv(value))
    else:
        # Unrecognized operators are kept as-is and rejected when resolved.
        existing[op] = value


def _parse_projection(raw: str) -> Projection | None:
    names = _split_csv(raw)
    if not names:
        return None
    excluded = [name.startswith("-") for name in names]
    if all(excluded):
        return Projection(fields=tuple(name[1:] for name in names), exclude=True)
    if any(excluded):
        raise QueryError("Projection cannot mix inclusion and exclusion")
    return Projection(fields=tuple(names))


def _parse_sort(raw: str) -> tuple[SortClause, ...]:
    clauses = []
    for name in _split_csv(raw):
        if name.startswith("-"):
            clauses.append(SortClause(field=name[1:], dir="desc"))
        else:
            clauses.append(SortClause(field=name, dir="asc"))
    return tuple(clauses)


def parse_advanced_query(params: Mapping[str, Any], *, default_limit: int = 100) -> AdvancedQuery:
    filters: dict[str, Any] = {}
    control: dict[str, str] = {}
    for key, raw in _iter_params(params):
        value = "" if raw is None else str(raw)
        if key in RESERVED_PARAMS:
            control[key] = value
            continue
        match = _BRACKET_KEY_RE.match(key)
        if match is None:
            _add_literal(filters, key, value)
        else:
            _add_operator(filters, match.group("field"), match.group("op"), value)

    return AdvancedQuery(
        filters=filters,
        select=_parse_projection(control.get("select", "")),
        sort=_parse_sort(control.get("sort", "")),
        page=_parse_positive_int(control.get("page"), DEFAULT_PAGE),
        limit=_parse_positive_int(control.get("limit"), default_limit),
    )


# --- value coercion ----------------------------------------------------------


def _bad_filter_value(field: str, kind: str) -> QueryError:
    return QueryError(f'Invalid filter value for field "{field}" ({kind})')


def _column_python_type(column):
    try:
        return column.property.columns[0].type.python_type
    except Exception:
        return None


def _is_json_column(column) -> bool:
    try:
        return isinstance(column.property.columns[0].type, JSON)
    except Exception:
        return False


def _coerce_bool(field: str, value):
    text = str(value or "").strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    raise _bad_filter_value(field, "boolean")


def _coerce_number(field: str, value, python_type):
    text = str(value).strip()
    if not text:
        raise _bad_filter_value(field, "number")
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise _bad_filter_value(field, "number")
    if not number.is_finite():
        raise _bad_filter_value(field, "number")
    if python_type is int:
        # weeks[gt]=5.5 compares numerically against the integer column
        if number == number.to_integral_value() and abs(number) <= _MAX_BIGINT:
            return int(number)
        return float(number)
    if python_type is float:
        return float(number)
    return number


def _coerce_date(field: str, value):
    text = str(value or "").strip()
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise _bad_filter_value(field, "date")


def _coerce_datetime(field: str, value):
    text = str(value or "").strip()
    try:
        if _is_date_only_literal(text):
            # Date-only value for a timestamp column -> start of the day.
            parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise _bad_filter_value(field, "datetime")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _is_date_only_literal(raw_value) -> bool:
    if not isinstance(raw_value, str):
        return False
    text = raw_value.strip()
    if not text or "T" in text or " " in text:
        return False
    try:
        date.fromisoformat(text)
        return True
    except ValueError:
        return False


def _coerce_filter_value(column, field: str, value):
    python_type = _column_python_type(column)
    if python_type is uuid.UUID:
        try:
            return uuid.UUID(str(value or "").strip())
        except ValueError:
            raise _bad_filter_value(field, "uuid")
    if python_type is bool:
        return _coerce_bool(field, value)
    if python_type in {int, float, Decimal}:
        return _coerce_number(field, value, python_type)
    if python_type is datetime:
        return _coerce_datetime(field, value)
    if python_type is date:
        return _coerce_date(field, value)
    return value


# --- predicate resolution ----------------------------------------------------


def _columns_map(model: type) -> dict[str, Any]:
    mapper = sa_inspect(model)
    hidden = getattr(model, "HIDDEN_FIELDS", ())
    return {attr.key: getattr(model, attr.key) for attr in mapper.column_attrs if attr.key not in hidden}


def _json_contains(column, value):
    return cast(column, String).contains(json.dumps(str(value)), autoescape=True)


def _membership_expression(column, field: str, values) -> Any:
    values = list(values)
    if not values:
        return false()
    if _is_json_column(column):
        return or_(*[_json_contains(column, value) for value in values])
    return column.in_([_coerce_filter_value(column, field, value) for value in values])


def _equality_expression(column, field: str, value) -> Any:
    if _is_json_column(column):
        return _json_contains(column, value)
    coerced = _coerce_filter_value(column, field, value)
    if _column_python_type(column) is datetime and _is_date_only_literal(value):
        return and_(column >= coerced, column < coerced + timedelta(days=1))
    return column == coerced


def _operator_expression(column, field: str, op: str, value) -> Any:
    if op == "in":
        return _membership_expression(column, field, value if isinstance(value, list) else [value])
    compare = _COMPARATORS.get(op)
    if compare is None:
        raise QueryError(f'Unsupported filter operator "{op}" for field "{field}"')
    if _is_json_column(column):
        raise QueryError(f'Operator "{op}" is not supported for field "{field}"')
    return compare(column, _coerce_filter_value(column, field, value))


def _filter_expression(columns: dict[str, Any], field: str, condition) -> Any:
    column = columns.get(field)
    if column is None:
        raise QueryError(f'Unknown filter field "{field}"')
    if isinstance(condition, dict):
        return and_(*[_operator_expression(column, field, op, value) for op, value in condition.items()])
    if isinstance(condition, list):
        return _membership_expression(column, field, condition)
    return _equality_expression(column, field, condition)


def _apply_sort(q: Query, columns: dict[str, Any], sort: tuple[SortClause, ...]) -> Query:
    for clause in sort:
        column = columns.get(clause.field)
        if column is None:
            raise QueryError(f'Unknown sort field "{clause.field}"')
        q = q.order_by(asc(column) if clause.dir == "asc" else desc(column))
    # Stable windows across identical calls.
    return q.order_by(asc(columns["id"]))


def _projected_fields(model: type, projection: Projection | None) -> list[str] | None:
    if projection is None:
        return None
    available = visible_fields(model)
    unknown = [name for name in projection.fields if name not in available]
    if unknown:
        raise QueryError(f"Unknown select field(s): {', '.join(unknown)}")
    if projection.exclude:
        return [key for key in available if key not in projection.fields]
    return list(projection.fields)


def _resolve_populate(model: type, populate: Populate | str | None) -> Populate | None:
    if populate is None:
        return None
    if isinstance(populate, str):
        populate = Populate(path=populate)
    relationships = sa_inspect(model).relationships
    if populate.path not in relationships:
        raise ValueError(f"{model.__name__} has no relation {populate.path!r}")
    if populate.select is not None:
        target = relationships[populate.path].mapper.class_
        unknown = [name for name in populate.select if name not in visible_fields(target)]
        if unknown:
            raise ValueError(f"{target.__name__} has no field(s) {', '.join(unknown)}")
    return populate


def _document(row, fields: list[str] | None, populate: Populate | None) -> dict[str, Any]:
    doc = row_to_dict(row, fields)
    if populate is not None:
        related = getattr(row, populate.path)
        if related is None:
            doc[populate.path] = None
        elif isinstance(related, (list, tuple)):
            doc[populate.path] = [row_to_dict(item, populate.select) for item in related]
        else:
            doc[populate.path] = row_to_dict(related, populate.select)
    return doc


def build_filtered_query(db: Session, model: type, query: AdvancedQuery, scope: Iterable[Any] = ()) -> Query:
    columns = _columns_map(model)
    q = db.query(model)
    for criterion in scope:
        q = q.filter(criterion)
    for field, condition in query.filters.items():
        q = q.filter(_filter_expression(columns, field, condition))
    return q


def run_advanced_query(
    db: Session,
    model: type,
    query: AdvancedQuery,
    populate: Populate | str | None = None,
    scope: Iterable[Any] = (),
) -> ResultPage:
    populate = _resolve_populate(model, populate)
    fields = _projected_fields(model, query.select)
    columns = _columns_map(model)

    q = build_filtered_query(db, model, query, scope)
    # Pagination metadata follows the filtered match count, not the table size.
    total = q.count()

    sort = query.sort or tuple(clause for clause in DEFAULT_SORT if clause.field in columns)
    q = _apply_sort(q, columns, sort)
    if populate is not None:
        q = q.options(selectinload(getattr(model, populate.path)))
    rows = q.offset(query.start_index).limit(query.limit).all()

    pagination = Pagination(
        next=PageRef(page=query.page + 1, limit=query.limit) if query.end_index < total else None,
        prev=PageRef(page=query.page - 1, limit=query.limit) if query.start_index > 0 else None,
    )
    _LOG.debug(
        "advanced query model=%s filters=%s page=%s limit=%s total=%s returned=%s",
        model.__name__,
        query.filters,
        query.page,
        query.limit,
        total,
        len(rows),
    )
    return ResultPage(
        count=len(rows),
        total=total,
        pagination=pagination,
        data=[_document(row, fields, populate) for row in rows],
    )


def advanced_results(model: type, populate: Populate | str | None = None):
    """FastAPI dependency: the request's query string resolved against ``model``."""

    def _dependency(request: Request, db: Session = Depends(get_db)) -> ResultPage:
        query = parse_advanced_query(request.query_params, default_limit=settings.ADVANCED_RESULTS_DEFAULT_LIMIT)
        return run_advanced_query(db, model, query, populate=populate)

    return _dependency
