from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

_LOG = logging.getLogger("devcamper.errors")


class ErrorResponse(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def not_found(resource: str, resource_id) -> ErrorResponse:
    return ErrorResponse(f"{resource} not found with id of {resource_id}", 404)


def error_json(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(item) for item in err.get("loc", ()) if item not in {"body", "query", "path"}]
        msg = str(err.get("msg") or "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return ", ".join(parts) or "Invalid request"


# SQLSTATE 23505 on PostgreSQL, "UNIQUE constraint failed" on SQLite.
def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "sqlstate", None) == "23505":
        return True
    return "unique" in str(exc.orig).lower()


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ErrorResponse)
    async def _error_response_handler(request: Request, exc: ErrorResponse):
        if exc.status_code >= 500:
            _LOG.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_json(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = error_json(str(exc.detail), exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return error_json(_validation_message(exc), 400)

    @app.exception_handler(IntegrityError)
    async def _integrity_handler(request: Request, exc: IntegrityError):
        _LOG.info("integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        if _is_unique_violation(exc):
            return error_json("Duplicate field value entered", 400)
        return error_json("Operation conflicts with related records", 400)

    @app.exception_handler(SQLAlchemyError)
    async def _database_handler(request: Request, exc: SQLAlchemyError):
        _LOG.exception("database error on %s %s", request.method, request.url.path)
        return error_json("Server Error", 500)

    @app.exception_handler(Exception)
    async def _unhandled_handler(request: Request, exc: Exception):
        _LOG.exception("unhandled error on %s %s", request.method, request.url.path)
        return error_json("Server Error", 500)
