"""Maps pipeline errors onto HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.errors import (
    DuplicateConflict,
    NotFoundError,
    PreconditionFailure,
    StoreUnavailable,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

PRECONDITION_STATUS = {
    PreconditionFailure.AUTHENTICATION_REQUIRED: 401,
    PreconditionFailure.PROFILE_NOT_FOUND: 404,
}

HTTP_CODES = {
    401: "AUTHENTICATION_REQUIRED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}

# Request locations FastAPI prefixes onto validation error paths
_LOCATION_PREFIXES = {"query", "path", "header", "body", "cookie"}


def error_body(error: str, code: str, details: list[dict] | None = None) -> dict:
    body = {"error": error, "code": code}
    if details:
        body["details"] = details
    return body


async def handle_validation_failure(request: Request, exc: ValidationFailure) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_body(
            "Validation failed", "VALIDATION_ERROR", [{"field": exc.field, "message": exc.message}]
        ),
    )


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOCATION_PREFIXES]
        details.append({"field": ".".join(loc) or "request", "message": err.get("msg", "Invalid value")})
    return JSONResponse(status_code=400, content=error_body("Validation failed", "VALIDATION_ERROR", details))


async def handle_precondition_failure(request: Request, exc: PreconditionFailure) -> JSONResponse:
    status = PRECONDITION_STATUS.get(exc.code, 412)
    return JSONResponse(status_code=status, content=error_body(exc.message, exc.code))


async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=error_body(str(exc), "NOT_FOUND"))


async def handle_duplicate(request: Request, exc: DuplicateConflict) -> JSONResponse:
    return JSONResponse(status_code=409, content=error_body(str(exc), "CONFLICT"))


async def handle_store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("Store unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content=error_body("Service temporarily unavailable", "STORE_UNAVAILABLE"))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail), code))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("Internal server error", "INTERNAL_ERROR"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationFailure, handle_validation_failure)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(PreconditionFailure, handle_precondition_failure)
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(DuplicateConflict, handle_duplicate)
    app.add_exception_handler(StoreUnavailable, handle_store_unavailable)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
