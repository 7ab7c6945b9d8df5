"""
Error taxonomy and the exception handlers that render it.

Every error response has the same body: ``{"message": ..., "code": ...}``.
``message`` is for humans, ``code`` is a stable machine-readable tag.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from lupulse.media import MediaUploadError

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """Base class for errors the API reports deliberately."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.detail)


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Unauthorized: No token found!"


class InvalidCredential(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "invalid_credential"
    default_message = "Forbidden: Invalid token!"


class IdentityNotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "identity_not_found"
    default_message = "User not found!"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Forbidden"


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "All required fields must be provided"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class Conflict(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "conflict"
    default_message = "Conflict"


class InternalError(ApiError):
    pass


# Codes for HTTP errors raised by the framework itself (unknown route, wrong method, ...).
_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def error_body(message: str, code: str) -> dict[str, str]:
    return {"message": message, "code": code}


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = getattr(exc, "code", None) or _STATUS_CODES.get(exc.status_code, "http_error")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), code),
        headers=getattr(exc, "headers", None),
    )


def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields: list[str] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        name = ".".join(loc) or "body"
        if name not in fields:
            fields.append(name)

    logger.info("Rejected request path=%s method=%s fields=%s", request.url.path, request.method, fields)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=error_body(f"Missing or invalid fields: {', '.join(fields)}", ValidationError.code),
    )


def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage failure path=%s method=%s", request.url.path, request.method)
    return JSONResponse(status_code=500, content=error_body("Internal Server Error", InternalError.code))


def _media_error_handler(request: Request, exc: MediaUploadError) -> JSONResponse:
    logger.exception("Media host failure path=%s method=%s", request.url.path, request.method)
    return JSONResponse(status_code=500, content=error_body("Error uploading image", InternalError.code))


def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error path=%s method=%s", request.url.path, request.method)
    return JSONResponse(status_code=500, content=error_body("Internal Server Error", InternalError.code))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)
    app.add_exception_handler(MediaUploadError, _media_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
