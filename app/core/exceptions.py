"""
Error taxonomy and the exception handlers that turn it into responses.

Services and endpoints raise the domain exceptions below; auth and rate-limit
dependencies raise HTTPException. Both end up as a JSON body of the form {"message": "..."}.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class JobBoardError(Exception):
    """Base application exception."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(JobBoardError):
    """Raised when a record with the same identity already exists."""


class InvalidCredentialsError(JobBoardError):
    """Raised when sign-in fails, whatever the reason."""


class NotFoundError(JobBoardError):
    """Raised when a requested resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


def _message_response(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts in front of the field
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """
    Build a single human-readable message from pydantic error dicts.

    Missing fields are listed together; any other failures are listed after.
    """
    missing = []
    invalid = []
    for error in errors:
        name = _field_name(tuple(error.get("loc", ())))
        if error.get("type") == "missing":
            missing.append(name)
        else:
            invalid.append(f"{name}: {error.get('msg', 'invalid value')}")

    parts = []
    if missing:
        parts.append(f"Missing required field(s): {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid value(s): {'; '.join(invalid)}")
    return ". ".join(parts) or "Invalid request"


async def job_board_error_handler(request: Request, exc: JobBoardError) -> JSONResponse:
    return _message_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _message_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_errors(exc.errors())
    logger.info(f"Rejected request to {request.url.path}: {message}")
    return _message_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every handler to the application."""
    app.add_exception_handler(JobBoardError, job_board_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
