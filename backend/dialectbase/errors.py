"""
Error taxonomy for the DialectBase API.

Every error carries the HTTP status it maps to and a message that is safe to
show to clients. The handlers registered by setup_error_handlers turn them into
``{"status": "error", "message": ...}`` payloads.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DialectBaseError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(DialectBaseError):
    status_code = 400
    message = "Invalid request"


class DuplicateEmail(DialectBaseError):
    status_code = 400
    message = "Email already exists"


class InvalidCredentials(DialectBaseError):
    status_code = 401
    message = "Incorrect email or password"


class InvalidToken(DialectBaseError):
    status_code = 401
    message = "Invalid token"


class ExpiredToken(InvalidToken):
    message = "Token has expired"


class UserNotFound(DialectBaseError):
    status_code = 401
    message = "User not found"


class QuotaExceeded(DialectBaseError):
    status_code = 403
    message = "Free search limit reached. Upgrade to premium."


class NotFound(DialectBaseError):
    status_code = 404
    message = "Record not found"


class UnsupportedLanguage(DialectBaseError):
    status_code = 404


class WordNotFound(DialectBaseError):
    status_code = 404


class InternalError(DialectBaseError):
    pass


def error_payload(message: str) -> dict:
    return {"status": "error", "message": message}


async def _dialectbase_error_handler(request: Request, exc: DialectBaseError):
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message))


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = f"Invalid request body: {', '.join(fields)}" if fields else "Invalid request body"
    return JSONResponse(status_code=400, content=error_payload(message))


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_payload(InternalError.message))


def setup_error_handlers(app: FastAPI):
    """Register the JSON error handlers on the app."""
    app.add_exception_handler(DialectBaseError, _dialectbase_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
