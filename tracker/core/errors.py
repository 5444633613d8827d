import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class TrackerError(Exception):
    status_code = 400

    def __init__(self, message: str = "Bad request"):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """Missing or malformed input."""


class ConflictError(TrackerError):
    """A unique key (email, tracking code) is already taken."""


class AuthError(TrackerError):
    """Missing, malformed, expired or wrongly signed session token."""
    status_code = 401


class InvalidCredentials(AuthError):
    # login failures are reported as a plain bad request
    status_code = 400


class ForbiddenError(AuthError):
    status_code = 403


class NotFoundError(TrackerError):
    status_code = 404


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TrackerError)
    async def tracker_error(request: Request, exc: TrackerError):
        log.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request body"
        if errors:
            first = errors[0]
            loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
        log.warning("%s %s -> 400 %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})
