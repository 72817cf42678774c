"""
Domain errors and the global handlers that turn them into consistent API errors.

Services raise `AppError` subclasses; nothing below the router layer knows
about HTTP responses.
"""
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, errors: List[Dict[str, Any]] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = 400
    default_message = "Validation error"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class ServiceUnavailable(AppError):
    status_code = 503
    default_message = "Service unavailable"


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def _field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into `{field, message}` pairs."""
    out: List[Dict[str, str]] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        ctx_error = (err.get("ctx") or {}).get("error")
        # ValueErrors raised in our validators carry the clean message in ctx
        message = str(ctx_error) if ctx_error else err.get("msg", "Invalid value")
        out.append({"field": ".".join(loc) or "body", "message": message})
    return out


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notiq.errors")

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("%s request_id=%s: %s", type(exc).__name__, _req_id(request), exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, exc.message, errors=exc.errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, exc.detail or "HTTP error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=_body(request, "Validation error", errors=_field_errors(exc)),
        )

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error request_id=%s", _req_id(request))
        return JSONResponse(status_code=500, content=_body(request, "Internal server error"))
