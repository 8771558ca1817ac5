"""
Postboard Backend: API Error Envelope
=======================================

What:  Converts every failure inside the API application into the envelope.
Why:   Clients of /api/ must always receive {"success": false, "error": ...},
       never Starlette's plain-text 404/405 bodies or a bare 500.
How:   Exception handlers for routing errors and body validation errors, plus
       a middleware that turns any other exception into
       "Internal server error".

Mapping:
    HTTP 404 from the router            -> NOT_FOUND "Not found"
    HTTP 405 from the router            -> METHOD_NOT_ALLOWED "Method not allowed"
    body is not JSON                    -> INTERNAL "Internal server error"
    body JSON does not match the schema -> VALIDATION "Invalid request body"
    anything else raised                -> INTERNAL "Internal server error"
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

from postboard.errors import (
    ErrorKind,
    INTERNAL_ERROR_MESSAGE,
    INVALID_BODY_MESSAGE,
    METHOD_NOT_ALLOWED_MESSAGE,
    NOT_FOUND_MESSAGE,
)
from postboard.middleware.request_id import request_id_var
from postboard.schemas.envelope import Result

logger = logging.getLogger(__name__)


def envelope_response(request: Request, result: Result, headers: dict | None = None) -> JSONResponse:
    """Render a Result with the status code for the app's configured mode."""
    strict = request.app.state.settings.strict_status_codes
    return JSONResponse(
        status_code=result.status_code(strict),
        content=result.to_envelope(),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        headers = None
        if exc.status_code == 404:
            result = Result.fail(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        elif exc.status_code == 405:
            result = Result.fail(ErrorKind.METHOD_NOT_ALLOWED, METHOD_NOT_ALLOWED_MESSAGE)
            if request.app.state.settings.strict_status_codes:
                headers = exc.headers
        else:
            # any other HTTPException raised inside the API app
            result = Result.fail(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)
        return envelope_response(request, result, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(error.get("type") == "json_invalid" for error in errors):
            result = Result.fail(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)
        else:
            result = Result.fail(ErrorKind.VALIDATION, INVALID_BODY_MESSAGE)
        logger.warning(
            "[%s] Rejected body for %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            [error.get("type") for error in errors],
        )
        return envelope_response(request, result)


class ErrorEnvelopeMiddleware(BaseHTTPMiddleware):
    """Last line of defence inside the API app: no fault escapes as a 500."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                exc,
                exc_info=True,
            )
            return envelope_response(
                request, Result.fail(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)
            )
