"""
Postboard Backend: Shared-Secret Authentication Middleware
============================================================

What:  Rejects mutating API requests that do not carry the configured key.
Why:   The only write protection this service has: POST, PUT and DELETE must
       present X-API-Key equal to settings.api_key.
How:   Runs in front of the API router, so the check happens before routing,
       body parsing or any storage access. Unknown API paths are gated too.
When:  Every request under /api/.

Response on failure:
    HTTP 401 {"success": false, "error": "Unauthorized"}

Read methods (GET, HEAD, OPTIONS) are never gated.

This is an exact match with one deliberate exception: when API_KEY is empty,
nothing is authorized, not even an empty X-API-Key header. A plain string
comparison would accept "" == "" here.
"""

import hmac
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from postboard.errors import ErrorKind, UNAUTHORIZED_MESSAGE
from postboard.middleware.request_id import request_id_var
from postboard.schemas.envelope import Result

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


class ApiKeyMiddleware(BaseHTTPMiddleware):

    PROTECTED_METHODS = {"POST", "PUT", "DELETE"}

    def __init__(self, app: ASGIApp, api_key: str = "") -> None:
        super().__init__(app)
        self._api_key = api_key

    def is_authorized(self, provided: Optional[str]) -> bool:
        if not self._api_key or provided is None:
            return False
        return hmac.compare_digest(provided.encode("utf-8"), self._api_key.encode("utf-8"))

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method not in self.PROTECTED_METHODS:
            return await call_next(request)

        if not self.is_authorized(request.headers.get(API_KEY_HEADER)):
            # Never log the provided key
            logger.warning(
                "[%s] Rejected %s %s: missing or invalid %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                API_KEY_HEADER,
            )
            result = Result.fail(ErrorKind.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)
            return JSONResponse(status_code=401, content=result.to_envelope())

        return await call_next(request)
