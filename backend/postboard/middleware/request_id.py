"""
Postboard Backend: Request ID Middleware
==========================================

What:  Assigns an id to each request and returns it in X-Request-ID.
Why:   Every log line written while handling a request carries the same id
       (see RequestIDLogFilter in postboard.main).
How:   Reuses a well-formed client-provided X-Request-ID, otherwise generates
       a short UUID, and stores it in a ContextVar.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client ids end up in log lines; only accept short, printable tokens
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        provided = request.headers.get(REQUEST_ID_HEADER, "")
        rid = provided if _VALID_REQUEST_ID.match(provided) else new_request_id()

        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
