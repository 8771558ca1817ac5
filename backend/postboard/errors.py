"""
Postboard Backend: Error Taxonomy
===================================

What:  Classifies every failed outcome and maps it to an HTTP status code.
Why:   Services report failures as Result values tagged with an ErrorKind
       instead of raising; the HTTP layer turns the kind into a status.
How:   status_for() consults one of two tables depending on
       settings.strict_status_codes.

Error Kinds:
    UNAUTHORIZED        missing or wrong X-API-Key        -> 401 (both modes)
    NOT_FOUND           unknown id or unmatched API path  -> 400 | strict 404
    METHOD_NOT_ALLOWED  known path, unsupported method    -> 400 | strict 405
    VALIDATION          body does not conform, no fields  -> 400 | strict 400
    STORAGE             persistence layer raised          -> 400 | strict 500
    INTERNAL            malformed JSON, unexpected error  -> 400 | strict 500

Compatibility mode (the default) reports every failure except 401 as 400,
which is what existing clients of this API observe.
"""

from enum import Enum
from typing import Dict


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    VALIDATION = "validation"
    STORAGE = "storage"
    INTERNAL = "internal"


# ── Client-facing messages ────────────────────────────────────────────────
UNAUTHORIZED_MESSAGE = "Unauthorized"
NOT_FOUND_MESSAGE = "Not found"
POST_NOT_FOUND_MESSAGE = "Post not found"
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"
NO_FIELDS_MESSAGE = "No fields to update"
INVALID_BODY_MESSAGE = "Invalid request body"
INTERNAL_ERROR_MESSAGE = "Internal server error"


_STRICT_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.VALIDATION: 400,
    ErrorKind.STORAGE: 500,
    ErrorKind.INTERNAL: 500,
}


def status_for(kind: ErrorKind, strict: bool = False) -> int:
    """HTTP status code for a failed outcome of the given kind."""
    if kind is ErrorKind.UNAUTHORIZED:
        return 401
    if strict:
        return _STRICT_STATUS[kind]
    return 400
