"""
Postboard Backend: Result and Envelope
========================================

What:  The value every post operation returns, and its JSON rendering.
Why:   Domain outcomes (not found, nothing to update, storage fault) are
       ordinary results, not exceptions; the route only has to render them.

Envelope format:
    success:  {"success": true, "data": <any>}
    failure:  {"success": false, "error": "<message>"}

Keys without a value are omitted. An empty list is a value.
"""

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from postboard.errors import ErrorKind, status_for


class Result(BaseModel):
    """Outcome of a post operation: a value, or a classified error."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Any) -> "Result":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "Result":
        return cls(success=False, error=message, kind=kind)

    def status_code(self, strict: bool = False) -> int:
        if self.success:
            return 200
        return status_for(self.kind or ErrorKind.INTERNAL, strict)

    def to_envelope(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            body["data"] = jsonable_encoder(self.data)
        if self.error is not None:
            body["error"] = self.error
        return body
