"""
Jotter: Request ID Middleware
===============================

What:  Tags each request with a short correlation ID and echoes it back.
How:   A client-sent X-Request-ID is kept only when it is a short token of
       letters, digits, '.', '_' or '-'; anything else (including a missing
       header) is replaced by a fresh 8-hex-char ID. The ID lives in a
       ContextVar for loggers and error handlers and is set on the response.
When:  Outermost of the custom middleware; runs before access logging.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Written verbatim into log lines and response headers
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: Optional[str]) -> str:
    """Return the client's ID if it is well-formed, else a new one."""
    if supplied and _VALID_REQUEST_ID.match(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
