"""
Favorites API Backend: Request ID Middleware
=============================================

What:  Assigns a short id to each request and echoes it in `X-Request-ID`.
Why:   Lets a failing client call be matched to the server log lines that
       explain the generic "Something went wrong" it received.
How:   Reuses the caller's X-Request-ID when present, otherwise generates one;
       stores it in a ContextVar read by the logging middleware and the
       exception handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
