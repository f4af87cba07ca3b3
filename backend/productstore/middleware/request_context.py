"""
Product Store — Request Context Middleware
===========================================

What:  Tags every request with a correlation ID and writes one access-log line
       describing the product operation it performed.
How:   The ID is stored on `request.state`, where the exception handlers read
       it, and echoed as X-Request-ID. After routing, the matched endpoint name
       and the `{id}` path parameter are read from the ASGI scope; a 201 also
       logs its Location.
Who:   Installed once by create_app(); GET /health is tagged but not logged.

Example lines (logger `productstore.access`):
    GET /products/sku-1 200 2.1ms op=get_product id=sku-1 [a1b2c3d4]
    POST /products 201 4.8ms op=create_product location=/products/65f1c0ff... [5e6f7a8b]
    DELETE /products/nope 404 1.3ms op=delete_product id=nope [trace-1]

Request bodies are never logged.
"""

import logging
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("productstore.access")

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

# Tagged with an ID but never logged
UNLOGGED_PATHS = frozenset({"/health"})


def resolve_request_id(supplied: Optional[str]) -> str:
    """
    Echo a usable client ID, otherwise mint an 8-character one.

    A supplied ID is usable when it is non-empty, printable and at most
    MAX_REQUEST_ID_LENGTH characters.
    """
    if supplied and len(supplied) <= MAX_REQUEST_ID_LENGTH and supplied.isprintable():
        return supplied
    return uuid.uuid4().hex[:8]


def _status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            # Answered by the outermost error handler, which adds the header itself
            self._log_access(request, 500, start_time, rid)
            raise

        response.headers[REQUEST_ID_HEADER] = rid
        self._log_access(request, response.status_code, start_time, rid, response)
        return response

    def _log_access(
        self,
        request: Request,
        status: int,
        start_time: float,
        rid: str,
        response: Optional[Response] = None,
    ) -> None:
        path = request.url.path
        if path in UNLOGGED_PATHS:
            return

        duration_ms = (time.perf_counter() - start_time) * 1000

        # The router writes the matched route and its path params into the scope
        route = request.scope.get("route")
        operation = getattr(route, "name", None) or "-"
        product_id = request.path_params.get("id")
        location = response.headers.get("location") if response is not None and status == 201 else None

        detail = f"op={operation}"
        if product_id is not None:
            detail += f" id={product_id}"
        if location:
            detail += f" location={location}"

        logger.log(
            _status_level(status),
            "%s %s %d %.1fms %s [%s]",
            request.method,
            path,
            status,
            duration_ms,
            detail,
            rid,
            extra={
                "request_id": rid,
                "operation": operation,
                "product_id": product_id,
                "location": location,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
