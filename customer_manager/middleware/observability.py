from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from customer_manager.core.metrics import request_metrics
from customer_manager.core.request_context import clear_request_context, set_request_id

logger = logging.getLogger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_id(request_id)

        status_code = 500
        method = request.method

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = _route_template(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)

            request_metrics.observe(endpoint=endpoint, method=method, status_code=status_code, duration_ms=duration_ms)

            logger.info(
                "request completed",
                extra={
                    "request_id": request_id,
                    "endpoint": endpoint,
                    "method": method,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

            if "response" in locals():
                response.headers["X-Request-ID"] = request_id

            clear_request_context()


def _route_template(request: Request) -> str:
    # "/api/customers/{customer_id}" rather than one metric per id
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path
