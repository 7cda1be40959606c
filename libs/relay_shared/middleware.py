# libs/relay_shared/middleware.py
"""
Request tracing and request metrics as Starlette middleware.
"""

import time
import uuid
from typing import Callable, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .logging import get_logger
from .metrics import Metrics

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with a correlation id.

    An id sent by the caller is reused; otherwise a UUID4 is generated. The id
    is stored on ``request.state.correlation_id`` and echoed in the response.
    """

    def __init__(self, app: ASGIApp, header_name: str = CORRELATION_HEADER):
        super().__init__(app)
        self.header_name = header_name
        self.logger = get_logger("correlation")

    def _resolve(self, request: Request) -> str:
        incoming = request.headers.get(self.header_name)
        if incoming:
            return incoming
        generated = str(uuid.uuid4())
        self.logger.debug(f"Generated new correlation ID: {generated}")
        return generated

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.correlation_id = correlation_id = self._resolve(request)
        response = await call_next(request)
        response.headers[self.header_name] = correlation_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Count requests and time them until the response headers are ready.

    For streaming responses the duration therefore excludes the body.
    """

    def __init__(self, app: ASGIApp, exclude_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or ())
        self.logger = get_logger("metrics")

    @staticmethod
    def _record(method: str, path: str, status_code: int, started: float) -> None:
        Metrics.counter(
            "http_requests_total",
            {"method": method, "path": path, "status": str(status_code)},
        )
        Metrics.histogram(
            "http_request_duration_ms",
            (time.perf_counter() - started) * 1000,
            {"method": method, "path": path},
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path.startswith(self.exclude_paths):
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self.logger.exception(f"Exception in request: {request.method} {path}")
            self._record(request.method, path, 500, started)
            raise

        self._record(request.method, path, response.status_code, started)
        return response
