"""Request logging middleware for structured logging."""

import logging
import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from eventscout.utils.logging import bind_request_id, get_logger, reset_request_id

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ID and logs method, path, status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id
        token = bind_request_id(request_id)

        log = logger.bind(
            request_id=request_id,
            endpoint=request.url.path,
            method=request.method,
            client_ip=request.client.host if request.client else "unknown",
        )
        started = time.perf_counter()
        log.info(
            f"{request.method} {request.url.path}",
            extra={"user_agent": request.headers.get("user-agent", "unknown")},
        )

        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                f"{request.method} {request.url.path} failed: {e}",
                extra={"status_code": 500, "duration_ms": self._elapsed(started)},
                exc_info=True,
            )
            raise
        finally:
            reset_request_id(token)

        level = logging.INFO if response.status_code < 400 else logging.WARNING
        log.log(
            level,
            f"{request.method} {request.url.path} {response.status_code}",
            extra={"status_code": response.status_code, "duration_ms": self._elapsed(started)},
        )
        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _elapsed(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
