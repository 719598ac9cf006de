from __future__ import annotations
import logging
import time, uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .settings import QUIET_PATHS

logger = logging.getLogger("gateway")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        quiet = request.url.path in QUIET_PATHS

        if not quiet:
            logger.info(
                "request.start",
                extra={"request_id": request_id, "path": request.url.path, "method": request.method}
            )
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception(
                "request.exception",
                extra={"request_id": request_id, "duration_ms": duration_ms}
            )
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["x-request-id"] = request_id
        if not quiet:
            logger.info(
                "request.end",
                extra={"request_id": request_id, "status": response.status_code, "duration_ms": duration_ms}
            )
        return response
