"""
Performance monitoring middleware: request timing headers and slow request
logging with process resource usage.
"""

from typing import Callable, Dict, Any
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import psutil

logger = logging.getLogger(__name__)


def system_metrics() -> Dict[str, Any]:
    """Snapshot of host and process resource usage."""
    try:
        memory = psutil.virtual_memory()
        process = psutil.Process()
        return {
            "cpu_percent": psutil.cpu_percent(interval=None),
            "memory_percent": memory.percent,
            "process_memory_rss": process.memory_info().rss,
        }
    except psutil.Error as e:
        logger.warning(f"Failed to collect system metrics: {e}")
        return {}


class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    Adds ``X-Processing-Time`` to every response, logs slow requests as
    warnings with a snapshot of process resource usage.
    """

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 1.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", "unknown")
        endpoint = f"{request.method} {request.url.path}"

        response = await call_next(request)
        processing_time = time.perf_counter() - start_time

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"SLOW REQUEST [{request_id}]: {endpoint} - {processing_time:.3f}s",
                extra={"request_id": request_id, "endpoint": endpoint, "processing_time": processing_time, **system_metrics()}
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response

