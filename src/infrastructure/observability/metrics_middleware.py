"""
Observability middleware for tracking request and business metrics.

This middleware provides:
1. Request/response metrics (latency, status codes, endpoints)
2. Business metrics (codes sent, codes verified)
3. Structured logging for easy parsing

Metrics go to the RedisMetricsStorage found on app.state; when there is
none (metrics disabled, lifespan not run) the middleware is a pass-through.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .redis_metrics_storage import RedisMetricsStorage

logger = logging.getLogger(__name__)

# Path suffix -> business metric counted on a successful response
BUSINESS_METRIC_PATHS = {
    "/verification/send": "codes_sent",
    "/verification/verify": "codes_verified",
}


def business_metric_for(path: str, status_code: int) -> str | None:
    """
    Map a completed request to the business metric it counts towards.

    Args:
        path: Request path
        status_code: Response status code

    Returns:
        Metric name, or None if the request doesn't count
    """
    if status_code >= 400:
        return None
    for suffix, metric in BUSINESS_METRIC_PATHS.items():
        if path.endswith(suffix):
            return metric
    return None


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track HTTP request/response metrics.

    Tracks latency samples, status code distribution, request counts per
    endpoint and business counters. Each request is also logged with its
    metrics in `extra` for log aggregators.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        storage: RedisMetricsStorage | None = getattr(request.app.state, "metrics_storage", None)
        if storage is None:
            return await call_next(request)

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        endpoint = f"{method} {path}"
        status_code = 500
        error = None

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            error = str(e)
            logger.error(
                "Request failed with exception",
                extra={"endpoint": endpoint, "method": method, "path": path, "error": error},
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            await storage.record_request(endpoint, status_code, duration_ms)
            self._log_request_metrics(method, path, status_code, duration_ms, error)

            metric = business_metric_for(path, status_code)
            if metric:
                await storage.increment_business_metric(metric)
                logger.info(
                    "Business metric",
                    extra={"type": "business_metric", "metric": metric},
                )

        return response

    @staticmethod
    def _log_request_metrics(
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        error: str | None = None,
    ) -> None:
        """Log request metrics as structured data."""
        log_data = {
            "type": "request_metric",
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
        }

        if error:
            log_data["error"] = error

        if status_code >= 500:
            logger.error("Request completed with server error", extra=log_data)
        elif status_code >= 400:
            logger.warning("Request completed with client error", extra=log_data)
        else:
            logger.info("Request completed successfully", extra=log_data)
