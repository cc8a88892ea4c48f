"""
Prometheus metrics

Metric objects are module-level because prometheus_client registers them
on the global registry exactly once per process.
"""
import time

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    ["method", "route", "status_code"],
    buckets=[0.1, 0.5, 1, 1.5, 2, 5],
)

order_status_transitions = Counter(
    "order_status_transitions_total",
    "Order status transitions",
    ["from_status", "to_status"],
)

router = APIRouter(tags=["Metrics"])


def _route_template(request: Request) -> str:
    # Matched route path so /orders/1 and /orders/2 share a label
    route = request.scope.get("route")
    if route is None:
        return "unmatched"
    return getattr(route, "path", "unmatched")


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        response = await call_next(request)
        http_request_duration_seconds.labels(
            request.method,
            _route_template(request),
            str(response.status_code),
        ).observe(time.time() - start_time)
        return response


@router.get("/metrics")
async def metrics():
    """Prometheus scrape endpoint"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
