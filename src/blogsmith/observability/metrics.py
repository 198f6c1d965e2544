from __future__ import annotations

"""Prometheus metrics for the blogsmith relay.

Adds an HTTP middleware that records request latency per method/path/status,
plus counters for relayed fragments and generation failures.
"""

import time
from typing import Callable, Awaitable

from prometheus_client import Counter, Histogram
from starlette.requests import Request
from starlette.responses import Response

# Latency until response headers; streamed bodies continue afterwards.
REQUEST_LATENCY = Histogram(
    "blogsmith_request_latency_seconds",
    "HTTP request latency in seconds",
    labelnames=("method", "path", "status"),
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)

FRAGMENTS_RELAYED = Counter(
    "blogsmith_fragments_relayed_total",
    "Decoded text fragments forwarded to clients",
)

FRAMES_SKIPPED = Counter(
    "blogsmith_frames_skipped_total",
    "Malformed upstream frames dropped by the decoder",
)

GENERATION_FAILURES = Counter(
    "blogsmith_generation_failures_total",
    "Failed generation requests by reason",
    labelnames=("reason",),
)


def sanitize_path(path: str) -> str:
    """Reduce a request path to a coarse label.

    Keeps the first two static segments so ``/api/generate`` stays distinct
    from ``/api/health``.
    """
    if not path:
        return "/"
    segs = [s for s in path.split("?")[0].split("/") if s]
    if not segs:
        return "/"
    return "/" + "/".join(segs[:2])


def metrics_middleware_factory() -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    async def middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        if request.url.path.startswith("/metrics") or request.url.path.startswith("/api/metrics"):
            return await call_next(request)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        try:
            REQUEST_LATENCY.labels(
                method=request.method,
                path=sanitize_path(request.url.path),
                status=str(response.status_code),
            ).observe(elapsed)
        except Exception:
            # Never block the request due to metrics
            pass
        return response

    return middleware
