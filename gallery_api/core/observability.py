"""Per-feature request timing for the resource routers."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import AsyncIterator, Callable

from fastapi import Request

TIMING_LOGGER = "gallery_api.timing"


def _route_name(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "name", None) or "unknown"


def timing_dependency_factory(feature: str) -> Callable[[Request], AsyncIterator[None]]:
    """Build a router dependency logging one ``endpoint_timing`` line per request.

    The line names the feature and the handler that served the request, e.g.
    ``endpoint_timing feature=images route=upload_image method=POST
    path=/api/images duration_ms=3.21``.
    """

    logger = logging.getLogger(f"{TIMING_LOGGER}.{feature}")

    async def _timing_dependency(request: Request) -> AsyncIterator[None]:
        start = perf_counter()
        try:
            yield
        finally:
            logger.info(
                "endpoint_timing feature=%s route=%s method=%s path=%s duration_ms=%.2f",
                feature,
                _route_name(request),
                request.method,
                request.url.path,
                (perf_counter() - start) * 1000,
            )

    return _timing_dependency


__all__ = ["TIMING_LOGGER", "timing_dependency_factory"]
