from __future__ import annotations

import time
import uuid
from collections.abc import Callable

import sentry_sdk
import structlog
from fastapi import Request, Response

REQUEST_ID_HEADER = "X-Request-ID"


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """Attach/propagate Request-ID and emit one structured access log per request.

    - Inbound X-Request-ID wins; otherwise a UUID4 is generated
    - request_id, path and method are bound to contextvars for service logs
    - The Request-ID is always echoed on the response
    """
    logger = structlog.get_logger(__name__)

    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    path = request.url.path
    structlog.contextvars.bind_contextvars(request_id=rid, path=path, method=request.method)
    # no-op when Sentry is not initialised
    sentry_sdk.set_tag("request_id", rid)

    client_ip = (request.client.host if request.client else None) or "-"
    start_ns = time.perf_counter_ns()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers[REQUEST_ID_HEADER] = rid
        return response
    except Exception:
        logger.error("http_request_failed", status=status_code, client_ip=client_ip, exc_info=True)
        raise
    finally:
        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000.0
        logger.info(
            "http_request",
            status=status_code,
            duration_ms=round(duration_ms, 3),
            client_ip=client_ip,
        )
        # Clear per-request bindings to avoid leakage across tasks
        structlog.contextvars.clear_contextvars()
