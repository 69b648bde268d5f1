import time
import uuid
from fastapi import Request
from map_proxy.logging_config import log_structured
from map_proxy.metrics import REQUEST_COUNT, REQUEST_LATENCY

UNMETERED_PATHS = {"/metrics"}
UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    # Route template keeps label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)


async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{elapsed:.6f}"

    log_structured(
        "Request processed",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        process_time=elapsed
    )

    if request.url.path not in UNMETERED_PATHS:
        endpoint = endpoint_label(request)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status_code=response.status_code).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)

    return response
