import httpx
from map_proxy.config import REQUEST_TIMEOUT
from map_proxy.logging_config import log_structured
from map_proxy.metrics import UPSTREAM_REQUEST_COUNT


def build_client(timeout: int = REQUEST_TIMEOUT) -> httpx.AsyncClient:
    # One client per outbound call, closed by the caller's `async with`
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout))


def record_response(operation: str, response: httpx.Response):
    log_structured(f"{operation}: request", level="debug", method=response.request.method, url=str(response.request.url))
    log_structured(f"{operation}: response", level="debug", status_code=response.status_code)
    UPSTREAM_REQUEST_COUNT.labels(operation=operation, status_code=response.status_code).inc()
