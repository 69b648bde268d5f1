from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "map_proxy_requests_total",
    "Total number of inbound requests",
    ["method", "endpoint", "status_code"]
)

REQUEST_LATENCY = Histogram(
    "map_proxy_request_duration_seconds",
    "Inbound request latency",
    ["method", "endpoint"]
)

# Calls made to the ArcGIS feature, map and token services
UPSTREAM_REQUEST_COUNT = Counter(
    "map_proxy_upstream_requests_total",
    "Total number of requests sent to ArcGIS services",
    ["operation", "status_code"]
)
