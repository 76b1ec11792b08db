"""
Prometheus metrics for the storefront core service.

Custom metrics for business logic and performance monitoring.
Labels never carry account, product or key identifiers.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License key metrics
license_keys_issued_total = Counter(
    "license_keys_issued_total",
    "Total license keys issued",
)

license_keys_deactivated_total = Counter(
    "license_keys_deactivated_total",
    "Total license keys deactivated by their owners",
)

# Wallet metrics
wallet_operations_total = Counter(
    "wallet_operations_total",
    "Wallet operations by outcome",
    ["operation", "outcome"],
)

wallet_ledger_fallback_total = Counter(
    "wallet_ledger_fallback_total",
    "Balance mutations applied on the non-atomic fallback path",
    ["operation"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
