"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

PIPELINE_RUNS = Counter(
    "analysis_pipeline_runs_total",
    "Analysis pipeline runs by outcome (success or an error code)",
    ("outcome",),
)

PIPELINE_FALLBACKS = Counter(
    "analysis_pipeline_fallbacks_total",
    "Recoverable stage failures absorbed by a fallback",
    ("stage",),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    observed_duration = max(duration_seconds, 0)

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=str(status_code),
    ).inc()
    REQUEST_LATENCY.labels(method=safe_method, route=safe_route).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(method=safe_method, route=safe_route).inc()


def record_pipeline_run(outcome: str) -> None:
    PIPELINE_RUNS.labels(outcome=outcome).inc()


def record_fallback(stage: str) -> None:
    PIPELINE_FALLBACKS.labels(stage=stage).inc()
