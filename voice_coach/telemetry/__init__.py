"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    PIPELINE_FALLBACKS,
    PIPELINE_RUNS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    observe_request,
    record_fallback,
    record_pipeline_run,
)

__all__ = [
    "ERROR_COUNTER",
    "PIPELINE_FALLBACKS",
    "PIPELINE_RUNS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "observe_request",
    "record_fallback",
    "record_pipeline_run",
]
