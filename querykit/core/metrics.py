"""Prometheus metrics helpers for query observability."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from time import perf_counter

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

QUERIES_TOTAL = Counter(
    "querykit_queries_total",
    "Total number of list and page count queries sent to repositories.",
    ["query", "operation", "outcome"],
)

QUERY_DURATION_SECONDS = Histogram(
    "querykit_query_duration_seconds",
    "Repository call latency in seconds.",
    ["query", "operation"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


@contextmanager
def track_query(query: str, operation: str) -> Iterator[None]:
    """Track call count, outcome and latency of one repository call."""
    started_at = perf_counter()
    outcome = "error"
    try:
        yield
        outcome = "ok"
    finally:
        QUERIES_TOTAL.labels(query=query, operation=operation, outcome=outcome).inc()
        QUERY_DURATION_SECONDS.labels(query=query, operation=operation).observe(
            perf_counter() - started_at,
        )


def build_metrics_response() -> Response:
    """Return metrics payload in Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
