"""
Prometheus metrics for the font catalog enrichment pipeline

Tracks record outcomes, external provider latency and warehouse writes
so a long batch can be watched from a scrape endpoint.
"""
import os
import time
from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# PIPELINE METRICS
# =======================

# status: persisted, embedded (dry run), skipped, failed
records_processed_total = Counter(
    name="fontcatalog_records_processed_total",
    documentation="Total number of font records processed by the pipeline",
    labelnames=["status"],
    registry=REGISTRY,
)

record_processing_seconds = Histogram(
    name="fontcatalog_record_processing_seconds",
    documentation="Time spent enriching a single font record",
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 40.0, 80.0],
    registry=REGISTRY,
)

batch_duration_seconds = Histogram(
    name="fontcatalog_batch_duration_seconds",
    documentation="Wall-clock time of a complete batch run",
    buckets=[60.0, 300.0, 900.0, 1800.0, 3600.0, 7200.0, 14400.0],
    registry=REGISTRY,
)

batch_position = Gauge(
    name="fontcatalog_batch_position",
    documentation="Index of the record currently being processed",
    registry=REGISTRY,
)

# =======================
# EXTERNAL CALL METRICS
# =======================

# operation: classify, rewrite, embed, render
external_call_duration_seconds = Histogram(
    name="fontcatalog_external_call_duration_seconds",
    documentation="Latency of calls to AI providers and the font renderer",
    labelnames=["operation"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)

external_call_failures_total = Counter(
    name="fontcatalog_external_call_failures_total",
    documentation="Total number of failed external calls",
    labelnames=["operation"],
    registry=REGISTRY,
)

# =======================
# WAREHOUSE METRICS
# =======================

warehouse_writes_total = Counter(
    name="fontcatalog_warehouse_writes_total",
    documentation="Total number of font rows written to the warehouse",
    labelnames=["operation"],  # upsert, update
    registry=REGISTRY,
)


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start the Prometheus scrape endpoint

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT, then 9108)
    """
    port = port or int(os.getenv("METRICS_PORT", "9108"))
    start_http_server(port, registry=REGISTRY)


class track_duration:
    """
    Context manager observing elapsed time into a histogram

    Usage:
        with track_duration(external_call_duration_seconds, operation="embed"):
            ...
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - self.start_time
        observe_histogram(self.histogram, elapsed, **self.labels)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment by
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def set_gauge(gauge: Gauge, value: float, **labels) -> None:
    """
    Set a gauge metric

    Args:
        gauge: Prometheus Gauge metric
        value: Value to set
        **labels: Label values for the metric
    """
    if labels:
        gauge.labels(**labels).set(value)
    else:
        gauge.set(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """
    Observe a value in a histogram metric

    Args:
        histogram: Prometheus Histogram metric
        value: Value to observe
        **labels: Label values for the metric
    """
    if labels:
        histogram.labels(**labels).observe(value)
    else:
        histogram.observe(value)


def record_external_failure(operation: str) -> None:
    """Count one failed provider call."""
    increment_counter(external_call_failures_total, 1, operation=operation)
