"""Metrics and tracing for evaluations and definition loading."""

from .metrics import (
    definition_load_total,
    evaluation_latency_ms,
    evaluation_results_total,
    evaluation_total,
    record_evaluation_metrics,
)
from .runtime import get_tracer, meter

__all__ = [
    "definition_load_total",
    "evaluation_latency_ms",
    "evaluation_results_total",
    "evaluation_total",
    "get_tracer",
    "meter",
    "record_evaluation_metrics",
]
