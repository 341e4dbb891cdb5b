# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for Valerie."""

from __future__ import annotations

import logging
import time
from typing import Optional

from .runtime import meter

logger = logging.getLogger(__name__)

evaluation_total = meter.create_counter(
    name="valerie.evaluation.total",
    description="Counts top-level evaluations, partitioned by outcome (clean, dirty, error).",
    unit="1",
)

evaluation_latency_ms = meter.create_histogram(
    name="valerie.evaluation.latency.ms",
    description="Time taken to evaluate a check tree against one input.",
    unit="ms",
)

evaluation_results_total = meter.create_counter(
    name="valerie.evaluation.results.total",
    description="Counts the Results produced by evaluations.",
    unit="1",
)

definition_load_total = meter.create_counter(
    name="valerie.definition.load.total",
    description="Counts declarative definition loads, partitioned by status.",
    unit="1",
)


def record_evaluation_metrics(
    name: str,
    outcome: str,
    started_at: float,
    result_count: Optional[int] = None,
) -> None:
    """Record latency and outcome for a single evaluation.

    Args:
        name: Name the evaluation is reported under
        outcome: "clean", "dirty" or "error"
        started_at: Timestamp from time.perf_counter() when evaluation started
        result_count: Number of Results produced, when the evaluation finished
    """

    duration_ms = (time.perf_counter() - started_at) * 1000.0
    attributes = {"valerie.check": name, "outcome": outcome}
    try:
        evaluation_latency_ms.record(duration_ms, attributes)
        evaluation_total.add(1, attributes)
        if result_count:
            evaluation_results_total.add(result_count, {"valerie.check": name})
    except Exception:
        # Telemetry must never change the outcome of an evaluation
        logger.debug("Failed to record evaluation metrics for %s", name, exc_info=True)


__all__ = [
    "definition_load_total",
    "evaluation_latency_ms",
    "evaluation_results_total",
    "evaluation_total",
    "record_evaluation_metrics",
]
