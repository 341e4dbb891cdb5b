# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Instrumented evaluation of check trees.

``check.call(value, context)`` is all the core needs. The helpers here add
what an application usually wants around it: a fresh context per call, a
span, metrics, logging and, for async callers, a deadline.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Optional

import anyio
import anyio.to_thread

from ..check import Check, ensure_check
from ..context import EvalContext
from ..exceptions import EvaluationTimeoutError
from ..results import ResultMap
from ..telemetry.metrics import record_evaluation_metrics
from ..telemetry.runtime import get_tracer

logger = logging.getLogger(__name__)


def _name_of(check: Check, name: Optional[str]) -> str:
    return name or type(check).__name__


def evaluate(check: Check, value: Any, name: Optional[str] = None) -> ResultMap:
    """Evaluate *value* against *check* with a fresh :class:`EvalContext`.

    Errors raised by the tree are logged, counted with outcome ``error`` and
    re-raised unchanged.
    """

    ensure_check(check, "check")
    label = _name_of(check, name)
    started_at = time.perf_counter()
    with get_tracer().start_as_current_span(
        f"valerie.evaluate:{label}",
        attributes={"valerie.check": label},
    ) as span:
        try:
            result = check.call(value, EvalContext())
        except Exception:
            record_evaluation_metrics(label, "error", started_at)
            logger.error("Evaluation of %s raised", label, exc_info=True)
            raise
        result_count = sum(len(results) for results in result.as_map().values())
        outcome = "clean" if result.is_clean() else "dirty"
        span.set_attribute("valerie.outcome", outcome)
        span.set_attribute("valerie.result_count", result_count)
        record_evaluation_metrics(label, outcome, started_at, result_count)
        logger.debug("Evaluated %s: %s (%d results)", label, outcome, result_count)
        return result


async def evaluate_async(
    check: Check,
    value: Any,
    *,
    timeout: Optional[float] = None,
    name: Optional[str] = None,
) -> ResultMap:
    """Run :func:`evaluate` on a worker thread, optionally under a deadline.

    When *timeout* expires the worker thread is abandoned (it still runs to
    completion in the background) and :class:`EvaluationTimeoutError` is
    raised.
    """

    ensure_check(check, "check")
    try:
        with anyio.fail_after(timeout):
            return await anyio.to_thread.run_sync(
                functools.partial(evaluate, check, value, name),
                abandon_on_cancel=True,
            )
    except TimeoutError as exc:
        if isinstance(exc, EvaluationTimeoutError):
            raise
        label = _name_of(check, name)
        logger.warning("Evaluation of %s timed out after %ss", label, timeout)
        raise EvaluationTimeoutError(timeout, name=label) from exc


def format_result_map(result_map: ResultMap, subject: str = "input") -> str:
    """Produce a human-readable summary of validation feedback."""

    if result_map.is_clean():
        return f"Validation of {subject} passed."
    lines = [f"Validation failed for {subject}:"]
    for key, results in result_map.as_map().items():
        for result in results:
            lines.append(f" - {key}: {result.message} ({result.code})")
    return "\n".join(lines)


__all__ = ["evaluate", "evaluate_async", "format_result_map"]
