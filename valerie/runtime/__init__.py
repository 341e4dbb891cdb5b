"""Runtime helpers for evaluating check trees."""

from .evaluation import evaluate, evaluate_async, format_result_map

__all__ = ["evaluate", "evaluate_async", "format_result_map"]
