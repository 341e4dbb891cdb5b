"""Pytest fixtures for the Valerie test-suite.

The fixtures below build small, instrumented checks so tests can assert not
only *what* a composed check returns but also *which* members ran.
"""
from __future__ import annotations

from typing import Any, Callable, List

import pytest

from valerie import Check, Checkers, EvalContext, Result, ResultMap


class RecordingCheck(Check):
    """Check returning a fixed ResultMap and recording every input it sees."""

    __slots__ = ("result", "calls", "label")

    def __init__(self, result: ResultMap, label: str = "recording"):
        self.result = result
        self.calls: List[Any] = []
        self.label = label

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        self.calls.append(value)
        return self.result

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def __repr__(self) -> str:
        return f"RecordingCheck({self.label})"


def dirty(key: str = "key", message: str = "failed", code: str = "CODE") -> ResultMap:
    return ResultMap.from_entry(key, [Result(message, code)])


@pytest.fixture()
def checkers() -> Checkers:
    return Checkers()


@pytest.fixture()
def ctx() -> EvalContext:
    return EvalContext()


@pytest.fixture()
def clean_check() -> Callable[..., RecordingCheck]:
    """Factory for recording checks that always pass."""

    def _make(label: str = "clean") -> RecordingCheck:
        return RecordingCheck(ResultMap.CLEAN, label)

    return _make


@pytest.fixture()
def dirty_check() -> Callable[..., RecordingCheck]:
    """Factory for recording checks that always report one Result."""

    def _make(key: str = "key", message: str = "failed", code: str = "CODE") -> RecordingCheck:
        return RecordingCheck(dirty(key, message, code), f"dirty:{key}")

    return _make


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise: most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield
