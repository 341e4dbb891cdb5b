# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""The Check abstraction and its combinators.

A Check is a function of ``(value, context) -> ResultMap``. Checks are
immutable once built; combining two Checks always produces a new Check::

    a & b    # a.and_(b): b only runs when a is clean
    a | b    # a.or_(b):  b only runs when a is not clean
    a + b    # a.plus(b): both run, results are merged

``and_`` and ``or_`` return exactly one side's ResultMap; only ``plus``
aggregates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

from .context import EvalContext
from .exceptions import InvalidArgumentError
from .results import ResultMap

if TYPE_CHECKING:  # pragma: no cover
    from .checkers import Mold

CheckFunction = Callable[[Any, EvalContext], ResultMap]
TestFunction = Callable[[Any, EvalContext], Any]


def ensure_check(value: Any, argument: str = "check") -> "Check":
    if value is None:
        raise InvalidArgumentError(f"{argument} must not be None", argument=argument)
    if not isinstance(value, Check):
        raise InvalidArgumentError(
            f"{argument} must be a Check, got {type(value).__name__}",
            argument=argument,
            value=value,
        )
    return value


class Check(ABC):
    """A composable validation unit."""

    __slots__ = ()

    @abstractmethod
    def call(self, value: Any, context: EvalContext) -> ResultMap:
        """Evaluate *value* and return the feedback as a ResultMap.

        Implementations must not modify *value*; the only state they may
        touch is the stash of *context*.
        """

    def __call__(self, value: Any, context: Optional[EvalContext] = None) -> ResultMap:
        return self.call(value, EvalContext() if context is None else context)

    @staticmethod
    def from_function(function: CheckFunction) -> "Check":
        """Wrap ``function(value, context) -> ResultMap`` as a Check."""
        return FunctionCheck(function)

    def and_(self, other: "Check") -> "Check":
        from .composed import AndCheck

        return AndCheck.merge(self, ensure_check(other, "other"))

    def or_(self, other: "Check") -> "Check":
        from .composed import OrCheck

        return OrCheck.merge(self, ensure_check(other, "other"))

    def plus(self, other: "Check") -> "Check":
        from .composed import AllCheck

        return AllCheck.merge(self, ensure_check(other, "other"))

    def __and__(self, other: object) -> "Check":
        if not isinstance(other, Check):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other: object) -> "Check":
        if not isinstance(other, Check):
            return NotImplemented
        return self.or_(other)

    def __add__(self, other: object) -> "Check":
        if not isinstance(other, Check):
            return NotImplemented
        return self.plus(other)


class FunctionCheck(Check):
    """Check backed by a plain ``(value, context) -> ResultMap`` callable."""

    __slots__ = ("_function",)

    def __init__(self, function: CheckFunction):
        if not callable(function):
            raise InvalidArgumentError("function must be callable", argument="function", value=function)
        self._function = function

    @property
    def function(self) -> CheckFunction:
        return self._function

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        result = self._function(value, context)
        if not isinstance(result, ResultMap):
            raise InvalidArgumentError(
                f"Check function {getattr(self._function, '__qualname__', self._function)!r} "
                f"returned {type(result).__name__}, expected ResultMap",
                argument="function",
                value=result,
            )
        return result

    def __repr__(self) -> str:
        return f"FunctionCheck({getattr(self._function, '__qualname__', repr(self._function))})"


class PredicateCheck(Check):
    """Leaf check: clean when ``test`` is truthy, otherwise ``on_fail``."""

    __slots__ = ("_test", "_on_fail", "_mold", "_name")

    def __init__(
        self,
        test: TestFunction,
        on_fail: CheckFunction,
        *,
        mold: Optional["Mold"] = None,
        name: Optional[str] = None,
    ):
        if not callable(test):
            raise InvalidArgumentError("test must be callable", argument="test", value=test)
        if not callable(on_fail):
            raise InvalidArgumentError("on_fail must be callable", argument="on_fail", value=on_fail)
        self._test = test
        self._on_fail = on_fail
        self._mold = mold
        self._name = name

    @property
    def mold(self) -> Optional["Mold"]:
        return self._mold

    @property
    def name(self) -> Optional[str]:
        return self._name

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        if self._test(value, context):
            return ResultMap.CLEAN
        return self._on_fail(value, context)

    def __repr__(self) -> str:
        return f"PredicateCheck({self._name or 'satisfies'}, mold={self._mold!r})"


__all__ = [
    "Check",
    "CheckFunction",
    "FunctionCheck",
    "PredicateCheck",
    "TestFunction",
    "ensure_check",
]
