# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for Valerie.

Validation failures are never raised: they are reported as ``ResultMap``
entries. The exceptions below signal programming or configuration defects in
a Check tree (bad constructor arguments, malformed molds, an input graph that
does not have the shape the tree expects) and always propagate to the caller.
"""

from __future__ import annotations

from typing import Any, Optional


class ValerieError(Exception):
    """Base class for all errors raised by Valerie."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgumentError(ValerieError, ValueError):
    """An argument was missing or had an unsupported shape."""

    def __init__(self, message: str, *, argument: Optional[str] = None, value: Any = None):
        self.argument = argument
        self.value = value
        super().__init__(message)


class ConfigurationError(ValerieError):
    """A checker registry or declarative definition is malformed."""


class EvaluationTimeoutError(ValerieError, TimeoutError):
    """An evaluation did not complete within its deadline."""

    def __init__(self, timeout: float, *, name: Optional[str] = None):
        self.timeout = timeout
        self.name = name
        subject = f"'{name}'" if name else "check"
        super().__init__(f"Evaluation of {subject} did not complete within {timeout:g}s")


def require_not_none(value: Any, argument: str) -> Any:
    """Return *value* or raise :class:`InvalidArgumentError` if it is ``None``."""

    if value is None:
        raise InvalidArgumentError(f"{argument} must not be None", argument=argument)
    return value


__all__ = [
    "ValerieError",
    "InvalidArgumentError",
    "ConfigurationError",
    "EvaluationTimeoutError",
    "require_not_none",
]
