# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Checks composed from an ordered sequence of member Checks.

Members are kept as a flat tuple rather than a binary tree. ``merge`` splices
the members of an operand that is the same composed variant (compared by the
``variant`` tag) and keeps any other operand as a single opaque member.
Flattening never changes what an evaluation returns.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Tuple

from .check import Check, ensure_check
from .context import EvalContext
from .exceptions import InvalidArgumentError
from .results import ResultMap


class ComposedCheck(Check):
    """Base for the AND / OR / ALL variants."""

    __slots__ = ("_members",)

    variant: ClassVar[str] = ""

    def __init__(self, members: Iterable[Check]):
        if members is None:
            raise InvalidArgumentError("members must not be None", argument="members")
        if isinstance(members, Check):
            raise InvalidArgumentError(
                f"{type(self).__name__} takes a sequence of members; use {type(self).__name__}.merge() "
                "to combine two checks",
                argument="members",
                value=members,
            )
        self._members: Tuple[Check, ...] = tuple(
            ensure_check(member, f"members[{index}]") for index, member in enumerate(members)
        )

    @classmethod
    def merge(cls, left: Check, right: Check) -> "ComposedCheck":
        """Compose *left* then *right*, flattening operands of the same variant."""

        return cls(cls._merge_members(ensure_check(left, "left")) + cls._merge_members(ensure_check(right, "right")))

    @classmethod
    def _merge_members(cls, check: Check) -> Tuple[Check, ...]:
        if isinstance(check, ComposedCheck) and check.variant == cls.variant:
            return check.members
        return (check,)

    @property
    def members(self) -> Tuple[Check, ...]:
        return self._members

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._members)!r})"


class AndCheck(ComposedCheck):
    """Return the first non-clean member result, otherwise clean."""

    __slots__ = ()

    variant = "and"

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        for member in self._members:
            result = member.call(value, context)
            if not result.is_clean():
                return result
        return ResultMap.CLEAN


class OrCheck(ComposedCheck):
    """Return the first clean member result, otherwise the last member's.

    An OrCheck without members has nothing to disagree with and is clean.
    """

    __slots__ = ()

    variant = "or"

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        result = ResultMap.CLEAN
        for member in self._members:
            result = member.call(value, context)
            if result.is_clean():
                return result
        return result


class AllCheck(ComposedCheck):
    """Evaluate every member and merge the results in member order."""

    __slots__ = ()

    variant = "all"

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        merged = ResultMap.CLEAN
        for member in self._members:
            merged = merged.plus(member.call(value, context))
        return merged


__all__ = ["ComposedCheck", "AndCheck", "OrCheck", "AllCheck"]
