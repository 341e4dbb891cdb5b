# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Checks that evaluate a transformed view of their input.

Traversal of an input graph is modelled as transformation: a
:class:`ChildTraverser` hands the named child of its input to its nested
check, so a Check tree mirrors the shape of the data it validates. Any
transformer may also stash the transformed value in the evaluation context
for checks elsewhere in the tree.

An input whose shape does not match the tree (for example a child lookup on
an integer) is a defect in the tree, not a validation failure, and raises
:class:`~valerie.exceptions.InvalidArgumentError`.
"""

from __future__ import annotations

import collections.abc
from typing import Any, Iterator, Mapping, NamedTuple, Optional

from .check import Check, ensure_check
from .context import EvalContext
from .exceptions import InvalidArgumentError
from .results import ResultMap


class Entry(NamedTuple):
    """A key/value pair produced when iterating over a mapping."""

    key: Any
    value: Any


class TransformerCheck(Check):
    """Transform the input, optionally stash it, then delegate."""

    __slots__ = ("_nested_check", "_stash_as")

    def __init__(self, nested_check: Check, *, stash_as: Optional[str] = None):
        self._nested_check = ensure_check(nested_check, "nested_check")
        if stash_as is not None and not isinstance(stash_as, str):
            raise InvalidArgumentError("stash_as must be a string", argument="stash_as", value=stash_as)
        self._stash_as = stash_as

    @property
    def nested_check(self) -> Check:
        return self._nested_check

    @property
    def stash_as(self) -> Optional[str]:
        return self._stash_as

    def transform(self, value: Any) -> Any:
        return value

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        transformed = self.transform(value)
        if self._stash_as is not None:
            if transformed is None:
                # the stash cannot hold None; an absent key reads the same way
                context.clear_stashed(self._stash_as)
            else:
                context.set_stashed(self._stash_as, transformed)
        return self._nested_check.call(transformed, context)


class NopTransformer(TransformerCheck):
    """Identity transformer, used as the uniform root node of definitions."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"NopTransformer({self._nested_check!r}, stash_as={self._stash_as!r})"


class ChildTraverser(TransformerCheck):
    """Evaluate the nested check against the named child of the input.

    * ``None`` input yields ``None`` (the nested check decides what that means).
    * A mapping yields ``value.get(child_name)``; an absent key is ``None``.
    * An :class:`Entry` exposes its ``key`` and ``value`` components.
    * Anything else raises :class:`InvalidArgumentError`.
    """

    __slots__ = ("_child_name",)

    def __init__(self, child_name: str, nested_check: Check, *, stash_as: Optional[str] = None):
        if child_name is None:
            raise InvalidArgumentError("child_name must not be None", argument="child_name")
        if not isinstance(child_name, str):
            raise InvalidArgumentError("child_name must be a string", argument="child_name", value=child_name)
        super().__init__(nested_check, stash_as=stash_as)
        self._child_name = child_name

    @property
    def child_name(self) -> str:
        return self._child_name

    def transform(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, Entry):
            if self._child_name == "value":
                return value.value
            if self._child_name == "key":
                return value.key
        elif isinstance(value, Mapping):
            return value.get(self._child_name)
        raise InvalidArgumentError(
            f"Cannot traverse to child '{self._child_name}' of {type(value).__name__}",
            argument="value",
            value=value,
        )

    def __repr__(self) -> str:
        return f"ChildTraverser({self._child_name!r}, {self._nested_check!r})"


def iter_items(value: Any) -> Iterator[Any]:
    """Yield the items a collection check should visit.

    Mappings yield :class:`Entry` pairs, other iterables their elements.
    Strings and bytes are treated as scalars and rejected. One-shot iterators
    (generators, ``iter(...)`` results) are rejected too; they would be
    exhausted by the first evaluation.
    """

    if isinstance(value, Mapping):
        return (Entry(key, item) for key, item in value.items())
    if isinstance(value, (str, bytes, bytearray)):
        raise InvalidArgumentError(
            f"Cannot iterate over {type(value).__name__} values", argument="value", value=value
        )
    if isinstance(value, collections.abc.Iterator) and not isinstance(value, collections.abc.Collection):
        raise InvalidArgumentError(
            f"Cannot iterate over one-shot iterator {type(value).__name__}", argument="value", value=value
        )
    try:
        return iter(value)
    except TypeError:
        raise InvalidArgumentError(
            f"Cannot iterate over {type(value).__name__}", argument="value", value=value
        ) from None


class EachValueTraverser(Check):
    """Evaluate the nested check once per item and merge the results."""

    __slots__ = ("_nested_check",)

    def __init__(self, nested_check: Check):
        self._nested_check = ensure_check(nested_check, "nested_check")

    @property
    def nested_check(self) -> Check:
        return self._nested_check

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        if value is None:
            return ResultMap.CLEAN
        merged = ResultMap.CLEAN
        for item in iter_items(value):
            merged = merged.plus(self._nested_check.call(item, context))
        return merged

    def __repr__(self) -> str:
        return f"EachValueTraverser({self._nested_check!r})"


__all__ = [
    "ChildTraverser",
    "EachValueTraverser",
    "Entry",
    "NopTransformer",
    "TransformerCheck",
    "iter_items",
]
