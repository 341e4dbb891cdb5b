# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Result values and the ResultMap aggregation monoid.

A :class:`Result` is a single piece of feedback (message + code). A
:class:`ResultMap` groups Results by key (normally the path of the field that
was checked). An empty ResultMap is *clean*: every check passed. ResultMaps
merge with :meth:`ResultMap.plus`, which is associative and has the clean map
as its identity element.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .exceptions import InvalidArgumentError


@dataclass(frozen=True)
class Result:
    """A single unit of feedback produced by a failing check."""

    ILLEGAL_VALUE: ClassVar[str] = "ILLEGAL_VALUE"
    ILLEGAL_FIELD: ClassVar[str] = "ILLEGAL_FIELD"
    REQUIRED_FIELD: ClassVar[str] = "REQUIRED_FIELD"
    TOO_SHORT: ClassVar[str] = "TOO_SHORT"
    TOO_LONG: ClassVar[str] = "TOO_LONG"

    message: str
    code: str

    def __post_init__(self) -> None:
        for name in ("message", "code"):
            value = getattr(self, name)
            if value is None:
                raise InvalidArgumentError(f"Result.{name} must not be None", argument=name)
            if not isinstance(value, str):
                raise InvalidArgumentError(
                    f"Result.{name} must be a string, got {type(value).__name__}",
                    argument=name,
                    value=value,
                )

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, str]:
        return {"message": self.message, "code": self.code}


_Entries = Dict[str, Tuple[Result, ...]]


def _validated_entries(mapping: Any) -> _Entries:
    if mapping is None:
        raise InvalidArgumentError("ResultMap mapping must not be None", argument="mapping")
    if not isinstance(mapping, Mapping):
        raise InvalidArgumentError(
            f"ResultMap requires a mapping, got {type(mapping).__name__}",
            argument="mapping",
            value=mapping,
        )

    entries: _Entries = {}
    for key, results in mapping.items():
        entries[_validated_key(key)] = _validated_results(key, results)
    return entries


def _validated_key(key: Any) -> str:
    if key is None:
        raise InvalidArgumentError("ResultMap keys must not be None", argument="key")
    if not isinstance(key, str):
        raise InvalidArgumentError(
            f"ResultMap keys must be strings, got {type(key).__name__}",
            argument="key",
            value=key,
        )
    return key


def _validated_results(key: Any, results: Any) -> Tuple[Result, ...]:
    if results is None:
        raise InvalidArgumentError(f"Results for key '{key}' must not be None", argument="results")
    if isinstance(results, (str, bytes, Mapping)) or not isinstance(results, Iterable):
        raise InvalidArgumentError(
            f"Results for key '{key}' must be a sequence of Result",
            argument="results",
            value=results,
        )

    copied = tuple(results)
    for item in copied:
        if item is None:
            raise InvalidArgumentError(f"Results for key '{key}' must not contain None", argument="results")
        if not isinstance(item, Result):
            raise InvalidArgumentError(
                f"Results for key '{key}' must contain Result instances, got {type(item).__name__}",
                argument="results",
                value=item,
            )
    return copied


class ResultMap:
    """Immutable multimap of key -> ordered Results.

    Construct instances with :meth:`from_mapping` or :meth:`from_entry`; both
    copy their arguments so later mutation of the input never leaks in. The
    shared :attr:`CLEAN` instance is returned for empty input, but callers
    must use :meth:`is_clean` rather than identity to test for success.
    """

    __slots__ = ("_values", "_hash")

    CLEAN: ClassVar["ResultMap"]

    def __init__(self, mapping: Optional[Mapping[str, Iterable[Result]]] = None):
        self._values: _Entries = _validated_entries({} if mapping is None else mapping)
        self._hash: Optional[int] = None

    @classmethod
    def _trusted(cls, entries: _Entries) -> "ResultMap":
        instance = cls.__new__(cls)
        instance._values = entries
        instance._hash = None
        return instance

    @classmethod
    def clean(cls) -> "ResultMap":
        """Return the shared clean (empty) ResultMap."""
        return cls.CLEAN

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[Result]]) -> "ResultMap":
        """Build a ResultMap from ``{key: [Result, ...]}`` with deep validation."""

        entries = _validated_entries(mapping)
        if not entries:
            return cls.CLEAN
        return cls._trusted(entries)

    @classmethod
    def from_entry(cls, key: str, results: Iterable[Result]) -> "ResultMap":
        """Build a single-entry ResultMap."""

        return cls._trusted({_validated_key(key): _validated_results(key, results)})

    def is_clean(self) -> bool:
        """True when no check had anything to report."""
        return not self._values

    def as_map(self) -> Mapping[str, Tuple[Result, ...]]:
        """Read-only view of the entries; values are tuples."""
        return MappingProxyType(self._values)

    def get(self, key: str, default: Tuple[Result, ...] = ()) -> Tuple[Result, ...]:
        return self._values.get(key, default)

    def keys(self) -> List[str]:
        return list(self._values)

    def plus(self, other: "ResultMap") -> "ResultMap":
        """Merge *other* into a new ResultMap.

        Keys of ``self`` keep their order and come first; results for a key
        present on both sides are ``self``'s followed by ``other``'s; keys
        only present in ``other`` follow in ``other``'s order. If either side
        is clean the other side is returned unchanged.
        """

        if other is None:
            raise InvalidArgumentError("Cannot merge with None", argument="other")
        if not isinstance(other, ResultMap):
            raise InvalidArgumentError(
                f"Cannot merge ResultMap with {type(other).__name__}",
                argument="other",
                value=other,
            )
        if other.is_clean():
            return self
        if self.is_clean():
            return other

        merged: _Entries = dict(self._values)
        for key, results in other._values.items():
            existing = merged.get(key)
            merged[key] = results if existing is None else existing + results
        return ResultMap._trusted(merged)

    def __add__(self, other: object) -> "ResultMap":
        if not isinstance(other, ResultMap):
            return NotImplemented
        return self.plus(other)

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        """JSON-friendly export preserving key and result order."""
        return {key: [result.to_dict() for result in results] for key, results in self._values.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResultMap):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._values.items()))
        return self._hash

    def __repr__(self) -> str:
        if self.is_clean():
            return "ResultMap(clean)"
        body = ", ".join(
            f"{key!r}: [{', '.join(str(result) for result in results)}]"
            for key, results in self._values.items()
        )
        return f"ResultMap({{{body}}})"


ResultMap.CLEAN = ResultMap._trusted({})


__all__ = ["Result", "ResultMap"]
