# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Catalog of predicate checks and higher-order helpers.

Every predicate is configured by a :class:`Mold` (``key``, ``msg``, ``code``)
which shapes the Result produced on failure. Each predicate supplies its own
default ``msg`` and ``code``; the ``key`` normally comes from the caller or
from the enclosing definition scope.

``None`` is never an instance, so :meth:`Checkers.is_instance_of` reports it.
The range, size, pattern and field predicates treat ``None`` as passing so
that they compose with :meth:`Checkers.is_not_null`.
"""

from __future__ import annotations

import dataclasses
import enum
import re
from dataclasses import dataclass
from typing import Any, Callable, Collection, Iterable, Mapping, Optional, Sequence, Tuple, Union

from .check import Check, CheckFunction, FunctionCheck, PredicateCheck, TestFunction, ensure_check
from .composed import AllCheck, AndCheck, OrCheck
from .context import EvalContext
from .exceptions import InvalidArgumentError
from .results import Result, ResultMap

Message = Union[str, Callable[[Any, EvalContext], Any]]
MoldLike = Union["Mold", Mapping[str, Any], None]


@dataclass(frozen=True)
class Mold:
    """Shape of the Result a predicate emits when it fails.

    ``msg`` may be a plain string or a callable ``(value, context)`` that is
    only invoked when a failure is reported, so the message can describe the
    offending value.
    """

    key: Optional[str] = None
    msg: Optional[Message] = None
    code: Optional[str] = None

    @classmethod
    def from_options(
        cls,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> "Mold":
        """Merge a mold-like mapping with keyword overrides.

        Entries of a mapping other than ``key``/``msg``/``code`` are predicate
        parameters and are ignored here.
        """

        if mold is None:
            base = cls()
        elif isinstance(mold, Mold):
            base = mold
        elif isinstance(mold, Mapping):
            base = cls(key=mold.get("key"), msg=mold.get("msg"), code=mold.get("code"))
        else:
            raise InvalidArgumentError(
                f"mold must be a Mold or a mapping, got {type(mold).__name__}", argument="mold", value=mold
            )
        return base.override(key=key, msg=msg, code=code)

    def override(self, **fields: Any) -> "Mold":
        changes = {name: value for name, value in fields.items() if value is not None}
        return dataclasses.replace(self, **changes) if changes else self

    def with_defaults(self, **fields: Any) -> "Mold":
        changes = {
            name: value
            for name, value in fields.items()
            if value is not None and getattr(self, name) is None
        }
        return dataclasses.replace(self, **changes) if changes else self

    def message_for(self, value: Any, context: EvalContext) -> str:
        if callable(self.msg):
            return str(self.msg(value, context))
        return str(self.msg)

    def result_map(self, value: Any, context: EvalContext) -> ResultMap:
        """Build the failure ResultMap for *value*."""

        for name in ("key", "msg", "code"):
            if getattr(self, name) is None:
                raise InvalidArgumentError(f"mold {name} must be provided", argument=name)
        return ResultMap.from_entry(str(self.key), [Result(self.message_for(value, context), str(self.code))])


def _always_clean(value: Any, context: EvalContext) -> ResultMap:
    return ResultMap.CLEAN


def _never(value: Any, context: EvalContext) -> bool:
    return False


def _describe(values: Iterable[Any]) -> str:
    return "[" + ", ".join(str(value) for value in values) + "]"


def _type_name(type_: Union[type, Tuple[type, ...]]) -> str:
    if isinstance(type_, tuple):
        return " or ".join(item.__name__ for item in type_)
    return type_.__name__


def _field_names(allowed: Any) -> Tuple[str, Collection[str]]:
    if isinstance(allowed, type):
        if dataclasses.is_dataclass(allowed):
            return allowed.__name__, frozenset(field.name for field in dataclasses.fields(allowed))
        annotations = getattr(allowed, "__annotations__", None)
        if annotations:
            return allowed.__name__, frozenset(annotations)
        raise InvalidArgumentError(
            f"{allowed.__name__} does not declare any fields", argument="allowed", value=allowed
        )
    if isinstance(allowed, (str, bytes)) or not isinstance(allowed, Iterable):
        raise InvalidArgumentError(
            "allowed must be a dataclass, an annotated class or a collection of field names",
            argument="allowed",
            value=allowed,
        )
    names = tuple(allowed)
    return _describe(names), frozenset(names)


class WhenCheck(Check):
    """Evaluate ``body`` only when ``test`` is clean (or not clean, if negated).

    The result of ``test`` is never returned.
    """

    __slots__ = ("_test", "_body", "_negate")

    def __init__(self, test: Check, body: Check, *, negate: bool = False):
        self._test = ensure_check(test, "test")
        self._body = ensure_check(body, "body")
        self._negate = negate

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        if self._test.call(value, context).is_clean() != self._negate:
            return self._body.call(value, context)
        return ResultMap.CLEAN

    def __repr__(self) -> str:
        name = "unless" if self._negate else "when"
        return f"WhenCheck({name}, {self._test!r}, {self._body!r})"


class CondCheck(Check):
    """Evaluate the body of the first clause whose test is clean.

    ``select`` optionally maps the input before it is handed to the tests;
    bodies always receive the original input. No matching clause is clean.
    """

    __slots__ = ("_clauses", "_select")

    def __init__(
        self,
        clauses: Iterable[Tuple[Check, Check]],
        *,
        select: Optional[Callable[[Any], Any]] = None,
    ):
        if clauses is None:
            raise InvalidArgumentError("clauses must not be None", argument="clauses")
        if select is not None and not callable(select):
            raise InvalidArgumentError("select must be callable", argument="select", value=select)
        pairs = clauses.items() if isinstance(clauses, Mapping) else clauses
        self._clauses: Tuple[Tuple[Check, Check], ...] = tuple(
            (ensure_check(test, "test"), ensure_check(body, "body")) for test, body in pairs
        )
        self._select = select

    @property
    def clauses(self) -> Tuple[Tuple[Check, Check], ...]:
        return self._clauses

    def call(self, value: Any, context: EvalContext) -> ResultMap:
        tested = value if self._select is None else self._select(value)
        for test, body in self._clauses:
            if test.call(tested, context).is_clean():
                return body.call(value, context)
        return ResultMap.CLEAN


class Checkers:
    """Factory for the standard predicates.

    The class is stateless; subclass it to add project specific predicates
    built from the ones below, or register factories on a
    :class:`~valerie.registry.CheckerRegistry`.
    """

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def pass_(self) -> Check:
        """A check that is always clean."""
        return FunctionCheck(_always_clean)

    def fail(
        self,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        """A check that always reports its mold."""

        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            key="fail", msg="failed because you said so", code=Result.ILLEGAL_VALUE
        )
        return PredicateCheck(_never, resolved.result_map, mold=resolved, name="fail")

    def satisfies(
        self,
        test: TestFunction,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
        on_fail: Optional[CheckFunction] = None,
    ) -> Check:
        """Clean when ``test(value, context)`` is truthy.

        On failure, return ``on_fail(value, context)`` if given, otherwise a
        single Result built from the mold. A mold without ``key``, ``msg`` or
        ``code`` raises :class:`InvalidArgumentError` when a failure is built.
        """

        if test is None:
            raise InvalidArgumentError("test must not be None", argument="test")
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code)
        return PredicateCheck(test, on_fail or resolved.result_map, mold=resolved, name="satisfies")

    def _predicate(self, name: str, mold: Mold, test: TestFunction) -> Check:
        return PredicateCheck(test, mold.result_map, mold=mold, name=name)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_not_null(
        self,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg="required field cannot be null", code=Result.REQUIRED_FIELD
        )
        return self._predicate("is_not_null", resolved, lambda value, context: value is not None)

    def is_null(
        self,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg="field must be null", code=Result.ILLEGAL_VALUE
        )
        return self._predicate("is_null", resolved, lambda value, context: value is None)

    def is_instance_of(
        self,
        type_: Union[type, Tuple[type, ...]],
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        if not (
            isinstance(type_, type)
            or (isinstance(type_, tuple) and type_ and all(isinstance(item, type) for item in type_))
        ):
            raise InvalidArgumentError("type_ must be a type or a tuple of types", argument="type_", value=type_)
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=f"is not of type {_type_name(type_)}", code=Result.ILLEGAL_VALUE
        )
        return self._predicate(
            "is_instance_of", resolved, lambda value, context: isinstance(value, type_)
        )

    def is_one_of(
        self,
        allowed: Union[Collection[Any], "type[enum.Enum]"],
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        """Membership in *allowed*; an Enum class accepts members and member names."""

        if allowed is None:
            raise InvalidArgumentError("allowed must not be None", argument="allowed")
        if isinstance(allowed, type) and issubclass(allowed, enum.Enum):
            names = tuple(member.name for member in allowed)
            described = _describe(names)
            values: Tuple[Any, ...] = tuple(allowed) + names
        elif isinstance(allowed, (str, bytes)) or not isinstance(allowed, Iterable):
            raise InvalidArgumentError("allowed must be a collection", argument="allowed", value=allowed)
        else:
            values = tuple(allowed)
            described = _describe(values)

        try:
            lookup: Collection[Any] = frozenset(values)
        except TypeError:
            lookup = values

        def test(value: Any, context: EvalContext) -> bool:
            try:
                return value in lookup
            except TypeError:
                return value in values

        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=f"is not one of allowed values: {described}", code=Result.ILLEGAL_VALUE
        )
        return self._predicate("is_one_of", resolved, test)

    def matches_re(
        self,
        pattern: Union[str, "re.Pattern[str]"],
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        """The string form of the value must match *pattern* in full."""

        if pattern is None:
            raise InvalidArgumentError("pattern must not be None", argument="pattern")
        try:
            regex = re.compile(pattern)
        except (re.error, TypeError) as exc:
            raise InvalidArgumentError(
                f"Invalid regex pattern {pattern!r}: {exc}", argument="pattern", value=pattern
            ) from exc
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg="does not match required pattern", code=Result.ILLEGAL_VALUE
        )
        return self._predicate(
            "matches_re",
            resolved,
            lambda value, context: value is None or regex.fullmatch(str(value)) is not None,
        )

    def has_value_lte(
        self,
        maximum: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        if maximum is None:
            raise InvalidArgumentError("maximum must not be None", argument="maximum")
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=f"should not be greater than {maximum}", code=Result.ILLEGAL_VALUE
        )
        return self._predicate("has_value_lte", resolved, _compare(lambda value: value <= maximum))

    def has_value_gte(
        self,
        minimum: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        if minimum is None:
            raise InvalidArgumentError("minimum must not be None", argument="minimum")
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=f"should not be less than {minimum}", code=Result.ILLEGAL_VALUE
        )
        return self._predicate("has_value_gte", resolved, _compare(lambda value: value >= minimum))

    def has_size_lte(
        self,
        maximum: int,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        _require_size(maximum, "maximum")
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=f"should be no longer than {maximum}", code=Result.TOO_LONG
        )
        return self._predicate("has_size_lte", resolved, _compare(lambda value: len(value) <= maximum))

    def has_size_gte(
        self,
        minimum: int,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        _require_size(minimum, "minimum")
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=f"should be no shorter than {minimum}", code=Result.TOO_SHORT
        )
        return self._predicate("has_size_gte", resolved, _compare(lambda value: len(value) >= minimum))

    def has_member(
        self,
        field: str,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        """A mapping value must contain *field* (its value may be ``None``)."""

        if field is None:
            raise InvalidArgumentError("field must not be None", argument="field")
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=f"is missing required member {field}", code=Result.REQUIRED_FIELD
        )
        return self._predicate(
            "has_member",
            resolved,
            lambda value, context: value is None or (isinstance(value, Mapping) and field in value),
        )

    def has_only_fields_in(
        self,
        allowed: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        """A mapping value may only use field names declared by *allowed*.

        *allowed* is a dataclass, a class with annotations (``TypedDict``
        included) or a collection of names.
        """

        label, names = _field_names(allowed)

        def describe(value: Any, context: EvalContext) -> str:
            if isinstance(value, Mapping):
                extra = [field for field in value if field not in names]
                return f"contains fields not in {label}: {_describe(extra)}"
            return f"is not a mapping of fields in {label}"

        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            msg=describe, code=Result.ILLEGAL_FIELD
        )
        return self._predicate(
            "has_only_fields_in",
            resolved,
            lambda value, context: value is None
            or (isinstance(value, Mapping) and all(field in names for field in value)),
        )

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def all_(self, *checks: Check) -> Check:
        """Evaluate every check and merge the results."""
        return AllCheck(_as_members(checks))

    def and_(self, *checks: Check) -> Check:
        """Return the first non-clean result, otherwise clean."""
        return AndCheck(_as_members(checks))

    def or_(self, *checks: Check) -> Check:
        """Return the first clean result, otherwise the last result."""
        return OrCheck(_as_members(checks))

    # ------------------------------------------------------------------
    # Other higher order helpers
    # ------------------------------------------------------------------

    def when(self, test: Check, body: Check) -> Check:
        return WhenCheck(test, body)

    def unless(self, test: Check, body: Check) -> Check:
        return WhenCheck(test, body, negate=True)

    def cond(
        self,
        clauses: Union[Mapping[Check, Check], Iterable[Tuple[Check, Check]]],
        *,
        select: Optional[Callable[[Any], Any]] = None,
    ) -> Check:
        return CondCheck(clauses, select=select)

    def not_(
        self,
        check: Check,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        """Report the mold when *check* is clean, pass when it is not."""

        inner = ensure_check(check, "check")
        resolved = Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(
            key="not", msg="condition satisfied which should not have been", code="NEGATED_CHECK"
        )
        return self._predicate(
            "not", resolved, lambda value, context: not inner.call(value, context).is_clean()
        )


def _compare(comparison: Callable[[Any], bool]) -> TestFunction:
    # values that cannot be compared or sized fail the predicate
    def test(value: Any, context: EvalContext) -> bool:
        if value is None:
            return True
        try:
            return bool(comparison(value))
        except TypeError:
            return False

    return test


def _require_size(size: Any, argument: str) -> None:
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise InvalidArgumentError(f"{argument} must be a non-negative integer", argument=argument, value=size)


def _as_members(checks: Sequence[Check]) -> Tuple[Check, ...]:
    if len(checks) == 1 and not isinstance(checks[0], Check) and isinstance(checks[0], Iterable):
        checks = tuple(checks[0])
    return tuple(checks)


__all__ = ["Checkers", "CondCheck", "Message", "Mold", "MoldLike", "WhenCheck"]
