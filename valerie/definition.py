# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Builder that turns definition functions into Check trees.

A *definition function* receives a :class:`Definition` and describes the
checks for one scope of the input graph::

    def person(d):
        d.require(d.is_not_null())
        d.define(d.is_instance_of(dict))
        d.define_children({
            "name": lambda n: n.define(n.is_not_null() & n.matches_re(r"[A-Z].*")),
            "age": lambda a: a.define(a.has_value_gte(0)),
        })

    check = Idator().using(person)

Checks are only added through :meth:`Definition.define` (and the helpers
that call it); whatever the definition function returns is ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from .check import Check, TestFunction, CheckFunction, ensure_check
from .checkers import Checkers, Message, MoldLike, Mold
from .composed import AllCheck, AndCheck
from .exceptions import InvalidArgumentError
from .registry import CheckerFactory, CheckerRegistry, default_registry
from .transform import ChildTraverser, EachValueTraverser, NopTransformer

logger = logging.getLogger(__name__)

DefinitionFunction = Callable[["Definition"], Any]


class Definition:
    """One scope of a definition.

    ``result_key`` is the default key used by the catalog shortcuts and may
    be reassigned inside the definition function; shortcuts read it when
    they are called.
    """

    def __init__(
        self,
        checkers: Optional[Checkers] = None,
        registry: Optional[CheckerRegistry] = None,
        result_key: str = "root",
    ):
        self._checkers = checkers or Checkers()
        self._registry = registry if registry is not None else default_registry(self._checkers)
        self.result_key = result_key
        self._defined: List[Check] = []
        self._required: List[Check] = []
        self._stash_as: Optional[str] = None

    @property
    def checkers(self) -> Checkers:
        return self._checkers

    @property
    def registry(self) -> CheckerRegistry:
        return self._registry

    @property
    def result_key(self) -> str:
        return self._result_key

    @result_key.setter
    def result_key(self, value: str) -> None:
        if not isinstance(value, str):
            raise InvalidArgumentError("result_key must be a string", argument="result_key", value=value)
        self._result_key = value

    # ------------------------------------------------------------------
    # Scope structure
    # ------------------------------------------------------------------

    def define(self, check: Check) -> None:
        """Add *check* to the checks evaluated (and merged) for this scope."""
        self._defined.append(ensure_check(check, "check"))

    def define_children(self, entries: Mapping[str, DefinitionFunction]) -> None:
        """Define each named child with its own definition, keyed by child name."""
        for child, definition in _entries(entries):
            self.define(self.with_value(definition, child=child))

    def sub_define(self, entries: Mapping[str, DefinitionFunction]) -> None:
        """Like :meth:`define_children` with keys qualified as ``<result_key>.<child>``."""
        for child, definition in _entries(entries):
            self.define(self.with_sub_value(child, definition))

    def require(self, check: Check) -> None:
        """Precondition evaluated, in order, before any defined check."""
        self._required.append(ensure_check(check, "check"))

    def stash_value_as(self, name: str) -> None:
        """Stash this scope's input under *name* for other checks of the evaluation."""
        if not isinstance(name, str):
            raise InvalidArgumentError("stash name must be a string", argument="name", value=name)
        self._stash_as = name

    def build(self) -> Check:
        return NopTransformer(
            AndCheck(self._required + [AllCheck(self._defined)]),
            stash_as=self._stash_as,
        )

    def _scope(self, definition: DefinitionFunction, result_key: str) -> Check:
        if not callable(definition):
            raise InvalidArgumentError("definition must be callable", argument="definition", value=definition)
        scope = Definition(self._checkers, self._registry, result_key)
        definition(scope)
        return scope.build()

    # ------------------------------------------------------------------
    # Nested definitions
    # ------------------------------------------------------------------

    def with_value(
        self,
        definition: DefinitionFunction,
        child: Optional[str] = None,
        result_key: Optional[str] = None,
    ) -> Check:
        """Check built from a nested definition.

        Without *child* the nested scope sees the same input and key. With
        *child* it sees that child, keyed by the child name unless
        *result_key* says otherwise.
        """

        if child is None:
            return self._scope(definition, result_key or self.result_key)
        return ChildTraverser(child, self._scope(definition, result_key or child))

    def with_sub_value(self, child: str, definition: DefinitionFunction) -> Check:
        return self.with_value(definition, child=child, result_key=f"{self.result_key}.{child}")

    def with_each_value(self, definition: DefinitionFunction) -> Check:
        """Evaluate the nested definition for every item (mapping entries for mappings)."""
        return EachValueTraverser(self._scope(definition, self.result_key))

    def cond(
        self,
        clauses: Union[Mapping[Check, DefinitionFunction], Iterable[Tuple[Check, DefinitionFunction]]],
        select: Optional[Callable[[Any], Any]] = None,
    ) -> Check:
        """Evaluate the definition of the first clause whose check is clean."""

        if clauses is None:
            raise InvalidArgumentError("clauses must not be None", argument="clauses")
        pairs = clauses.items() if isinstance(clauses, Mapping) else clauses
        return self._checkers.cond(
            [(test, self._scope(definition, self.result_key)) for test, definition in pairs],
            select=select,
        )

    def when(self, check: Check, definition: DefinitionFunction) -> Check:
        return self._checkers.when(check, self._scope(definition, self.result_key))

    def unless(self, check: Check, definition: DefinitionFunction) -> Check:
        return self._checkers.unless(check, self._scope(definition, self.result_key))

    def otherwise(self) -> Check:
        """Always clean; reads well as the last clause of :meth:`cond`."""
        return self._checkers.pass_()

    # ------------------------------------------------------------------
    # Catalog shortcuts keyed by result_key
    # ------------------------------------------------------------------

    def _mold(self, mold: MoldLike, key: Optional[str], msg: Optional[Message], code: Optional[str]) -> Mold:
        return Mold.from_options(mold, key=key, msg=msg, code=code).with_defaults(key=self.result_key)

    def rule(self, name: str, *configs: Mapping[str, Any], **options: Any) -> Check:
        """Build the registered checker *name*; the key defaults to ``result_key``."""

        config: dict = {}
        for item in configs:
            config.update(item)
        config.update(options)
        config.setdefault("key", self.result_key)
        return self._registry.build(name, config)

    def pass_(self) -> Check:
        return self._checkers.pass_()

    def fail(
        self,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.fail(mold, key=key, msg=msg, code=code)

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
        return self._checkers.satisfies(test, self._mold(mold, key, msg, code), on_fail=on_fail)

    def is_not_null(
        self,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.is_not_null(self._mold(mold, key, msg, code))

    def is_null(
        self,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.is_null(self._mold(mold, key, msg, code))

    def is_instance_of(
        self,
        type_: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.is_instance_of(type_, self._mold(mold, key, msg, code))

    def is_one_of(
        self,
        allowed: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.is_one_of(allowed, self._mold(mold, key, msg, code))

    def matches_re(
        self,
        pattern: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.matches_re(pattern, self._mold(mold, key, msg, code))

    def has_value_lte(
        self,
        maximum: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.has_value_lte(maximum, self._mold(mold, key, msg, code))

    def has_value_gte(
        self,
        minimum: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.has_value_gte(minimum, self._mold(mold, key, msg, code))

    def has_size_lte(
        self,
        maximum: int,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.has_size_lte(maximum, self._mold(mold, key, msg, code))

    def has_size_gte(
        self,
        minimum: int,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.has_size_gte(minimum, self._mold(mold, key, msg, code))

    def has_member(
        self,
        field: str,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.has_member(field, self._mold(mold, key, msg, code))

    def has_only_fields_in(
        self,
        allowed: Any,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.has_only_fields_in(allowed, self._mold(mold, key, msg, code))

    def not_(
        self,
        check: Check,
        mold: MoldLike = None,
        *,
        key: Optional[str] = None,
        msg: Optional[Message] = None,
        code: Optional[str] = None,
    ) -> Check:
        return self._checkers.not_(check, mold, key=key, msg=msg, code=code)

    def all_(self, *checks: Check) -> Check:
        return self._checkers.all_(*checks)

    def and_(self, *checks: Check) -> Check:
        return self._checkers.and_(*checks)

    def or_(self, *checks: Check) -> Check:
        return self._checkers.or_(*checks)


def _entries(entries: Mapping[str, DefinitionFunction]):
    if not isinstance(entries, Mapping):
        raise InvalidArgumentError("entries must be a mapping of child name to definition", argument="entries")
    return entries.items()


class Idator:
    """Entry point: turns a root definition function into a Check.

    Each instance owns its registry, so checkers registered on one Idator are
    not visible to another.
    """

    def __init__(
        self,
        checkers: Optional[Checkers] = None,
        result_key: str = "root",
        registry: Optional[CheckerRegistry] = None,
    ):
        self.checkers = checkers or Checkers()
        self.result_key = result_key
        self.registry = registry.copy() if registry is not None else default_registry(self.checkers)

    def using(self, definition: DefinitionFunction) -> Check:
        """Build the Check described by *definition* at the root of the input."""

        if not callable(definition):
            raise InvalidArgumentError("definition must be callable", argument="definition", value=definition)
        scope = Definition(self.checkers, self.registry, self.result_key)
        definition(scope)
        check = scope.build()
        logger.debug("Built check from definition %s", getattr(definition, "__qualname__", definition))
        return check

    def register_checker(self, name: str, factory: CheckerFactory, *, replace: bool = False) -> None:
        """Make *factory* available to definitions as ``d.rule(name)``."""
        self.registry.register(name, factory, replace=replace)


__all__ = ["Definition", "DefinitionFunction", "Idator"]
