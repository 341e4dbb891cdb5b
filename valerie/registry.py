# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Named checker factories.

A registry maps a rule name to a factory ``(config) -> Check``. Definitions
resolve rules through it (``d.rule("is_required_string")``) and declarative
rule files name rules the same way.
"""

from __future__ import annotations

import difflib
import logging
import numbers
from collections.abc import Mapping as MappingABC, Sequence as SequenceABC
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .check import Check
from .checkers import Checkers
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CheckerFactory = Callable[[Mapping[str, Any]], Check]

TYPE_NAMES: Dict[str, Union[type, Tuple[type, ...]]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "list": list,
    "dict": dict,
    "set": set,
    "tuple": tuple,
    "number": numbers.Number,
    "mapping": MappingABC,
    "sequence": SequenceABC,
}


def resolve_type(declared: Any) -> Union[type, Tuple[type, ...]]:
    """Resolve a type, a type name or a list of either."""

    if isinstance(declared, type):
        return declared
    if isinstance(declared, str):
        try:
            return TYPE_NAMES[declared]
        except KeyError:
            raise ConfigurationError(_unknown("type", declared, TYPE_NAMES)) from None
    if isinstance(declared, (list, tuple)) and declared:
        resolved: List[type] = []
        for item in declared:
            found = resolve_type(item)
            resolved.extend(found if isinstance(found, tuple) else (found,))
        return tuple(resolved)
    raise ConfigurationError(f"Cannot resolve a type from {declared!r}")


def _unknown(kind: str, name: str, known: Any) -> str:
    message = f"Unknown {kind} '{name}'"
    suggestions = difflib.get_close_matches(name, list(known), n=3)
    if suggestions:
        message += f"; did you mean: {', '.join(suggestions)}?"
    return message


def _param(config: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in config:
            return config[name]
    raise ConfigurationError(f"Missing required parameter '{names[0]}' in {dict(config)!r}")


class CheckerRegistry:
    """Mapping of rule names to checker factories."""

    def __init__(self, factories: Optional[Mapping[str, CheckerFactory]] = None):
        self._factories: Dict[str, CheckerFactory] = {}
        for name, factory in (factories or {}).items():
            self.register(name, factory)

    def register(
        self,
        name: str,
        factory: Optional[CheckerFactory] = None,
        *,
        replace: bool = False,
    ) -> Any:
        """Register *factory* under *name*.

        Without *factory* this returns a decorator::

            @registry.register("is_required_string")
            def required_string(config):
                ...
        """

        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Checker name must be a non-empty string, got {name!r}")
        if factory is None:

            def decorator(func: CheckerFactory) -> CheckerFactory:
                self.register(name, func, replace=replace)
                return func

            return decorator
        if not callable(factory):
            raise ConfigurationError(f"Factory for checker '{name}' must be callable")
        if name in self._factories and not replace:
            raise ConfigurationError(f"Checker '{name}' is already registered")
        self._factories[name] = factory
        logger.debug("Registered checker %s", name)
        return factory

    def get(self, name: str) -> CheckerFactory:
        try:
            return self._factories[name]
        except KeyError:
            raise ConfigurationError(_unknown("checker", name, self._factories)) from None

    def build(self, name: str, config: Optional[Mapping[str, Any]] = None) -> Check:
        """Instantiate the checker registered as *name* with *config*."""

        if config is not None and not isinstance(config, Mapping):
            raise ConfigurationError(f"Configuration for checker '{name}' must be a mapping, got {config!r}")
        check = self.get(name)(dict(config or {}))
        if not isinstance(check, Check):
            raise ConfigurationError(
                f"Factory for checker '{name}' returned {type(check).__name__}, expected a Check"
            )
        return check

    def names(self) -> List[str]:
        return sorted(self._factories)

    def copy(self) -> "CheckerRegistry":
        return CheckerRegistry(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        return f"CheckerRegistry({self.names()!r})"


def default_registry(checkers: Optional[Checkers] = None) -> CheckerRegistry:
    """Registry holding every catalog predicate under its snake_case name.

    Predicate parameters are read from the config next to ``key``/``msg``/
    ``code``; ``is_instance_of`` accepts type names (see :data:`TYPE_NAMES`).
    """

    c = checkers or Checkers()
    registry = CheckerRegistry()
    registry.register("pass", lambda config: c.pass_())
    registry.register("fail", lambda config: c.fail(config))
    registry.register("is_not_null", lambda config: c.is_not_null(config))
    registry.register("is_null", lambda config: c.is_null(config))
    registry.register(
        "is_instance_of", lambda config: c.is_instance_of(resolve_type(_param(config, "type", "type_")), config)
    )
    registry.register("is_one_of", lambda config: c.is_one_of(_param(config, "allowed", "values"), config))
    registry.register("matches_re", lambda config: c.matches_re(_param(config, "pattern"), config))
    registry.register("has_value_lte", lambda config: c.has_value_lte(_param(config, "max", "maximum"), config))
    registry.register("has_value_gte", lambda config: c.has_value_gte(_param(config, "min", "minimum"), config))
    registry.register("has_size_lte", lambda config: c.has_size_lte(_param(config, "max", "maximum"), config))
    registry.register("has_size_gte", lambda config: c.has_size_gte(_param(config, "min", "minimum"), config))
    registry.register("has_member", lambda config: c.has_member(_param(config, "field"), config))
    registry.register("has_only_fields_in", lambda config: c.has_only_fields_in(_param(config, "allowed", "fields"), config))
    return registry


__all__ = ["CheckerFactory", "CheckerRegistry", "TYPE_NAMES", "default_registry", "resolve_type"]
