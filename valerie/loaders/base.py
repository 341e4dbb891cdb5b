# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Build check trees from plain data.

A definition document mirrors what a definition function does::

    key: root
    stash: top
    require:
      - is_not_null
    rules:
      - is_instance_of: {type: dict}
    children:
      name:
        rules:
          - matches_re: {pattern: "[A-Z].*"}
    sub_children:
      address: {rules: [is_not_null]}
    each:
      rules: [is_not_null]

Rule entries are either a rule name or a single-entry mapping of rule name to
configuration. Rule names resolve through a :class:`CheckerRegistry`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..check import Check
from ..definition import Definition, DefinitionFunction
from ..exceptions import ConfigurationError, InvalidArgumentError
from ..registry import CheckerRegistry, default_registry
from ..telemetry.metrics import definition_load_total

logger = logging.getLogger(__name__)

SECTIONS = ("key", "stash", "require", "rules", "children", "sub_children", "each")


def _rule_entries(entries: Any, path: str) -> List[Tuple[str, Dict[str, Any]]]:
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ConfigurationError(f"{path}: expected a list of rules, got {type(entries).__name__}")

    parsed: List[Tuple[str, Dict[str, Any]]] = []
    for index, entry in enumerate(entries):
        where = f"{path}[{index}]"
        if isinstance(entry, str):
            parsed.append((entry, {}))
            continue
        if not isinstance(entry, Mapping) or len(entry) != 1:
            raise ConfigurationError(f"{where}: a rule must be a name or a single-entry mapping, got {entry!r}")
        ((name, config),) = entry.items()
        if config is None:
            config = {}
        if not isinstance(name, str) or not isinstance(config, Mapping):
            raise ConfigurationError(f"{where}: rule '{name}' must map to a configuration mapping")
        parsed.append((name, dict(config)))
    return parsed


def _scopes(entries: Any, path: str) -> Dict[str, DefinitionFunction]:
    if not isinstance(entries, Mapping):
        raise ConfigurationError(f"{path}: expected a mapping of child name to definition")
    return {
        str(name): _definition_function(section or {}, f"{path}.{name}")
        for name, section in entries.items()
    }


def _definition_function(data: Any, path: str) -> DefinitionFunction:
    """Validate one scope document and return the equivalent definition function."""

    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{path}: expected a mapping, got {type(data).__name__}")
    unknown = sorted(str(name) for name in data if name not in SECTIONS)
    if unknown:
        raise ConfigurationError(
            f"{path}: unknown section(s) {', '.join(unknown)}; expected one of {', '.join(SECTIONS)}"
        )
    for name in ("key", "stash"):
        if name in data and not isinstance(data[name], str):
            raise ConfigurationError(f"{path}.{name}: expected a string")

    required = _rule_entries(data.get("require"), f"{path}.require")
    rules = _rule_entries(data.get("rules"), f"{path}.rules")
    children = _scopes(data["children"], f"{path}.children") if "children" in data else {}
    sub_children = _scopes(data["sub_children"], f"{path}.sub_children") if "sub_children" in data else {}
    each = _definition_function(data["each"] or {}, f"{path}.each") if "each" in data else None

    def definition(d: Definition) -> None:
        if "key" in data:
            d.result_key = data["key"]
        if "stash" in data:
            d.stash_value_as(data["stash"])
        for name, config in required:
            d.require(_build_rule(d, name, config, f"{path}.require"))
        for name, config in rules:
            d.define(_build_rule(d, name, config, f"{path}.rules"))
        if children:
            d.define_children(children)
        if sub_children:
            d.sub_define(sub_children)
        if each is not None:
            d.define(d.with_each_value(each))

    return definition


def _build_rule(d: Definition, name: str, config: Mapping[str, Any], path: str) -> Check:
    try:
        return d.rule(name, config)
    except (ConfigurationError, InvalidArgumentError) as exc:
        raise ConfigurationError(f"{path}: {exc.message}") from exc


def build_definition(
    data: Mapping[str, Any],
    registry: Optional[CheckerRegistry] = None,
    *,
    result_key: str = "root",
) -> Check:
    """Build the Check described by a definition document."""

    registry = registry if registry is not None else default_registry()
    definition = _definition_function(data, "definition")
    scope = Definition(registry=registry, result_key=result_key)
    definition(scope)
    return scope.build()


class DefinitionLoader(ABC):
    """Source of a definition document."""

    @property
    @abstractmethod
    def source(self) -> str:
        """Human readable description of where the document comes from."""

    @abstractmethod
    def load_data(self) -> Mapping[str, Any]:
        """Return the raw definition document."""

    def load(self, registry: Optional[CheckerRegistry] = None) -> Check:
        """Load the document and build its Check tree."""

        try:
            check = build_definition(self.load_data(), registry)
        except ConfigurationError:
            definition_load_total.add(1, {"status": "error"})
            logger.error("Failed to load definition from %s", self.source)
            raise
        definition_load_total.add(1, {"status": "success"})
        logger.info("Loaded definition from %s", self.source)
        return check


class MappingDefinitionLoader(DefinitionLoader):
    """Loader for a document that is already in memory."""

    def __init__(self, data: Mapping[str, Any], source: str = "<mapping>"):
        self._data = data
        self._source = source

    @property
    def source(self) -> str:
        return self._source

    def load_data(self) -> Mapping[str, Any]:
        return self._data


__all__ = ["DefinitionLoader", "MappingDefinitionLoader", "SECTIONS", "build_definition"]
