# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Per-evaluation context.

An :class:`EvalContext` is created for exactly one top-level evaluation and
passed by reference through every ``Check.call`` of that evaluation. Its only
state is the *stash*: values recorded by one part of the tree that other
parts may read later (cross-field rules).

The context is not synchronised. Concurrent evaluations of the
same Check tree are safe as long as each one uses its own context.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .exceptions import require_not_none


class EvalContext:
    """Mutable side-channel threaded through a single evaluation."""

    __slots__ = ("_stashed",)

    def __init__(self) -> None:
        self._stashed: Dict[str, Any] = {}

    @property
    def stashed(self) -> Mapping[str, Any]:
        """Read-only view of the stash."""
        return MappingProxyType(self._stashed)

    def get_stashed(self, key: str, default: Optional[Any] = None) -> Any:
        return self._stashed.get(key, default)

    def has_stashed(self, key: str) -> bool:
        return key in self._stashed

    def set_stashed(self, key: str, value: Any) -> None:
        require_not_none(key, "key")
        require_not_none(value, "value")
        self._stashed[key] = value

    def clear_stashed(self, key: str) -> None:
        self._stashed.pop(key, None)

    def __repr__(self) -> str:
        return f"EvalContext(stashed={sorted(self._stashed)})"


__all__ = ["EvalContext"]
