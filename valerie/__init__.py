"""Valerie: composable validation of arbitrary input graphs.

Checks evaluate a value and report structured feedback as a
:class:`ResultMap` instead of a boolean::

    from valerie import Idator

    check = Idator().using(lambda d: d.define(d.is_not_null() & d.is_instance_of(str)))
    check(None)   # ResultMap({'root': [REQUIRED_FIELD: required field cannot be null]})
"""

from .check import Check, FunctionCheck, PredicateCheck
from .checkers import Checkers, CondCheck, Mold, WhenCheck
from .composed import AllCheck, AndCheck, ComposedCheck, OrCheck
from .context import EvalContext
from .definition import Definition, Idator
from .exceptions import (
    ConfigurationError,
    EvaluationTimeoutError,
    InvalidArgumentError,
    ValerieError,
)
from .loaders import FileDefinitionLoader, MappingDefinitionLoader, build_definition
from .registry import CheckerRegistry, default_registry
from .results import Result, ResultMap
from .runtime import evaluate, evaluate_async, format_result_map
from .transform import ChildTraverser, EachValueTraverser, Entry, NopTransformer, TransformerCheck

__version__ = "0.1.0"

__all__ = [
    "AllCheck",
    "AndCheck",
    "Check",
    "CheckerRegistry",
    "Checkers",
    "ChildTraverser",
    "ComposedCheck",
    "CondCheck",
    "ConfigurationError",
    "Definition",
    "EachValueTraverser",
    "Entry",
    "EvalContext",
    "EvaluationTimeoutError",
    "FileDefinitionLoader",
    "FunctionCheck",
    "Idator",
    "InvalidArgumentError",
    "MappingDefinitionLoader",
    "Mold",
    "NopTransformer",
    "OrCheck",
    "PredicateCheck",
    "Result",
    "ResultMap",
    "TransformerCheck",
    "ValerieError",
    "WhenCheck",
    "build_definition",
    "default_registry",
    "evaluate",
    "evaluate_async",
    "format_result_map",
]
