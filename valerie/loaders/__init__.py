"""Declarative definition loaders."""

from .base import DefinitionLoader, MappingDefinitionLoader, build_definition
from .file import RULES_FILE_ENV, FileDefinitionLoader

__all__ = [
    "DefinitionLoader",
    "FileDefinitionLoader",
    "MappingDefinitionLoader",
    "RULES_FILE_ENV",
    "build_definition",
]
