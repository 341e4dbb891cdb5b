# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Load definition documents from YAML or JSON files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from .base import DefinitionLoader

logger = logging.getLogger(__name__)

RULES_FILE_ENV = "VALERIE_RULES_FILE"


class FileDefinitionLoader(DefinitionLoader):
    """Reads a definition document from a local file.

    Without an explicit *path* the file named by ``VALERIE_RULES_FILE`` is
    used. Files ending in ``.json`` are parsed as JSON, anything else as YAML.
    """

    def __init__(self, path: Optional[Union[str, os.PathLike]] = None):
        if path is None:
            path = os.environ.get(RULES_FILE_ENV)
            if not path:
                raise ConfigurationError(f"No rules file given and {RULES_FILE_ENV} is not set")
            logger.debug("Using rules file from %s: %s", RULES_FILE_ENV, path)
        self.path = Path(path).expanduser()

    @property
    def source(self) -> str:
        return str(self.path)

    def load_data(self) -> Mapping[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read rules file {self.path}: {exc}") from exc

        try:
            if self.path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (ValueError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Cannot parse rules file {self.path}: {exc}") from exc

        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Rules file {self.path} must contain a mapping, got {type(data).__name__}"
            )
        logger.debug("Read rules file %s with sections %s", self.path, sorted(data))
        return data


__all__ = ["FileDefinitionLoader", "RULES_FILE_ENV"]
