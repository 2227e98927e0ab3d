"""Feature flags.

Two sources, later wins:
  - flags.yaml: mapping of flag name -> bool.
  - Environment: ``FEATURE_<NAME>=true|false``.

A flag that appears in neither source is disabled.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml

logger = logging.getLogger(__name__)

_ENV_PREFIX = "FEATURE_"


def load_flag_file(path: str | Path) -> dict[str, bool]:
    """Load flags.yaml.

    - File missing       -> empty dict (not an error).
    - Root not a mapping -> empty dict + warning.
    - Non-bool value     -> skip + warning.
    """
    path = Path(path)
    if not path.exists():
        return {}

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"flags.yaml root is not a mapping, ignoring file: {path}")
        return {}

    flags: dict[str, bool] = {}
    for name, value in data.items():
        if not isinstance(value, bool):
            logger.warning(f"flags.yaml entry {name!r} is not a bool, skipping: {value!r}")
            continue
        flags[str(name).upper()] = value
    return flags


class FeatureFlags:
    """Synchronous flag lookups for preconditions."""

    def __init__(
        self,
        flags: Mapping[str, bool] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._flags = {name.upper(): value for name, value in (flags or {}).items()}
        self._environ = environ if environ is not None else os.environ

    @classmethod
    def from_file(
        cls, path: str | Path, environ: Mapping[str, str] | None = None
    ) -> "FeatureFlags":
        return cls(load_flag_file(path), environ=environ)

    def is_enabled(self, name: str) -> bool:
        key = name.upper()
        override = self._environ.get(_ENV_PREFIX + key)
        if override is not None and override != "":
            return override.lower() == "true"
        return self._flags.get(key, False)

    def set(self, name: str, enabled: bool) -> None:
        """Runtime override (admin toggles, tests)."""
        self._flags[name.upper()] = enabled
