"""Config file discovery and ``.env`` loading.

Walk-up finder locates soildeploy.toml, similar to how git finds .git/.
Supports SOILDEPLOY_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values

from soildeploy.config.models import StackEnvironment

CONFIG_FILENAME = "soildeploy.toml"
CONFIG_ENV_VAR = "SOILDEPLOY_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for soildeploy.toml.

    Returns the path to the config file, or None if not found.
    Checks SOILDEPLOY_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_environment(path: Path) -> StackEnvironment:
    """Parse a ``.env`` file into a :class:`StackEnvironment`.

    Values are read, never exported into ``os.environ``. Raises
    ``FileNotFoundError`` if *path* does not exist.
    """
    if not path.is_file():
        raise FileNotFoundError(path)
    return StackEnvironment.from_mapping(dotenv_values(path))
