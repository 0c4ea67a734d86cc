"""Load the broker's YAML configuration.

String values may reference environment variables as ``${NAME}``; they are
substituted before validation, and any reference left unresolved is an error.
"""

import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from pollqueue.core.config.models import Config

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """Replace ``${NAME}`` with ``os.environ["NAME"]``; unknown names are kept as-is."""
    return _VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)


def _expand(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {key: _expand(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand(item) for item in obj]
    if isinstance(obj, str):
        return expand_env_vars(obj)
    return obj


def _unresolved(obj: Any) -> Iterator[str]:
    if isinstance(obj, dict):
        for value in obj.values():
            yield from _unresolved(value)
    elif isinstance(obj, list):
        for item in obj:
            yield from _unresolved(item)
    elif isinstance(obj, str):
        yield from (m.group(1) for m in _VAR_PATTERN.finditer(obj))


def check_unexpanded_vars(data: Any, source: str) -> None:
    """Fail if any ``${NAME}`` survived expansion.

    Raises:
        ValueError: Naming every unresolved variable and the ``source`` label.
    """
    missing = sorted(set(_unresolved(data)))
    if missing:
        names = ", ".join(missing)
        raise ValueError(f"Environment variable(s) not set for {source}: {names}")


def load_config(path: Path | str) -> Config:
    """Read, expand and validate a configuration file.

    Args:
        path: YAML file to load. An empty file yields the defaults.

    Returns:
        The validated Config.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If a ``${NAME}`` reference cannot be resolved or a value
            fails validation.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    data = _expand(raw)
    check_unexpanded_vars(data, source=str(config_path))
    return Config.model_validate(data)
