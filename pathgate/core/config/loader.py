"""Configuration loading and merging utilities.

This module handles YAML config file loading, environment variable expansion,
and deep merging of command-line overrides.
"""

import copy
import os
import re
from pathlib import Path
from typing import Any, Iterator

import yaml

from pathgate.core.config.models import Config

_ENV_VAR = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """Replace each ``${NAME}`` in ``value`` with ``os.environ[NAME]``.

    Unknown names are left as written so ``check_unexpanded_vars`` can
    report them.

    Examples:
        >>> os.environ['DATA_ROOT'] = '/srv/data'
        >>> expand_env_vars('${DATA_ROOT}/reports')
        '/srv/data/reports'
    """
    return _ENV_VAR.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)


def _iter_strings(obj: Any) -> Iterator[str]:
    if isinstance(obj, str):
        yield obj
    elif isinstance(obj, dict):
        for value in obj.values():
            yield from _iter_strings(value)
    elif isinstance(obj, list):
        for item in obj:
            yield from _iter_strings(item)


def expand_env_vars_recursive(obj: Any) -> Any:
    """Apply ``expand_env_vars`` to every string in a parsed YAML document."""
    if isinstance(obj, str):
        return expand_env_vars(obj)
    if isinstance(obj, dict):
        return {key: expand_env_vars_recursive(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [expand_env_vars_recursive(item) for item in obj]
    return obj


def merge_configs(base_config: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``overrides`` on ``base_config`` without mutating either.

    Sections present on both sides as mappings are merged key by key; every
    other override value wins outright.

    Examples:
        >>> merge_configs({'policy': {'base_directory': '/srv', 'mode': 'strict'}},
        ...               {'policy': {'mode': 'default'}})
        {'policy': {'base_directory': '/srv', 'mode': 'default'}}
    """
    merged = copy.deepcopy(base_config)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def check_unexpanded_vars(data: Any, source: str) -> None:
    """Fail if any ``${NAME}`` survived expansion.

    Raises:
        ValueError: Naming ``source`` and every unset variable, sorted.
    """
    unresolved = sorted({m.group(0) for text in _iter_strings(data) for m in _ENV_VAR.finditer(text)})
    if unresolved:
        raise ValueError(
            f"Unresolved environment variable(s) in {source}: {', '.join(unresolved)}. "
            f"Export them or drop the ${{VAR}} references."
        )


def load_config(path: Path | str | None = None, overrides: dict[str, Any] | None = None) -> Config:
    """Load configuration from a YAML file with environment variable expansion.

    Args:
        path: Path to the YAML configuration file. When None, the
            configuration is built from ``overrides`` alone.
        overrides: Values merged over the file contents (e.g. CLI flags).

    Returns:
        Parsed Config object with all ${VAR} patterns expanded.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If variables are unresolved or values fail validation.
    """
    data: dict[str, Any] = {}
    source = "command-line options"
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with config_path.open() as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping at the top level")
        source = str(config_path)

    data = expand_env_vars_recursive(data)
    check_unexpanded_vars(data, source=source)

    if overrides:
        data = merge_configs(data, overrides)

    return Config(**data)
