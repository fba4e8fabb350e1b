"""Configuration package for pathgate.

This package provides Pydantic configuration models and loading utilities.
"""

from pathgate.core.config.loader import (
    check_unexpanded_vars,
    expand_env_vars,
    expand_env_vars_recursive,
    load_config,
    merge_configs,
)
from pathgate.core.config.models import Config, LoggingConfig, PolicyConfig

__all__ = [
    # Models
    "Config",
    "LoggingConfig",
    "PolicyConfig",
    # Loaders
    "check_unexpanded_vars",
    "expand_env_vars",
    "expand_env_vars_recursive",
    "load_config",
    "merge_configs",
]
