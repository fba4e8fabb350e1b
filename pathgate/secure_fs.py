"""Process-wide secure filesystem facade.

Thin functions over one shared ``PolicyStore`` for callers that want a single
sandbox per process. Nothing resolves until ``initialize`` (or
``initialize_from_config``) has been called; there is no implicit default
base directory.

Example:
    >>> from pathgate import secure_fs
    >>> policy = secure_fs.initialize("/srv/data")
    >>> secure_fs.resolve("reports/q1.csv")
    PosixPath('/srv/data/reports/q1.csv')
"""

import os
from pathlib import Path

from pathgate.core.config.models import Config
from pathgate.policy.patterns import ValidationMode
from pathgate.policy.store import PolicyStore, SecurityPolicy
from pathgate.tools.filesystem import DirectoryAccessor, DirectoryEntry
from pathgate.tools.filesystem import check_directory_permissions as _check_permissions
from pathgate.tools.sandbox import PathResolver

_store = PolicyStore()
_resolver = PathResolver(_store)
_timezone = "UTC"


def get_store() -> PolicyStore:
    """Return the shared policy store."""
    return _store


def initialize(
    base_directory: str | os.PathLike[str],
    mode: ValidationMode = ValidationMode.DEFAULT,
    *,
    whitelist_pattern: str | None = None,
    enforce_whitelist: bool = False,
    resolve_symlinks: bool = False,
) -> SecurityPolicy:
    """Initialize (or fully re-initialize) the shared sandbox policy.

    Raises:
        InitializationError: If the base directory cannot be made absolute.
        InvalidPatternError: If ``whitelist_pattern`` is empty or does not compile.
    """
    return _store.initialize(
        base_directory,
        mode,
        whitelist_pattern=whitelist_pattern,
        enforce_whitelist=enforce_whitelist,
        resolve_symlinks=resolve_symlinks,
    )


def initialize_from_config(config: Config) -> SecurityPolicy:
    """Initialize the shared policy from a loaded ``Config``.

    The configured whitelist override is part of the one published snapshot,
    so no resolver ever sees the mode's default pattern in between.
    """
    global _timezone

    policy_config = config.policy
    policy = initialize(
        policy_config.base_directory,
        policy_config.mode,
        whitelist_pattern=policy_config.whitelist_pattern,
        enforce_whitelist=policy_config.enforce_whitelist,
        resolve_symlinks=policy_config.resolve_symlinks,
    )
    _timezone = config.timezone
    return policy


def set_whitelist_pattern(pattern: str) -> None:
    """Replace the active whitelist pattern.

    Raises:
        InvalidPatternError: If the pattern is empty or does not compile.
        PolicyNotInitializedError: If ``initialize`` has not been called.
    """
    _store.set_whitelist_pattern(pattern)


def resolve(raw_path: str) -> Path:
    """Resolve ``raw_path`` inside the shared sandbox."""
    return _resolver.resolve(raw_path)


def list_directory(raw_path: str) -> list[DirectoryEntry]:
    """List a directory inside the shared sandbox.

    Raises:
        PathValidationError: If the raw path is rejected.
        OSError: If enumeration fails.
    """
    return DirectoryAccessor(_resolver, timezone=_timezone).list_directory(raw_path)


def check_directory_permissions(path: str | os.PathLike[str], required_mode: int) -> bool:
    """Return True if ``path`` carries every bit in ``required_mode``; False on stat failure."""
    return _check_permissions(path, required_mode)
