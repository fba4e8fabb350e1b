"""Sandbox path resolution for base-directory-confined file operations."""

import os
import re
from pathlib import Path, PurePath, PureWindowsPath

from pathgate.core.errors import (
    AbsolutePathRejected,
    EmptyPathError,
    NullByteRejected,
    PathEscapeError,
    PatternMismatchError,
    TraversalDetected,
)
from pathgate.policy.patterns import ValidationMode
from pathgate.policy.store import PolicyStore, SecurityPolicy

_SEPARATORS = re.compile(r"[/\\]")


def _is_absolute(raw_path: str) -> bool:
    """Return True for a leading separator or a drive-style prefix (``C:``)."""
    if raw_path.startswith(("/", "\\")):
        return True
    return bool(PureWindowsPath(raw_path).drive) or os.path.isabs(raw_path)


def _climbs_out(raw_path: str) -> bool:
    """Return True if a ``..`` segment walks above the start of ``raw_path``.

    ``a/../b`` stays inside its own prefix and is not flagged; ``a/../../b``
    and ``../b`` are.
    """
    depth = 0
    for part in _SEPARATORS.split(raw_path):
        if part == os.pardir:
            depth -= 1
            if depth < 0:
                return True
        elif part and part != os.curdir:
            depth += 1
    return False


def is_within_base(target: str | os.PathLike[str], base: str | os.PathLike[str]) -> bool:
    """Return True if the relative path from ``base`` to ``target`` has no ``..`` segment.

    Both arguments should already be absolute and normalized. Comparison is
    by path segment, so a file literally named ``a..b`` is not mistaken for a
    parent reference.
    """
    try:
        relative = os.path.relpath(target, base)
    except ValueError:
        # Different drives on Windows have no relative path at all.
        return False
    return os.pardir not in PurePath(relative).parts


def resolve_sandboxed_path(policy: SecurityPolicy, raw_path: str) -> Path:
    """Resolve and validate that a path is within the policy's base directory.

    Checks run in order and the first failure wins:

    1. Empty input, or input containing a NUL character.
    2. Absolute paths (leading ``/``, ``\\`` or a drive prefix), in every mode.
    3. In ``allow_relative`` mode, ``..`` segments that climb above the start
       of the raw path.
    4. When ``enforce_whitelist`` is set, a full match against the active
       whitelist pattern.
    5. Join onto the base directory, normalize lexically, and require the
       relative path from the base to contain no ``..`` segment. This is the
       authoritative containment check; the pattern is only a syntax filter.
    6. When ``resolve_symlinks`` is set, the same containment check on the
       symlink-resolved forms of base and target.

    Args:
        policy: The policy snapshot to validate against.
        raw_path: Caller-supplied path, relative to the base directory.

    Returns:
        The normalized absolute path. The real filesystem is not touched
        unless ``resolve_symlinks`` is set.

    Raises:
        EmptyPathError: ``raw_path`` is empty.
        NullByteRejected: ``raw_path`` contains a NUL character.
        AbsolutePathRejected: ``raw_path`` carries an absolute-path marker.
        TraversalDetected: ``raw_path`` climbs out in ``allow_relative`` mode.
        PatternMismatchError: ``raw_path`` fails the enforced whitelist.
        PathEscapeError: the normalized path lies outside the base directory.
    """
    if not raw_path:
        raise EmptyPathError(raw_path)

    if "\x00" in raw_path:
        raise NullByteRejected(raw_path)

    if _is_absolute(raw_path):
        raise AbsolutePathRejected(raw_path)

    if policy.mode is ValidationMode.ALLOW_RELATIVE and _climbs_out(raw_path):
        raise TraversalDetected(raw_path)

    if policy.enforce_whitelist and not policy.whitelist_pattern.fullmatch(raw_path):
        raise PatternMismatchError(raw_path, policy.whitelist_pattern.pattern)

    base = os.fspath(policy.base_directory)
    clean_path = os.path.normpath(os.path.join(base, raw_path))

    if not is_within_base(clean_path, base):
        raise PathEscapeError(raw_path, base, clean_path)

    if policy.resolve_symlinks:
        real_path = os.path.realpath(clean_path)
        if not is_within_base(real_path, os.path.realpath(base)):
            raise PathEscapeError(raw_path, base, real_path)

    return Path(clean_path)


class PathResolver:
    """Resolves raw paths against a policy store or a fixed policy.

    When built from a ``PolicyStore``, every call reads one snapshot, so a
    concurrent pattern swap never mixes two policies within a single
    resolution.
    """

    def __init__(self, source: PolicyStore | SecurityPolicy):
        self._source = source

    @property
    def policy(self) -> SecurityPolicy:
        if isinstance(self._source, PolicyStore):
            return self._source.policy
        return self._source

    @property
    def base_directory(self) -> Path:
        return self.policy.base_directory

    def resolve(self, raw_path: str) -> Path:
        """Resolve ``raw_path`` under the current policy snapshot."""
        if not raw_path:
            raise EmptyPathError(raw_path)
        return resolve_sandboxed_path(self.policy, raw_path)
