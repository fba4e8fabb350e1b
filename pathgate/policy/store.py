"""Security policy snapshots and the store that publishes them.

A ``SecurityPolicy`` is immutable. ``PolicyStore`` holds exactly one current
snapshot and replaces it wholesale under a lock, so a resolver that grabbed a
snapshot keeps a consistent view for the whole call even if an administrator
swaps the pattern or re-initializes concurrently.
"""

import dataclasses
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from threading import Lock

from pathgate.core.errors import InitializationError, PolicyNotInitializedError
from pathgate.policy.patterns import ValidationMode, compile_pattern, pattern_for_mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecurityPolicy:
    """One immutable view of the confinement rules."""

    base_directory: Path
    mode: ValidationMode
    whitelist_pattern: re.Pattern[str]
    enforce_whitelist: bool = False
    resolve_symlinks: bool = False

    @classmethod
    def create(
        cls,
        base_directory: str | os.PathLike[str],
        mode: ValidationMode = ValidationMode.DEFAULT,
        *,
        whitelist_pattern: str | None = None,
        enforce_whitelist: bool = False,
        resolve_symlinks: bool = False,
    ) -> "SecurityPolicy":
        """Build a policy rooted at the absolute, clean form of ``base_directory``.

        ``whitelist_pattern`` replaces the mode's default pattern when given.

        Raises:
            InitializationError: If the base directory cannot be made absolute.
            InvalidPatternError: If ``whitelist_pattern`` is empty or does not compile.
        """
        try:
            raw = os.fspath(base_directory)
            if not raw:
                raise ValueError("base directory must not be empty")
            if "\x00" in raw:
                raise ValueError("base directory contains a null byte")
            absolute = os.path.abspath(raw)
        except (OSError, TypeError, ValueError) as e:
            raise InitializationError(
                f"Failed to initialize sandbox for base directory {base_directory!r}: {e}"
            ) from e

        mode = ValidationMode(mode)
        if whitelist_pattern is None:
            compiled = pattern_for_mode(mode)
        else:
            compiled = compile_pattern(whitelist_pattern)
        return cls(
            base_directory=Path(absolute),
            mode=mode,
            whitelist_pattern=compiled,
            enforce_whitelist=enforce_whitelist,
            resolve_symlinks=resolve_symlinks,
        )


class PolicyStore:
    """Holds the current ``SecurityPolicy`` and swaps it atomically.

    Example:
        >>> store = PolicyStore()
        >>> policy = store.initialize("/srv/data")
        >>> store.set_whitelist_pattern(r"^[a-z/]+$")
        >>> store.policy.base_directory
        PosixPath('/srv/data')
    """

    def __init__(self, policy: SecurityPolicy | None = None):
        self._policy = policy
        self._lock = Lock()

    @property
    def is_initialized(self) -> bool:
        return self._policy is not None

    @property
    def policy(self) -> SecurityPolicy:
        """Current policy snapshot.

        Raises:
            PolicyNotInitializedError: If ``initialize`` has never been called.
        """
        policy = self._policy
        if policy is None:
            raise PolicyNotInitializedError(
                "Sandbox policy is not initialized. Call initialize() with a base directory first."
            )
        return policy

    def initialize(
        self,
        base_directory: str | os.PathLike[str],
        mode: ValidationMode = ValidationMode.DEFAULT,
        *,
        whitelist_pattern: str | None = None,
        enforce_whitelist: bool = False,
        resolve_symlinks: bool = False,
    ) -> SecurityPolicy:
        """Replace the current policy with a fresh one rooted at ``base_directory``.

        Args:
            base_directory: Directory every resolved path must stay within.
            mode: Validation mode selecting the default whitelist pattern.
            whitelist_pattern: Regex replacing the mode's default pattern.
            enforce_whitelist: Reject raw paths that do not match the pattern.
            resolve_symlinks: Recheck containment on the symlink-resolved path.

        Returns:
            The newly active policy.

        Raises:
            InitializationError: If the base directory cannot be made absolute.
                The previous policy (if any) stays active.
            InvalidPatternError: If ``whitelist_pattern`` is invalid. The
                previous policy stays active.
        """
        policy = SecurityPolicy.create(
            base_directory,
            mode,
            whitelist_pattern=whitelist_pattern,
            enforce_whitelist=enforce_whitelist,
            resolve_symlinks=resolve_symlinks,
        )
        with self._lock:
            self._policy = policy
        logger.info(
            f"Sandbox initialized: base={policy.base_directory}, mode={policy.mode.value}, "
            f"enforce_whitelist={policy.enforce_whitelist}, resolve_symlinks={policy.resolve_symlinks}"
        )
        return policy

    def set_whitelist_pattern(self, pattern: str) -> None:
        """Swap in a new whitelist pattern without changing the mode.

        Raises:
            InvalidPatternError: If the pattern is empty or does not compile.
                The previous pattern stays active.
            PolicyNotInitializedError: If no policy exists yet.
        """
        compiled = compile_pattern(pattern)
        with self._lock:
            self._policy = dataclasses.replace(self.policy, whitelist_pattern=compiled)
        logger.info(f"Whitelist pattern replaced: {pattern!r}")
