"""Validation modes and their default whitelist patterns."""

import re
from enum import Enum

from pathgate.core.errors import InvalidPatternError


class ValidationMode(str, Enum):
    """Which syntax the whitelist pattern accepts for raw paths."""

    STRICT = "strict"
    ALLOW_RELATIVE = "allow_relative"
    DEFAULT = "default"


# Character-class policy only. Containment is enforced after normalization.
STRICT_PATTERN = r"^([\w-]+/)*([\w.]+)?$"
ALLOW_RELATIVE_PATTERN = r"^(?:\.+/)*([\w/-]+)$"
DEFAULT_PATTERN = r"^([\w/-]+)$"

MODE_PATTERNS: dict[ValidationMode, str] = {
    ValidationMode.STRICT: STRICT_PATTERN,
    ValidationMode.ALLOW_RELATIVE: ALLOW_RELATIVE_PATTERN,
    ValidationMode.DEFAULT: DEFAULT_PATTERN,
}


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a whitelist pattern.

    Raises:
        InvalidPatternError: If the pattern is empty or is not a valid regex.
    """
    if not pattern:
        raise InvalidPatternError(pattern, "pattern must not be empty")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def pattern_for_mode(mode: ValidationMode) -> re.Pattern[str]:
    """Return the compiled default whitelist pattern for a mode."""
    return compile_pattern(MODE_PATTERNS[ValidationMode(mode)])
