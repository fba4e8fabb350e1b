"""Security policy: validation modes, whitelist patterns and the policy store."""

from pathgate.policy.patterns import (
    MODE_PATTERNS,
    ValidationMode,
    compile_pattern,
    pattern_for_mode,
)
from pathgate.policy.store import PolicyStore, SecurityPolicy

__all__ = [
    "MODE_PATTERNS",
    "PolicyStore",
    "SecurityPolicy",
    "ValidationMode",
    "compile_pattern",
    "pattern_for_mode",
]
