"""Sandboxed path tools.

Provides:
- resolve_sandboxed_path / PathResolver: path validation and resolution
- DirectoryAccessor: directory listing inside the sandbox
- check_directory_permissions: advisory permission-bit probe
"""

from pathgate.tools.filesystem import (
    DirectoryAccessor,
    DirectoryEntry,
    check_directory_permissions,
    format_listing,
)
from pathgate.tools.sandbox import PathResolver, is_within_base, resolve_sandboxed_path

__all__ = [
    "DirectoryAccessor",
    "DirectoryEntry",
    "PathResolver",
    "check_directory_permissions",
    "format_listing",
    "is_within_base",
    "resolve_sandboxed_path",
]
