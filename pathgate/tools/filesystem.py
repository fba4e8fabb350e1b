"""Sandboxed directory access.

Provides directory listing restricted to the policy's base directory and a
standalone permission-bit probe. Path validation is delegated entirely to
``PathResolver``; this module adds no rules of its own.
"""

import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from pathgate.core.errors import EmptyPathError
from pathgate.tools.sandbox import PathResolver, resolve_sandboxed_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    """One child of a listed directory."""

    name: str
    path: Path
    relative_path: str
    is_dir: bool
    size: int = 0
    modified_at: str | None = None


class DirectoryAccessor:
    """Lists directories inside the sandbox.

    All operations are restricted to the resolver's base directory; any raw
    path the resolver rejects never reaches the filesystem.
    """

    def __init__(self, resolver: PathResolver, timezone: str = "UTC"):
        """Initialize the accessor.

        Args:
            resolver: Resolver used to validate every raw path.
            timezone: IANA timezone identifier for modification times.

        Raises:
            ZoneInfoNotFoundError: If ``timezone`` is not a known zone.
        """
        self.resolver = resolver
        self._tz = ZoneInfo(timezone)

    def _entry_for(self, child: os.DirEntry[str], base: Path) -> DirectoryEntry:
        path = Path(child.path)
        relative_path = os.path.relpath(child.path, base)
        try:
            is_dir = child.is_dir()
            st = child.stat()
        except OSError:
            return DirectoryEntry(name=child.name, path=path, relative_path=relative_path, is_dir=False)

        modified_at = datetime.fromtimestamp(st.st_mtime, tz=self._tz).strftime(
            "%Y-%m-%d %H:%M:%S"
        )
        return DirectoryEntry(
            name=child.name,
            path=path,
            relative_path=relative_path,
            is_dir=is_dir,
            size=0 if is_dir else int(st.st_size),
            modified_at=modified_at,
        )

    def list_directory(self, raw_path: str) -> list[DirectoryEntry]:
        """List directory contents sorted by name.

        Args:
            raw_path: Directory path relative to the base directory.

        Returns:
            One entry per child. Children whose stat fails are still listed,
            with no size or modification time.

        Raises:
            PathValidationError: If the resolver rejects ``raw_path``.
            OSError: If the directory cannot be enumerated (missing, not a
                directory, permission denied). Passed through unchanged.
        """
        if not raw_path:
            raise EmptyPathError(raw_path)

        policy = self.resolver.policy
        dir_path = resolve_sandboxed_path(policy, raw_path)

        with os.scandir(dir_path) as it:
            children = sorted(it, key=lambda child: child.name)

        entries = [self._entry_for(child, policy.base_directory) for child in children]
        logger.debug(f"Listed {len(entries)} entries in {dir_path}")
        return entries


def format_listing(entries: list[DirectoryEntry]) -> str:
    """Format directory entries for display, one per line."""
    lines = []
    for entry in entries:
        size = entry.size
        if size < 1024:
            size_str = f"{size}B"
        elif size < 1024 * 1024:
            size_str = f"{size / 1024:.1f}KB"
        else:
            size_str = f"{size / (1024 * 1024):.1f}MB"

        name = entry.relative_path + ("/" if entry.is_dir else "")
        lines.append(f"{name:30s} {size_str:>10s}  {entry.modified_at or 'unknown'}")
    return "\n".join(lines)


def check_directory_permissions(path: str | os.PathLike[str], required_mode: int) -> bool:
    """Return True if ``path`` has every permission bit in ``required_mode``.

    This is an advisory probe on the raw permission bits, not an access
    check for the current user. Any stat failure yields False.

    Args:
        path: Filesystem path to stat (symlinks are followed).
        required_mode: Bitmask such as ``0o755`` or ``stat.S_IRUSR``.
    """
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return False
    return (stat.S_IMODE(st.st_mode) & required_mode) == required_mode
