"""LegacyLocalStore — read/delete access to pre-migration files on disk.

Files uploaded before the move to object storage live under a single upload
directory and are referenced by a path relative to it.  This store can read
and delete them; it cannot create new ones.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from spacevault.exceptions import FileMissingError
from spacevault.utils import normalize_path

logger = logging.getLogger(__name__)


class LegacyLocalStore:
    """Disk-backed fallback rooted at the legacy upload directory.

    Security: :meth:`_resolve_path` keeps every path inside ``root``,
    rejecting traversal and symlinks.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    # =========================================================================
    # Path Resolution & Security
    # =========================================================================

    def _resolve_path(self, relative_path: str) -> Path:
        """Resolve a stored relative path to a physical path under root."""
        rel = normalize_path(relative_path)
        if not rel:
            raise PermissionError("Empty legacy path")

        candidate = self.root / rel

        current = self.root
        for part in Path(rel).parts:
            current = current / part
            if current.is_symlink():
                raise PermissionError(
                    f"Symlinks not allowed: {relative_path} contains symlink at "
                    f"{current.relative_to(self.root)}"
                )

        resolved = candidate.resolve()
        try:
            resolved.relative_to(self.root)
        except ValueError:
            raise PermissionError(
                f"Path traversal detected: {relative_path} resolves outside upload directory"
            ) from None
        return resolved

    # =========================================================================
    # Operations
    # =========================================================================

    async def exists(self, relative_path: str) -> bool:
        try:
            resolved = self._resolve_path(relative_path)
        except PermissionError:
            return False
        return await asyncio.to_thread(resolved.is_file)

    async def read_bytes(self, relative_path: str) -> bytes:
        """Return file bytes; ``FileMissingError`` if absent."""
        resolved = self._resolve_path(relative_path)
        if not await asyncio.to_thread(resolved.is_file):
            raise FileMissingError(f"File not found on disk: {relative_path}")
        return await asyncio.to_thread(resolved.read_bytes)

    async def delete(self, relative_path: str) -> bool:
        """Remove the file. Returns False if it was already gone."""
        resolved = self._resolve_path(relative_path)
        try:
            await asyncio.to_thread(resolved.unlink)
        except FileNotFoundError:
            return False
        logger.info("Legacy file deleted from disk: %s", relative_path)
        return True
