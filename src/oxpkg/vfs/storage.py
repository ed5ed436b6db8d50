"""Persistence boundary: where package bytes come from and go to.

The core only produces and consumes byte buffers; a store decides how those
bytes reach the backing medium.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class PackageStore(Protocol):
    async def read_bytes(self, location: str) -> bytes: ...

    async def write_bytes(self, location: str, data: bytes) -> None: ...


class LocalFileStore:
    """Store for locations that are local filesystem paths."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = Path(root) if root is not None else None

    def _path(self, location: str) -> Path:
        p = Path(location)
        if self.root is not None and not p.is_absolute():
            p = self.root / p
        return p

    async def read_bytes(self, location: str) -> bytes:
        return await asyncio.to_thread(self._path(location).read_bytes)

    async def write_bytes(self, location: str, data: bytes) -> None:
        path = self._path(location)
        await asyncio.to_thread(_write_bytes_replace, path, bytes(data))
        logger.info("wrote %d bytes to %s", len(data), path)


def _write_bytes_replace(path: Path, data: bytes) -> None:
    # Write a private temp file beside the target, then rename over it.
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(dir=path.parent, prefix=path.name + ".", suffix=".tmp", delete=False)
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(data)
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o777)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


class MemoryStore:
    """Dict-backed store; `blobs` maps location -> bytes."""

    def __init__(self, blobs: dict[str, bytes] | None = None) -> None:
        self.blobs: dict[str, bytes] = dict(blobs or {})
        self.reads = 0
        self.writes = 0

    async def read_bytes(self, location: str) -> bytes:
        self.reads += 1
        # Yield once so concurrent callers genuinely interleave.
        await asyncio.sleep(0)
        try:
            return self.blobs[location]
        except KeyError:
            raise FileNotFoundError(location) from None

    async def write_bytes(self, location: str, data: bytes) -> None:
        self.writes += 1
        self.blobs[location] = bytes(data)
