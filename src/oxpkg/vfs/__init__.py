"""Virtual filesystem layer: URIs, stores, the package cache and fs-shaped ops."""

from __future__ import annotations

from .cache import HandleState, PackageCache, PackageHandle
from .provider import PackageFileSystem
from .storage import LocalFileStore, MemoryStore, PackageStore
from .uri import SCHEME, PackageUri

__all__ = [
    "SCHEME",
    "PackageUri",
    "PackageStore",
    "LocalFileStore",
    "MemoryStore",
    "HandleState",
    "PackageHandle",
    "PackageCache",
    "PackageFileSystem",
]
