"""Filesystem-shaped operations over open packages.

This is the surface a tree view, editor or CLI builds on. Every operation is
addressed by a `PackageUri`; packages are looked up in (or opened through) the
`PackageCache`. Each mutating operation re-serializes the owning package and
persists it through the store before returning.
"""

from __future__ import annotations

import logging
from typing import Union

from oxpkg.core import paths
from oxpkg.core.entries import CONTENT_TYPES_NAME
from oxpkg.core.errors import CrossPackageRenameError, EntryNotFound, MoveIntoSelfError, ProtectedEntryError
from oxpkg.core.package import Package
from oxpkg.core.paths import EntryStat, NodeKind

from .cache import PackageCache
from .storage import PackageStore
from .uri import PackageUri

logger = logging.getLogger(__name__)

UriLike = Union[PackageUri, str]


def _as_uri(uri: UriLike) -> PackageUri:
    return uri if isinstance(uri, PackageUri) else PackageUri.parse(uri)


class PackageFileSystem:
    def __init__(self, cache: PackageCache, store: PackageStore | None = None) -> None:
        self.cache = cache
        self.store = store if store is not None else cache.store

    async def _package(self, uri: PackageUri) -> Package:
        return await self.cache.open(uri.location)

    async def _save(self, location: str, package: Package) -> None:
        data = package.to_archive_bytes()
        await self.store.write_bytes(location, data)
        logger.info("saved package %s (%d entries, %d bytes)", location, len(package), len(data))

    # ----------------------------
    # Queries
    # ----------------------------

    async def stat(self, uri: UriLike) -> EntryStat:
        u = _as_uri(uri)
        return paths.stat(await self._package(u), u.entry_name)

    async def list_children(self, uri: UriLike) -> list[tuple[str, NodeKind]]:
        u = _as_uri(uri)
        package = await self._package(u)
        return paths.list_children(package.all_entry_names(), u.entry_name)

    async def read_file(self, uri: UriLike) -> bytes:
        u = _as_uri(uri)
        package = await self._package(u)
        return package.entry_bytes_for_display(u.entry_name)

    # ----------------------------
    # Mutations (each one persists the package)
    # ----------------------------

    async def write_file(self, uri: UriLike, content: bytes) -> None:
        u = _as_uri(uri)
        package = await self._package(u)
        package.write_entry(u.entry_name, content)
        await self._save(u.location, package)

    async def delete(self, uri: UriLike, *, recursive: bool = False) -> list[str]:
        """Delete the entry at `uri`, or everything under it when `recursive`.

        Raises:
            EntryNotFound: nothing matches.
            ProtectedEntryError: the content-types entry would be removed.
        """
        u = _as_uri(uri)
        package = await self._package(u)
        targets = paths.entries_under(package.all_entry_names(), u.entry_name, recursive=recursive)
        if not targets:
            raise EntryNotFound(u.entry_name)

        removed = package.remove_entries(targets)
        await self._save(u.location, package)
        return removed

    async def rename(self, old: UriLike, new: UriLike) -> list[tuple[str, str]]:
        """Rename an entry, or every entry under a directory path, within one package.

        Returns the `(old_name, new_name)` pairs moved.

        Raises:
            CrossPackageRenameError: `old` and `new` address different packages.
            EntryNotFound: nothing exists at `old`.
            MoveIntoSelfError: a directory would be moved below itself.
            ProtectedEntryError: the content-types entry would be moved.
        """
        src = _as_uri(old)
        dst = _as_uri(new)
        if src.location != dst.location:
            raise CrossPackageRenameError(src.location, dst.location)

        package = await self._package(src)
        names = package.all_entry_names()
        if src.entry_name in names:
            moves = [(src.entry_name, dst.entry_name)]
        else:
            prefix = paths.directory_prefix(src.entry_name)
            if paths.directory_prefix(dst.entry_name).startswith(prefix):
                raise MoveIntoSelfError(src.entry_name, dst.entry_name)
            moves = [
                (name, paths.join(dst.entry_name, name[len(prefix):]))
                for name in paths.entries_under(names, src.entry_name, recursive=True)
            ]
        if not moves:
            raise EntryNotFound(src.entry_name)
        if any(name == CONTENT_TYPES_NAME for name, _ in moves):
            raise ProtectedEntryError(CONTENT_TYPES_NAME, action="rename")

        package.move_entries(moves)
        await self._save(src.location, package)
        return moves
