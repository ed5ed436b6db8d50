"""Shared plumbing for commands: a local-file package filesystem and error mapping."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Coroutine, Iterator, TypeVar

import typer

from oxpkg.core.errors import OxpkgError
from oxpkg.vfs import LocalFileStore, PackageCache, PackageFileSystem, PackageUri

T = TypeVar("T")

# Exit code for package errors (missing entry, malformed archive, ...).
EXIT_PACKAGE_ERROR = 2


def filesystem() -> PackageFileSystem:
    return PackageFileSystem(PackageCache(LocalFileStore()))


def package_uri(package: str, entry: str = "/") -> PackageUri:
    p = Path(package)
    if not p.is_file():
        raise typer.BadParameter(f"package file not found: {package}")
    return PackageUri(str(p.resolve()), entry)


def run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


@contextmanager
def package_errors() -> Iterator[None]:
    """Report core errors as one line on stderr and exit with code 2."""
    try:
        yield
    except OxpkgError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=EXIT_PACKAGE_ERROR) from e
