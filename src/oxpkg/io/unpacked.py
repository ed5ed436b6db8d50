"""Unpacked-directory I/O.

`unpack_package()` writes each entry of a package as a file under a directory
(entry `/word/document.xml` -> `<out>/word/document.xml`), pretty-printed by
default so the XML is readable and diffable. `pack_directory()` reads such a
tree back into a `Package`; files are added in sorted path order after the
content-types entry.
"""

from __future__ import annotations

from pathlib import Path

from oxpkg.core.entries import CONTENT_TYPES_NAME
from oxpkg.core.errors import MissingContentTypes
from oxpkg.core.package import Package


def _entry_path(root: Path, name: str) -> Path:
    rel = name.lstrip("/")
    target = (root / rel).resolve()
    if root.resolve() not in target.parents:
        raise ValueError(f"entry name escapes output directory: {name!r}")
    return target


def unpack_package(package: Package, out_dir: Path, *, pretty: bool = True) -> list[Path]:
    """Write every entry under `out_dir`; return the written paths in package order."""
    root = Path(out_dir)
    root.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name in package.all_entry_names():
        data = package.entry_bytes_for_display(name) if pretty else package.entry_bytes_for_save(name)
        path = _entry_path(root, name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        written.append(path)
    return written


def pack_directory(src_dir: Path) -> Package:
    """Read a directory tree into a package.

    Raises:
        ValueError: `src_dir` is not a directory.
        MissingContentTypes: no `[Content_Types].xml` at the top of the tree.
    """
    root = Path(src_dir)
    if not root.is_dir():
        raise ValueError(f"{src_dir} is not a directory")

    raw: dict[str, bytes] = {}
    for item in sorted(root.rglob("*")):
        if item.is_file():
            raw["/" + item.relative_to(root).as_posix()] = item.read_bytes()
    if CONTENT_TYPES_NAME not in raw:
        raise MissingContentTypes(CONTENT_TYPES_NAME)
    return Package.from_raw_entries(raw)
