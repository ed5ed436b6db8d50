"""Hierarchy reconstruction over a package's flat entry names.

A package only knows absolute, `/`-separated entry names. This module answers
filesystem-shaped questions about them (is a path a file or a directory, what
are its immediate children, which entries live under it) and is the single
place where prefix matching happens.

Matching rule: a name belongs under directory prefix `P` (always ending in
`/`) iff `name + "/"` starts with `P`. Appending the separator makes an entry
whose name equals the directory path itself match with an empty remainder,
which is how files are told apart from directories.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from oxpkg.core.errors import NotADirectory, NotFound

if TYPE_CHECKING:  # pragma: no cover
    from oxpkg.core.package import Package


SEPARATOR = "/"

_MULTI_SEP = re.compile(r"/{2,}")


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Node:
    path: str
    kind: NodeKind
    children: dict[str, NodeKind] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class EntryStat:
    kind: NodeKind
    size: int


def normalize_entry_name(path: str) -> str:
    """Canonical absolute entry name: leading `/`, single separators, no trailing `/`."""
    if not isinstance(path, str):
        raise TypeError(f"entry name must be str, got {type(path).__name__}")
    s = _MULTI_SEP.sub(SEPARATOR, SEPARATOR + path.strip())
    if len(s) > 1:
        s = s.rstrip(SEPARATOR)
    return s


def directory_prefix(path: str) -> str:
    """Normalize `path` to a directory prefix ending with the separator."""
    s = normalize_entry_name(path)
    return s if s.endswith(SEPARATOR) else s + SEPARATOR


def join(parent: str, child: str) -> str:
    return normalize_entry_name(directory_prefix(parent) + child)


def _remainders(names: Iterable[str], prefix: str) -> list[str]:
    out: list[str] = []
    for name in names:
        candidate = name + SEPARATOR
        if candidate.startswith(prefix):
            out.append(candidate[len(prefix):])
    return out


def resolve_node(names: Iterable[str], path: str) -> Node:
    """Resolve `path` to a file node or a directory node with its immediate children.

    Raises:
        NotFound: if no entry name lies at or under `path`.
    """
    prefix = directory_prefix(path)
    remainders = _remainders(names, prefix)
    if not remainders:
        raise NotFound(path)

    if len(remainders) == 1 and remainders[0] == "":
        return Node(path=prefix[:-1], kind=NodeKind.FILE)

    children: dict[str, NodeKind] = {}
    for remainder in remainders:
        # drop the separator appended for matching
        remainder = remainder[:-1]
        if not remainder:
            continue
        components = remainder.split(SEPARATOR)
        child = components[0]
        kind = NodeKind.FILE if len(components) == 1 else NodeKind.DIRECTORY
        if children.get(child) is NodeKind.DIRECTORY:
            continue
        children[child] = kind
    return Node(path=prefix, kind=NodeKind.DIRECTORY, children=children)


def list_children(names: Iterable[str], path: str) -> list[tuple[str, NodeKind]]:
    """Immediate children of directory `path`, in first-seen order.

    Raises:
        NotFound: for a nonexistent path.
        NotADirectory: if `path` names a file.
    """
    node = resolve_node(names, path)
    if node.kind is NodeKind.FILE:
        raise NotADirectory(path)
    return list(node.children.items())


def stat(package: "Package", path: str) -> EntryStat:
    """File size is the length of the display rendering; directory size is its child count."""
    node = resolve_node(package.all_entry_names(), path)
    if node.kind is NodeKind.FILE:
        return EntryStat(kind=NodeKind.FILE, size=len(package.entry_bytes_for_display(node.path)))
    return EntryStat(kind=NodeKind.DIRECTORY, size=len(node.children))


def entries_under(names: Iterable[str], path: str, *, recursive: bool) -> list[str]:
    """Entry names at `path` (non-recursive) or at and below it (recursive)."""
    prefix = directory_prefix(path)
    if recursive:
        return [name for name in names if (name + SEPARATOR).startswith(prefix)]
    return [name for name in names if name + SEPARATOR == prefix]


def parent_of(path: str) -> str | None:
    """Parent directory of `path`; `None` for the root."""
    s = normalize_entry_name(path)
    if s == SEPARATOR:
        return None
    head = s.rsplit(SEPARATOR, 1)[0]
    return head or SEPARATOR
