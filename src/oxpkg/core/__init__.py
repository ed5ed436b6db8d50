"""oxpkg core: entry model, package model, hierarchy queries and errors.

This package must not import vfs/cli at module load, and imports the archive
codec lazily, to avoid circular dependencies.
"""

from __future__ import annotations

from .entries import (
    CONTENT_TYPES_NAME,
    BinaryPart,
    ContentTypes,
    Entry,
    EntryKind,
    Relationship,
    RelationshipRecord,
    XmlPart,
    classify_entry,
)
from .errors import (
    ArchiveFormatError,
    CrossPackageRenameError,
    EntryNotFound,
    InvalidRelationshipFile,
    MissingContentTypes,
    MoveIntoSelfError,
    NotADirectory,
    NotFound,
    OxpkgError,
    PackageNotOpenError,
    ProtectedEntryError,
)
from .package import PACKAGE_RELATIONSHIPS_NAME, Package, relationship_name_for
from .paths import EntryStat, Node, NodeKind, entries_under, list_children, resolve_node, stat

__all__ = [
    "CONTENT_TYPES_NAME",
    "PACKAGE_RELATIONSHIPS_NAME",
    "BinaryPart",
    "ContentTypes",
    "Entry",
    "EntryKind",
    "Relationship",
    "RelationshipRecord",
    "XmlPart",
    "classify_entry",
    "Package",
    "relationship_name_for",
    "EntryStat",
    "Node",
    "NodeKind",
    "entries_under",
    "list_children",
    "resolve_node",
    "stat",
    "OxpkgError",
    "ArchiveFormatError",
    "MissingContentTypes",
    "EntryNotFound",
    "ProtectedEntryError",
    "InvalidRelationshipFile",
    "CrossPackageRenameError",
    "NotFound",
    "NotADirectory",
    "MoveIntoSelfError",
    "PackageNotOpenError",
]
