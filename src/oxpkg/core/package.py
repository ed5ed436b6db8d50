"""In-memory package model.

A `Package` owns every typed entry of one decoded archive, keyed by absolute
entry name in insertion order. The content-types entry is always present and
always first; it is loaded before any other entry and classifies the rest.

Mutations happen in place and are never persisted implicitly: callers
re-serialize with `to_archive_bytes()` and write the bytes themselves.
"""

from __future__ import annotations

import logging
import posixpath
import zipfile
from typing import Iterable, Mapping, Optional

from oxpkg.core.entries import (
    CONTENT_TYPES_NAME,
    RELS_SUFFIX,
    ContentTypes,
    Entry,
    Relationship,
    RelationshipRecord,
)
from oxpkg.core.errors import EntryNotFound, InvalidRelationshipFile, MissingContentTypes, ProtectedEntryError
from oxpkg.core.paths import normalize_entry_name

logger = logging.getLogger(__name__)

PACKAGE_RELATIONSHIPS_NAME = "/_rels/.rels"


def relationship_name_for(owner_name: str) -> str:
    """Conventional relationship-file name: `<dir>/_rels/<basename>.rels`."""
    owner = normalize_entry_name(owner_name)
    directory, base = posixpath.split(owner)
    return posixpath.join(directory, "_rels", base + RELS_SUFFIX)


def _records_of(entry: Entry) -> tuple[RelationshipRecord, ...]:
    if not isinstance(entry, Relationship):
        raise InvalidRelationshipFile(entry.name, f"entry is classified as {entry.kind.value}")
    if entry.error is not None:
        raise InvalidRelationshipFile(entry.name, entry.error)
    return entry.records


class Package:
    def __init__(self, content_types: ContentTypes) -> None:
        self._content_types = content_types
        self._entries: dict[str, Entry] = {CONTENT_TYPES_NAME: content_types}

    # ----------------------------
    # Construction / serialization
    # ----------------------------

    @classmethod
    def from_raw_entries(cls, raw_entries: Mapping[str, bytes]) -> "Package":
        """Build a package from `{absolute name: raw bytes}`.

        Raises:
            MissingContentTypes: if `/[Content_Types].xml` is absent.
        """
        normalized: dict[str, bytes] = {}
        for name, raw in raw_entries.items():
            key = normalize_entry_name(name)
            if key in normalized:
                logger.warning("entry %r collides with %s after normalization; keeping the last one", name, key)
            normalized[key] = bytes(raw)
        if CONTENT_TYPES_NAME not in normalized:
            raise MissingContentTypes(CONTENT_TYPES_NAME)

        package = cls(ContentTypes.from_bytes(normalized.pop(CONTENT_TYPES_NAME)))
        for name, raw in normalized.items():
            package._entries[name] = package._content_types.classify(name, raw)
        return package

    @classmethod
    def from_archive_bytes(cls, data: bytes) -> "Package":
        """Decode archive bytes into a package.

        Raises:
            ArchiveFormatError: malformed archive.
            MissingContentTypes: archive has no content-types entry.
        """
        from oxpkg.codecs.zip_archive import decode_archive  # local import; core must not import codecs at load

        package = cls.from_raw_entries(decode_archive(data))
        logger.debug("loaded package with %d entries", len(package._entries))
        return package

    def to_archive_bytes(self, *, compression: int = zipfile.ZIP_DEFLATED) -> bytes:
        """Serialize every entry in its save form into archive bytes."""
        from oxpkg.codecs.zip_archive import encode_archive  # local import

        return encode_archive(
            {name: entry.for_save() for name, entry in self._entries.items()},
            compression=compression,
        )

    # ----------------------------
    # Queries
    # ----------------------------

    @property
    def content_types(self) -> ContentTypes:
        return self._content_types

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_entry(name)

    def all_entry_names(self) -> list[str]:
        return list(self._entries)

    def has_entry(self, name: str) -> bool:
        return normalize_entry_name(name) in self._entries

    def entry(self, name: str) -> Entry:
        key = normalize_entry_name(name)
        try:
            return self._entries[key]
        except KeyError:
            raise EntryNotFound(key) from None

    def entries(self) -> list[Entry]:
        return list(self._entries.values())

    def entry_bytes_for_display(self, name: str) -> bytes:
        """Pretty XML (with declaration) for XML entries; raw bytes otherwise."""
        return self.entry(name).for_display()

    def entry_bytes_for_save(self, name: str) -> bytes:
        """Compact XML (with declaration) for XML entries; raw bytes otherwise."""
        return self.entry(name).for_save()

    def content_type_of(self, name: str) -> Optional[str]:
        return self._content_types.content_type_of(self.entry(name).name)

    # ----------------------------
    # Relationships
    # ----------------------------

    def relationships_of(self, owner_name: str) -> list[RelationshipRecord]:
        """Relationship records declared by the part `owner_name`.

        A part without a relationship file has no relationships (empty list).

        Raises:
            EntryNotFound: `owner_name` is absent or is the content-types entry.
            InvalidRelationshipFile: the conventional `.rels` entry exists but
                cannot be read as relationships.
        """
        owner = normalize_entry_name(owner_name)
        if owner == CONTENT_TYPES_NAME or owner not in self._entries:
            raise EntryNotFound(owner)

        rels = self._entries.get(relationship_name_for(owner))
        if rels is None:
            return []
        return list(_records_of(rels))

    def package_relationships(self) -> list[RelationshipRecord]:
        """Records of the package-level relationship file `/_rels/.rels`."""
        rels = self._entries.get(PACKAGE_RELATIONSHIPS_NAME)
        if rels is None:
            return []
        return list(_records_of(rels))

    # ----------------------------
    # Mutation
    # ----------------------------

    def write_entry(self, name: str, raw: bytes) -> Entry:
        """Classify and store `raw` under `name`, replacing any existing entry.

        Writing the content-types entry replaces the classification governor.
        """
        key = normalize_entry_name(name)
        if key == "/":
            raise ValueError("write_entry: entry name must not be the package root")
        entry = self._content_types.classify(key, bytes(raw))
        if isinstance(entry, ContentTypes):
            self._content_types = entry
        self._entries[key] = entry
        logger.debug("wrote entry %s (%s, %d bytes)", key, entry.kind.value, len(entry.raw))
        return entry

    def remove_entries(self, names: Iterable[str]) -> list[str]:
        """Remove every named entry that exists; unknown names are ignored.

        Returns the names actually removed.

        Raises:
            ProtectedEntryError: if the content-types entry is among `names`;
                nothing is removed in that case.
        """
        keys = {normalize_entry_name(n) for n in names}
        if CONTENT_TYPES_NAME in keys:
            raise ProtectedEntryError(CONTENT_TYPES_NAME)

        removed = [name for name in self._entries if name in keys]
        for name in removed:
            del self._entries[name]
        if removed:
            logger.debug("removed %d entries", len(removed))
        return removed

    def rename_entry(self, old_name: str, new_name: str) -> Entry:
        """Move one entry to a new name, re-classifying it there.

        Raises:
            EntryNotFound: `old_name` is absent.
            ProtectedEntryError: `old_name` is the content-types entry.
        """
        new = normalize_entry_name(new_name)
        self.move_entries([(old_name, new_name)])
        return self._entries[new]

    def move_entries(self, moves: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Move several entries at once; returns the normalized `(old, new)` pairs.

        Every source is read before any destination is written, so a
        destination may name another source of the same call. Moving an entry
        onto itself leaves it in place.

        Raises:
            EntryNotFound: a source is absent; nothing is moved.
            ProtectedEntryError: a source is the content-types entry; nothing is moved.
        """
        pairs = [(normalize_entry_name(old), normalize_entry_name(new)) for old, new in moves]
        sources = [(old, new, self.entry(old).raw) for old, new in pairs]
        if any(old == CONTENT_TYPES_NAME for old, _, _ in sources):
            raise ProtectedEntryError(CONTENT_TYPES_NAME, action="rename")
        if any(new == "/" for _, new, _ in sources):
            raise ValueError("move_entries: entry name must not be the package root")

        for old, new, _ in sources:
            if old != new:
                self._entries.pop(old, None)
        for old, new, raw in sources:
            if old != new:
                self.write_entry(new, raw)
        if pairs:
            logger.debug("moved %d entries", len(pairs))
        return pairs
