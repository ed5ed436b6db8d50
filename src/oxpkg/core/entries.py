"""Typed package entries and the classification rule.

An archive entry is one of four variants, decided by its name alone:

1. exactly `/[Content_Types].xml` -> `ContentTypes`
2. suffix `.rels`                -> `Relationship`
3. suffix `.xml`                 -> `XmlPart`
4. anything else                 -> `BinaryPart`

The union of the four is `Entry`. XML variants are parsed once with lxml and
rendered in two forms:

- `for_display()`: pretty-printed, for editors and viewers
- `for_save()`: compact, written back into the archive

Both forms are prefixed with the standard OOXML declaration. XML that is not
well-formed keeps its classification but is rendered verbatim.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import unquote

from lxml import etree

logger = logging.getLogger(__name__)

CONTENT_TYPES_NAME = "/[Content_Types].xml"
RELS_SUFFIX = ".rels"
XML_SUFFIX = ".xml"
XML_DECLARATION = b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'


class EntryKind(str, Enum):
    CONTENT_TYPES = "content_types"
    RELATIONSHIP = "relationship"
    XML = "xml"
    BINARY = "binary"


def _make_xml_parser() -> etree.XMLParser:
    # Strict and safe: no DTDs, entities or network access. Blank text is
    # dropped so the compact and pretty renderings come from the same tree.
    return etree.XMLParser(
        remove_blank_text=True,
        resolve_entities=False,
        load_dtd=False,
        no_network=True,
        recover=False,
        huge_tree=False,
    )


def _parse_xml(name: str, raw: bytes) -> tuple[Optional[Any], Optional[str]]:
    """Return (tree, None) on success or (None, reason) if `raw` is not well-formed."""
    try:
        root = etree.fromstring(raw, _make_xml_parser())
    except etree.XMLSyntaxError as e:
        logger.warning("entry %s is not well-formed XML: %s", name, e)
        return None, f"not well-formed XML ({e})"
    return root.getroottree(), None


def _render_xml(document: Optional[Any], raw: bytes, *, pretty: bool) -> bytes:
    if document is None:
        return raw
    # Root element only: top-level comments and PIs are not carried over.
    body = etree.tostring(document.getroot(), encoding="UTF-8", xml_declaration=False, pretty_print=pretty)
    return XML_DECLARATION + body


def _child_elements(document: Any) -> list[Any]:
    # Skip comments and processing instructions (their .tag is not a str).
    return [child for child in document.getroot() if isinstance(child.tag, str)]


def _local_name(element: Any) -> str:
    return etree.QName(element).localname


def _extension_of(name: str) -> str:
    base = posixpath.basename(name)
    if "." not in base:
        return ""
    return base.rpartition(".")[2].lower()


# ----------------------------
# Relationship records
# ----------------------------


@dataclass(frozen=True)
class RelationshipRecord:
    """One directed link declared in a `.rels` entry.

    `target_name` is the resolved absolute entry name for internal targets and
    the raw target (typically a URL) for external ones.
    """

    id: str
    type: str
    target_name: str
    target: str = ""
    external: bool = False


def owner_directory(rels_name: str) -> str:
    """Directory of the part that owns `rels_name` (two levels above it)."""
    return posixpath.dirname(posixpath.dirname(rels_name))


def resolve_target(base_dir: str, target: str) -> str:
    """Resolve a relationship target against the owning part's directory.

    Targets with a leading `/` are already absolute and are only normalized.
    """
    decoded = unquote(target)
    if decoded.startswith("/"):
        joined = decoded
    else:
        joined = posixpath.join(base_dir or "/", decoded)
    resolved = posixpath.normpath(joined)
    # posixpath keeps a leading "//" as-is
    return "/" + resolved.lstrip("/")


def _parse_relationship_records(name: str, document: Any) -> tuple[RelationshipRecord, ...]:
    base_dir = owner_directory(name)
    records: list[RelationshipRecord] = []
    for child in _child_elements(document):
        target = child.get("Target")
        if target is None:
            logger.debug("%s: skipping <%s> without Target", name, _local_name(child))
            continue
        external = child.get("TargetMode", "Internal") == "External"
        records.append(
            RelationshipRecord(
                id=child.get("Id", ""),
                type=child.get("Type", ""),
                target_name=target if external else resolve_target(base_dir, target),
                target=target,
                external=external,
            )
        )
    return tuple(records)


# ----------------------------
# Entry variants
# ----------------------------


@dataclass(frozen=True)
class BinaryPart:
    name: str
    raw: bytes = field(repr=False)
    kind: EntryKind = field(default=EntryKind.BINARY, init=False)

    def for_display(self) -> bytes:
        return self.raw

    def for_save(self) -> bytes:
        return self.raw


@dataclass(frozen=True)
class XmlPart:
    name: str
    raw: bytes = field(repr=False)
    document: Optional[Any] = field(default=None, repr=False, compare=False)
    error: Optional[str] = None
    kind: EntryKind = field(default=EntryKind.XML, init=False)

    @classmethod
    def from_bytes(cls, name: str, raw: bytes) -> "XmlPart":
        document, error = _parse_xml(name, raw)
        return cls(name=name, raw=raw, document=document, error=error)

    def for_display(self) -> bytes:
        return _render_xml(self.document, self.raw, pretty=True)

    def for_save(self) -> bytes:
        return _render_xml(self.document, self.raw, pretty=False)


@dataclass(frozen=True)
class Relationship:
    """A `.rels` entry; `records` are resolved once, in declaration order."""

    name: str
    raw: bytes = field(repr=False)
    document: Optional[Any] = field(default=None, repr=False, compare=False)
    error: Optional[str] = None
    records: tuple[RelationshipRecord, ...] = ()
    kind: EntryKind = field(default=EntryKind.RELATIONSHIP, init=False)

    @classmethod
    def from_bytes(cls, name: str, raw: bytes) -> "Relationship":
        document, error = _parse_xml(name, raw)
        records = _parse_relationship_records(name, document) if document is not None else ()
        return cls(name=name, raw=raw, document=document, error=error, records=records)

    def for_display(self) -> bytes:
        return _render_xml(self.document, self.raw, pretty=True)

    def for_save(self) -> bytes:
        return _render_xml(self.document, self.raw, pretty=False)


@dataclass(frozen=True)
class ContentTypes:
    """The content-types governor.

    Holds the parsed `Default` (extension -> content type) and `Override`
    (part name -> content type) tables and owns the classification rule for
    every entry of the package.
    """

    raw: bytes = field(repr=False)
    document: Optional[Any] = field(default=None, repr=False, compare=False)
    error: Optional[str] = None
    defaults: dict[str, str] = field(default_factory=dict, compare=False)
    overrides: dict[str, str] = field(default_factory=dict, compare=False)
    name: str = field(default=CONTENT_TYPES_NAME, init=False)
    kind: EntryKind = field(default=EntryKind.CONTENT_TYPES, init=False)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ContentTypes":
        document, error = _parse_xml(CONTENT_TYPES_NAME, raw)
        defaults: dict[str, str] = {}
        overrides: dict[str, str] = {}
        if document is not None:
            for child in _child_elements(document):
                tag = _local_name(child)
                content_type = child.get("ContentType")
                if content_type is None:
                    continue
                if tag == "Default" and child.get("Extension"):
                    defaults[child.get("Extension").lower()] = content_type
                elif tag == "Override" and child.get("PartName"):
                    overrides[child.get("PartName").lower()] = content_type
        return cls(raw=raw, document=document, error=error, defaults=defaults, overrides=overrides)

    def content_type_of(self, name: str) -> Optional[str]:
        """Content type declared for `name`: override first, then extension default."""
        override = self.overrides.get(name.lower())
        if override is not None:
            return override
        return self.defaults.get(_extension_of(name))

    def classify(self, name: str, raw: bytes) -> "Entry":
        return _classify_by_name(name, raw)

    def for_display(self) -> bytes:
        return _render_xml(self.document, self.raw, pretty=True)

    def for_save(self) -> bytes:
        return _render_xml(self.document, self.raw, pretty=False)


Entry = Union[ContentTypes, Relationship, XmlPart, BinaryPart]

XML_ENTRY_TYPES = (ContentTypes, Relationship, XmlPart)


def _classify_by_name(name: str, raw: bytes) -> Entry:
    if name == CONTENT_TYPES_NAME:
        return ContentTypes.from_bytes(raw)
    lowered = name.lower()
    if lowered.endswith(RELS_SUFFIX):
        return Relationship.from_bytes(name, raw)
    if lowered.endswith(XML_SUFFIX):
        return XmlPart.from_bytes(name, raw)
    return BinaryPart(name=name, raw=bytes(raw))


def classify_entry(name: str, raw: bytes, content_types: ContentTypes | None = None) -> Entry:
    """Classify one raw entry, through `content_types` when one is available."""
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise TypeError(f"classify_entry: expected bytes, got {type(raw).__name__}")
    raw = bytes(raw)
    if content_types is None:
        return _classify_by_name(name, raw)
    return content_types.classify(name, raw)
