from __future__ import annotations

import logging

import pytest

from conftest import PNG_BYTES, content_types_xml, make_archive, make_pptx_bytes, make_pptx_entries

from oxpkg.core.entries import CONTENT_TYPES_NAME, BinaryPart, ContentTypes, Relationship, XmlPart
from oxpkg.core.errors import ArchiveFormatError, EntryNotFound, MissingContentTypes, ProtectedEntryError
from oxpkg.core.package import Package


def _package() -> Package:
    return Package.from_archive_bytes(make_pptx_bytes())


def test_load_classifies_every_entry_with_content_types_first() -> None:
    entries = make_pptx_entries()
    # Put the governor last in the archive; it must still load first.
    reordered = {k: v for k, v in entries.items() if k != CONTENT_TYPES_NAME}
    reordered[CONTENT_TYPES_NAME] = entries[CONTENT_TYPES_NAME]

    pkg = Package.from_archive_bytes(make_archive(reordered))

    names = pkg.all_entry_names()
    assert names[0] == CONTENT_TYPES_NAME
    assert set(names) == set(entries)
    assert isinstance(pkg.entry(CONTENT_TYPES_NAME), ContentTypes)
    assert isinstance(pkg.entry("/_rels/.rels"), Relationship)
    assert isinstance(pkg.entry("/ppt/presentation.xml"), XmlPart)
    assert isinstance(pkg.entry("/ppt/media/image1.png"), BinaryPart)


def test_load_without_content_types_fails() -> None:
    entries = make_pptx_entries()
    del entries[CONTENT_TYPES_NAME]

    with pytest.raises(MissingContentTypes, match=r"\[Content_Types\]\.xml"):
        Package.from_archive_bytes(make_archive(entries))


def test_missing_content_types_is_an_archive_format_error() -> None:
    with pytest.raises(ArchiveFormatError):
        Package.from_archive_bytes(make_archive({"/word/document.xml": b"<w/>"}))


def test_load_rejects_malformed_archive() -> None:
    with pytest.raises(ArchiveFormatError):
        Package.from_archive_bytes(b"garbage")


def test_entry_bytes_for_display_and_save() -> None:
    pkg = _package()

    display = pkg.entry_bytes_for_display("/ppt/presentation.xml")
    save = pkg.entry_bytes_for_save("/ppt/presentation.xml")
    assert display.startswith(b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n')
    assert save == (
        b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        b'<p:presentation xmlns:p="urn:p"><p:sldIdLst><p:sldId id="256"/></p:sldIdLst></p:presentation>'
    )
    assert len(display) > len(save)
    assert pkg.entry_bytes_for_display("/ppt/media/image1.png") == PNG_BYTES


@pytest.mark.parametrize("method", ["entry_bytes_for_display", "entry_bytes_for_save", "entry"])
def test_lookups_of_absent_names_raise_entry_not_found(method: str) -> None:
    with pytest.raises(EntryNotFound, match="/nope.xml"):
        getattr(_package(), method)("/nope.xml")


def test_entry_not_found_is_a_key_error() -> None:
    with pytest.raises(KeyError):
        _package().entry("/nope.xml")


def test_names_without_leading_slash_are_normalized() -> None:
    pkg = _package()
    assert pkg.has_entry("ppt/presentation.xml")
    assert "ppt//slides/slide1.xml" in pkg


def test_write_entry_creates_then_replaces_in_place() -> None:
    pkg = _package()
    before = pkg.all_entry_names()

    created = pkg.write_entry("/ppt/slides/slide2.xml", b"<p:sld xmlns:p='urn:p'/>")
    assert isinstance(created, XmlPart)
    assert pkg.all_entry_names() == before + ["/ppt/slides/slide2.xml"]

    replaced = pkg.write_entry("/ppt/media/image1.png", b"new-bytes")
    assert isinstance(replaced, BinaryPart)
    assert pkg.entry_bytes_for_save("/ppt/media/image1.png") == b"new-bytes"
    # replacement keeps the entry's position
    assert pkg.all_entry_names() == before + ["/ppt/slides/slide2.xml"]


def test_write_entry_accepts_malformed_xml() -> None:
    pkg = _package()
    pkg.write_entry("/ppt/presentation.xml", b"<p:presentation")
    assert pkg.entry_bytes_for_save("/ppt/presentation.xml") == b"<p:presentation"


def test_write_entry_rejects_root_name() -> None:
    with pytest.raises(ValueError):
        _package().write_entry("/", b"")


def test_writing_content_types_replaces_the_governor() -> None:
    pkg = _package()
    assert pkg.content_type_of("/ppt/media/image1.png") == "image/png"

    new_ct = content_types_xml().replace(b'ContentType="image/png"', b'ContentType="image/x-png"')
    entry = pkg.write_entry(CONTENT_TYPES_NAME, new_ct)

    assert pkg.content_types is entry
    assert pkg.content_type_of("/ppt/media/image1.png") == "image/x-png"
    assert pkg.all_entry_names()[0] == CONTENT_TYPES_NAME


def test_remove_entries_ignores_unknown_names() -> None:
    pkg = _package()
    removed = pkg.remove_entries({"/ppt/media/image1.png", "/does/not/exist.xml"})

    assert removed == ["/ppt/media/image1.png"]
    assert not pkg.has_entry("/ppt/media/image1.png")


def test_removing_content_types_is_rejected_whole() -> None:
    pkg = _package()
    count = len(pkg.all_entry_names())

    with pytest.raises(ProtectedEntryError):
        pkg.remove_entries([CONTENT_TYPES_NAME])
    with pytest.raises(ProtectedEntryError):
        pkg.remove_entries(["/ppt/media/image1.png", CONTENT_TYPES_NAME])

    assert len(pkg.all_entry_names()) == count
    assert pkg.has_entry("/ppt/media/image1.png")


def test_rename_entry_reclassifies_under_new_name() -> None:
    pkg = _package()
    moved = pkg.rename_entry("/ppt/presentation.xml", "/ppt/presentation.bin")

    assert isinstance(moved, BinaryPart)
    assert not pkg.has_entry("/ppt/presentation.xml")
    assert pkg.has_entry("/ppt/presentation.bin")


def test_rename_entry_errors() -> None:
    pkg = _package()
    with pytest.raises(EntryNotFound):
        pkg.rename_entry("/nope.xml", "/other.xml")
    with pytest.raises(ProtectedEntryError, match="rename"):
        pkg.rename_entry(CONTENT_TYPES_NAME, "/ct.xml")
    assert pkg.rename_entry("/ppt/presentation.xml", "/ppt/presentation.xml").name == "/ppt/presentation.xml"


def test_archive_roundtrip_preserves_names_and_save_bytes() -> None:
    pkg1 = _package()
    pkg1.write_entry("/docProps/app.xml", b"<Properties>\n  <Pages>1</Pages>\n</Properties>")

    pkg2 = Package.from_archive_bytes(pkg1.to_archive_bytes())

    assert set(pkg2.all_entry_names()) == set(pkg1.all_entry_names())
    for name in pkg1.all_entry_names():
        assert pkg2.entry_bytes_for_save(name) == pkg1.entry_bytes_for_save(name)


def test_archive_bytes_are_deterministic() -> None:
    pkg = _package()
    assert pkg.to_archive_bytes() == pkg.to_archive_bytes()


def test_archive_member_names_are_normalized_on_load() -> None:
    data = make_archive(
        {
            CONTENT_TYPES_NAME: content_types_xml(),
            "word//document.xml": b'<w:document xmlns:w="urn:w"/>',
        }
    )

    pkg = Package.from_archive_bytes(data)

    assert pkg.all_entry_names() == [CONTENT_TYPES_NAME, "/word/document.xml"]
    assert pkg.entry_bytes_for_display("/word//document.xml").endswith(b'<w:document xmlns:w="urn:w"/>\n')
    assert pkg.remove_entries(["/word/document.xml"]) == ["/word/document.xml"]


def test_colliding_names_keep_the_last_one(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="oxpkg.core.package"):
        pkg = Package.from_raw_entries(
            {
                "[Content_Types].xml": content_types_xml(),
                "/media//a.bin": b"first",
                "/media/a.bin": b"second",
            }
        )

    assert pkg.all_entry_names() == [CONTENT_TYPES_NAME, "/media/a.bin"]
    assert pkg.entry_bytes_for_save("/media/a.bin") == b"second"
    assert "collides" in caplog.text


def test_move_entries_reads_every_source_before_writing() -> None:
    pkg = Package.from_raw_entries(
        {CONTENT_TYPES_NAME: content_types_xml(), "/x.bin": b"X", "/y.bin": b"Y"}
    )

    pkg.move_entries([("/x.bin", "/y.bin"), ("/y.bin", "/x.bin")])

    assert pkg.entry_bytes_for_save("/x.bin") == b"Y"
    assert pkg.entry_bytes_for_save("/y.bin") == b"X"


def test_move_entries_is_all_or_nothing() -> None:
    pkg = _package()
    before = {name: pkg.entry_bytes_for_save(name) for name in pkg.all_entry_names()}

    with pytest.raises(EntryNotFound):
        pkg.move_entries([("/ppt/media/image1.png", "/ppt/media/moved.png"), ("/nope.bin", "/other.bin")])
    with pytest.raises(ProtectedEntryError):
        pkg.move_entries([("/ppt/media/image1.png", "/ppt/media/moved.png"), (CONTENT_TYPES_NAME, "/ct.xml")])

    assert {name: pkg.entry_bytes_for_save(name) for name in pkg.all_entry_names()} == before
