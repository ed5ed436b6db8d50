from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from conftest import PNG_BYTES, R_HYPERLINK, SLIDE_CT, make_pptx_bytes, make_pptx_entries

from oxpkg.core.entries import CONTENT_TYPES_NAME
from oxpkg.core.errors import MissingContentTypes
from oxpkg.core.package import Package
from oxpkg.io.inventory import (
    INVENTORY_COLUMN_ORDER,
    entry_inventory,
    relationships_table,
    sha256_bytes,
    write_inventory_csv,
)
from oxpkg.io.unpacked import pack_directory, unpack_package


def _package() -> Package:
    return Package.from_archive_bytes(make_pptx_bytes())


def test_entry_inventory_rows_follow_package_order() -> None:
    pkg = _package()
    df = entry_inventory(pkg)

    assert list(df.columns) == INVENTORY_COLUMN_ORDER["entries"]
    assert list(df["name"]) == pkg.all_entry_names()

    slide = df.set_index("name").loc["/ppt/slides/slide1.xml"]
    assert slide["kind"] == "xml"
    assert slide["content_type"] == SLIDE_CT

    image = df.set_index("name").loc["/ppt/media/image1.png"]
    assert image["kind"] == "binary"
    assert image["size"] == len(PNG_BYTES)
    assert image["sha256"] == sha256_bytes(PNG_BYTES)


def test_relationships_table_spans_every_rels_entry() -> None:
    df = relationships_table(_package())

    assert list(df.columns) == INVENTORY_COLUMN_ORDER["relationships"]
    assert list(df["source"]) == [
        "/_rels/.rels",
        "/ppt/_rels/presentation.xml.rels",
        "/ppt/slides/_rels/slide1.xml.rels",
        "/ppt/slides/_rels/slide1.xml.rels",
    ]
    external = df[df["external"]]
    assert list(external["type"]) == [R_HYPERLINK]


def test_relationships_table_empty_has_columns() -> None:
    pkg = Package.from_raw_entries({CONTENT_TYPES_NAME: make_pptx_entries()[CONTENT_TYPES_NAME]})
    df = relationships_table(pkg)
    assert df.empty
    assert list(df.columns) == INVENTORY_COLUMN_ORDER["relationships"]


def test_write_inventory_csv_roundtrip(tmp_path: Path) -> None:
    out = tmp_path / "reports" / "entries.csv"
    df = entry_inventory(_package())
    write_inventory_csv(out, df)

    loaded = pd.read_csv(out)
    assert list(loaded.columns) == list(df.columns)
    assert list(loaded["name"]) == list(df["name"])


def test_sha256_bytes_rejects_str() -> None:
    with pytest.raises(TypeError):
        sha256_bytes("abc")  # type: ignore[arg-type]


def test_unpack_then_pack_roundtrip(tmp_path: Path) -> None:
    pkg = _package()
    written = unpack_package(pkg, tmp_path / "out")

    assert (tmp_path / "out" / "[Content_Types].xml").is_file()
    assert (tmp_path / "out" / "ppt" / "media" / "image1.png").read_bytes() == PNG_BYTES
    assert len(written) == len(pkg)
    # pretty by default
    assert b"\n  <p:cSld>" in (tmp_path / "out" / "ppt" / "slides" / "slide1.xml").read_bytes()

    repacked = pack_directory(tmp_path / "out")
    assert repacked.all_entry_names()[0] == CONTENT_TYPES_NAME
    assert set(repacked.all_entry_names()) == set(pkg.all_entry_names())
    for name in pkg.all_entry_names():
        assert repacked.entry_bytes_for_save(name) == pkg.entry_bytes_for_save(name)


def test_unpack_compact_writes_save_form(tmp_path: Path) -> None:
    pkg = _package()
    unpack_package(pkg, tmp_path, pretty=False)
    assert (tmp_path / "ppt" / "presentation.xml").read_bytes() == pkg.entry_bytes_for_save("/ppt/presentation.xml")


def test_unpack_rejects_names_escaping_the_directory(tmp_path: Path) -> None:
    pkg = _package()
    pkg.write_entry("/../escape.bin", b"x")
    # ".." is kept literally in entry names
    with pytest.raises(ValueError, match="escapes"):
        unpack_package(pkg, tmp_path / "out")


def test_pack_directory_errors(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        pack_directory(tmp_path / "missing")

    (tmp_path / "word").mkdir()
    (tmp_path / "word" / "document.xml").write_bytes(b"<w/>")
    with pytest.raises(MissingContentTypes):
        pack_directory(tmp_path)
