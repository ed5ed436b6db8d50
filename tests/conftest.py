"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import oxpkg` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import io
import sys
import zipfile
from pathlib import Path


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared Test Helpers: synthetic OOXML packages
# =============================================================================

CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
R_OFFICE_DOC = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
R_SLIDE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slide"
R_IMAGE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"
R_HYPERLINK = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x01\x02\x03fake-image-data"

SLIDE_CT = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"


def content_types_xml() -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<Types xmlns="{CT_NS}">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        '<Default Extension="PNG" ContentType="image/png"/>'
        f'<Override PartName="/ppt/slides/slide1.xml" ContentType="{SLIDE_CT}"/>'
        "</Types>"
    ).encode("utf-8")


def rels_xml(*rels: tuple[str, str, str], external: tuple[str, ...] = ()) -> bytes:
    """Build a `.rels` document from (id, type, target) triples."""
    items = []
    for rid, rtype, target in rels:
        mode = ' TargetMode="External"' if rid in external else ""
        items.append(f'<Relationship Id="{rid}" Type="{rtype}" Target="{target}"{mode}/>')
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<Relationships xmlns="{RELS_NS}">' + "".join(items) + "</Relationships>"
    ).encode("utf-8")


def make_pptx_entries() -> dict[str, bytes]:
    """A minimal presentation-shaped package: {absolute name: bytes}."""
    return {
        "/[Content_Types].xml": content_types_xml(),
        "/_rels/.rels": rels_xml(("rId1", R_OFFICE_DOC, "ppt/presentation.xml")),
        "/ppt/presentation.xml": (
            b'<?xml version="1.0" encoding="UTF-8"?>\n'
            b"<p:presentation xmlns:p=\"urn:p\">\n  <p:sldIdLst>\n    <p:sldId id=\"256\"/>\n"
            b"  </p:sldIdLst>\n</p:presentation>\n"
        ),
        "/ppt/_rels/presentation.xml.rels": rels_xml(("rId2", R_SLIDE, "slides/slide1.xml")),
        "/ppt/slides/slide1.xml": b'<p:sld xmlns:p="urn:p"><p:cSld><p:spTree/></p:cSld></p:sld>',
        "/ppt/slides/_rels/slide1.xml.rels": rels_xml(
            ("rId1", R_IMAGE, "../media/image1.png"),
            ("rId2", R_HYPERLINK, "https://example.com/a%20b"),
            external=("rId2",),
        ),
        "/ppt/media/image1.png": PNG_BYTES,
    }


def make_archive(entries: dict[str, bytes]) -> bytes:
    """Zip `entries` the way an Office application would (no leading slash)."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name.lstrip("/"), data)
    return buf.getvalue()


def make_pptx_bytes() -> bytes:
    return make_archive(make_pptx_entries())
