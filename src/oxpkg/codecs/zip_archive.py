"""Zip archive codec: archive bytes <-> {entry name: raw bytes}.

The codec knows nothing about OOXML semantics. It only:
- reads every member fully into memory (directory members are skipped)
- maps member names to absolute entry names by prepending `/`
- writes entries back with the leading `/` stripped

Encoding is deterministic: members are written in mapping order with a fixed
timestamp, so the same mapping always yields the same bytes.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from typing import Mapping

from oxpkg.core.errors import ArchiveFormatError

logger = logging.getLogger(__name__)

# Earliest timestamp representable in a zip header.
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def decode_archive(data: bytes) -> dict[str, bytes]:
    """Expand archive bytes into `{"/<member name>": bytes}` in archive order.

    Raises:
        ArchiveFormatError: on corrupt or non-zip input.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"decode_archive: expected bytes, got {type(data).__name__}")

    entries: dict[str, bytes] = {}
    try:
        with zipfile.ZipFile(io.BytesIO(bytes(data)), "r") as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                name = "/" + info.filename.lstrip("/")
                if name in entries:
                    logger.warning("duplicate archive member %s; keeping the last one", name)
                entries[name] = archive.read(info)
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as e:
        raise ArchiveFormatError(f"malformed archive: {e}") from e

    logger.debug("decoded %d archive entries", len(entries))
    return entries


def encode_archive(
    entries: Mapping[str, bytes],
    *,
    compression: int = zipfile.ZIP_DEFLATED,
) -> bytes:
    """Write `entries` into new archive bytes, one member per entry."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression) as archive:
        for name, data in entries.items():
            member = name.lstrip("/")
            if not member:
                raise ValueError(f"encode_archive: invalid entry name {name!r}")
            info = zipfile.ZipInfo(member, date_time=_FIXED_DATE_TIME)
            info.compress_type = compression
            info.external_attr = 0o644 << 16
            archive.writestr(info, bytes(data))

    logger.debug("encoded %d archive entries", len(entries))
    return buf.getvalue()
