"""Archive codecs.

Only the zip container is supported; it is the container every OOXML package
uses.
"""

from __future__ import annotations

from .zip_archive import decode_archive, encode_archive

__all__ = ["decode_archive", "encode_archive"]
